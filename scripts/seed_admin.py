"""
Seed Staff User

Creates the first admin (or a jury member) for HackHub. Credentials come
from the environment so nothing sensitive lives in the repository.

Usage:
    SEED_EMAIL=admin@example.com SEED_PASSWORD=... \\
    SEED_FIRST_NAME=Ada SEED_LAST_NAME=Lovelace \\
    python scripts/seed_admin.py

Set SEED_ROLE=jury to create a jury member instead of an admin.
"""

import asyncio
import os
import sys

from hackhub.core.database import async_session_maker, close_db
from hackhub.core.security import hash_password
from hackhub.modules.users.models import UserRole
from hackhub.modules.users.repository import UserRepository


def _require_env(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        print(f"Missing required environment variable: {name}")
        sys.exit(1)
    return value


async def seed_staff_user() -> None:
    """Create the staff user if no account with the email exists."""
    email = _require_env("SEED_EMAIL").lower()
    password = _require_env("SEED_PASSWORD")
    first_name = os.getenv("SEED_FIRST_NAME", "Hackathon")
    last_name = os.getenv("SEED_LAST_NAME", "Admin")
    role = UserRole(os.getenv("SEED_ROLE", UserRole.ADMIN.value))

    if len(password) < 8:
        print("SEED_PASSWORD must be at least 8 characters")
        sys.exit(1)

    async with async_session_maker() as db:
        existing_user = await UserRepository.get_by_email(db, email)
        if existing_user:
            print(f"Staff user already exists: {email}")
            print(f"  ID: {existing_user.id}")
            print(f"  Role: {existing_user.role.value}")
            return

        user = await UserRepository.create(
            db,
            email=email,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            role=role,
        )
        await db.commit()

        print("Staff user created successfully!")
        print(f"  Email: {email}")
        print(f"  Name: {first_name} {last_name}")
        print(f"  ID: {user.id}")
        print(f"  Role: {user.role.value}")

    await close_db()


if __name__ == "__main__":
    asyncio.run(seed_staff_user())
