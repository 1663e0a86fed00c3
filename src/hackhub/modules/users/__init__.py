"""Staff users module."""

from hackhub.modules.users.models import User, UserRole
from hackhub.modules.users.repository import UserRepository

__all__ = ["User", "UserRole", "UserRepository"]
