"""
Competition Round Models

A round ("stage") is one phase of the hackathon with its own submission
window. Rounds are authored by admins and read by the eligibility engine.
"""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSON
from sqlalchemy.orm import Mapped, mapped_column

from hackhub.modules.shared import BaseModel


class RoundStatus(str, enum.Enum):
    """Admin-controlled round status."""

    UPCOMING = "upcoming"
    ACTIVE = "active"
    COMPLETED = "completed"


class CompetitionRound(BaseModel):
    """A competition round with an optional [start_time, end_time) window."""

    __tablename__ = "competition_rounds"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[RoundStatus] = mapped_column(
        Enum(RoundStatus, name="round_status"),
        nullable=False,
        default=RoundStatus.UPCOMING,
    )
    start_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    max_participants: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # [{"description": str, "template": str | None}, ...]
    requirements: Mapped[list | None] = mapped_column(JSON, nullable=True)
    prizes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (Index("ix_competition_rounds_status_start", "status", "start_time"),)

    def __repr__(self) -> str:
        return f"<CompetitionRound(id={self.id}, name={self.name}, status={self.status.value})>"
