"""
Event Settings Model

A single row of event-wide switches edited from the admin settings page.
The email provider key stays in the environment; only the on/off switch
and sender address live here.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from hackhub.modules.shared import BaseModel


class EventSettings(BaseModel):
    """Event dates, feature switches and email configuration."""

    __tablename__ = "event_settings"

    registration_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    submission_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    submission_deadline: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    orientation_link: Mapped[str | None] = mapped_column(String(500), nullable=True)
    event_start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    event_end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Email
    enable_emails: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    from_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<EventSettings(id={self.id}, enable_emails={self.enable_emails})>"
