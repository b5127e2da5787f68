from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, DateTime, func
from .user import Base

class Ticket(Base):
    __tablename__ = "maintenance_logs"

    id: Mapped[int] = mapped_column(primary_key=True)
    room_number: Mapped[str] = mapped_column(String(20))
    issue_type: Mapped[str] = mapped_column(String(50))
    urgency: Mapped[str | None] = mapped_column(String(32), nullable=True, default="Standard")
    description: Mapped[str] = mapped_column(Text)

    # Copied from the authenticated identity at creation; never edited afterwards.
    reporter_email: Mapped[str] = mapped_column(String(255), index=True)

    # Legacy rows may still hold "Complete" / "In Progress"; read through ticket_rules.normalize_status.
    status: Mapped[str | None] = mapped_column(String(32), nullable=True, default="Unresolved")

    date_reported: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now(), index=True)

    # Set together by the resolve transition.
    resolved_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    resolved_at: Mapped[DateTime | None] = mapped_column(DateTime(timezone=True), nullable=True)
