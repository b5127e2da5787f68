from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, DateTime, ForeignKey, func, Text
from .user import Base

class TicketEvent(Base):
    __tablename__ = "ticket_events"

    id: Mapped[int] = mapped_column(primary_key=True)

    ticket_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("maintenance_logs.id", ondelete="CASCADE"), index=True
    )
    # Not a foreign key: the audit trail outlives removed accounts.
    actor_email: Mapped[str] = mapped_column(String(255))

    # "ticket_created" | "status_changed"
    type: Mapped[str] = mapped_column(String(32), default="status_changed")

    from_value: Mapped[str | None] = mapped_column(String(64), nullable=True)
    to_value: Mapped[str | None] = mapped_column(String(64), nullable=True)

    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
