from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import String, DateTime, func

ACCOUNT_ACTIVE = "Active"
ACCOUNT_PAUSED = "Paused"

ACCOUNT_STUDENT = "student"
ACCOUNT_ADMIN = "admin"

class Base(DeclarativeBase):
    pass

class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    # Always stored lower-cased.
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    surname: Mapped[str | None] = mapped_column(String(100), nullable=True)
    account_type: Mapped[str] = mapped_column(String(16), default=ACCOUNT_STUDENT)  # student/admin

    # Students
    room_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    uobk_id: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Admins: Administrator / Maintenance Staff / Residence Management
    staff_role: Mapped[str | None] = mapped_column(String(50), nullable=True)

    status: Mapped[str] = mapped_column(String(16), default=ACCOUNT_ACTIVE)

    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
