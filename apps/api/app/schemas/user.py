from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class _AccountCreateIn(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    surname: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=8, max_length=72)

    @field_validator("password")
    @classmethod
    def password_bytes_le_72(cls, v: str) -> str:
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password must be <= 72 bytes (bcrypt limit).")
        return v


class StudentAccountCreateIn(_AccountCreateIn):
    room_number: str = Field(min_length=1, max_length=20)
    uobk_id: str = Field(min_length=1, max_length=50)


class AdminAccountCreateIn(_AccountCreateIn):
    staff_role: Literal["Administrator", "Maintenance Staff", "Residence Management"] = "Administrator"


class AccountOut(BaseModel):
    id: int
    email: str
    name: str | None = None
    surname: str | None = None
    account_type: str
    room_number: str | None = None
    uobk_id: str | None = None
    staff_role: str | None = None
    status: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True
