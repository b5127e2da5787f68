from enum import Enum
from typing import Iterable

from email_validator import validate_email, EmailNotValidError
from fastapi import HTTPException

from .config import settings


class Role(str, Enum):
    STUDENT = "student"
    STAFF = "staff"


PORTALS = {
    Role.STAFF: "/admin",
    Role.STUDENT: "/student",
}


def email_domain(email: str) -> str:
    _, _, domain = (email or "").strip().lower().rpartition("@")
    return domain


def role_for_email(email: str, staff_domains: Iterable[str] | None = None) -> Role:
    """
    Staff are recognised purely by the domain of their verified email.
    Every other identity lands in the student portal.
    """
    domains = settings.staff_email_domains if staff_domains is None else list(staff_domains)
    domain = email_domain(email)
    if domain and domain in {d.lower().lstrip("@") for d in domains}:
        return Role.STAFF
    return Role.STUDENT


def portal_for_role(role: Role) -> str:
    return PORTALS[role]


def normalize_email(value: str) -> str:
    """Validate and lower-case an address on the way into the store."""
    try:
        return validate_email((value or "").strip(), check_deliverability=False).normalized.lower()
    except EmailNotValidError as exc:
        raise ValueError(str(exc)) from exc


def is_staff(user) -> bool:
    return role_for_email(user.email) is Role.STAFF


def require_staff(user) -> None:
    if not is_staff(user):
        raise HTTPException(status_code=403, detail="Forbidden")
