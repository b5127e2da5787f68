# tests/conftest.py
import os

# Settings are read at import time; point them at an in-memory database first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["STAFF_EMAIL_DOMAINS"] = "risestudentliving.com"
os.environ["ALLOWED_EMAIL_DOMAINS"] = ""
os.environ["REPORT_TIMEZONE"] = "Africa/Johannesburg"

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.core.security import create_access_token, hash_password
from app.core.ticket_rules import TicketStatus, Urgency
from app.db import SessionLocal, engine
from app.main import app
from app.models.ticket import Ticket
from app.models.user import ACCOUNT_ACTIVE, ACCOUNT_ADMIN, ACCOUNT_STUDENT, Base, User
from app.services.lifecycle import TicketRecord

STAFF_EMAIL = "warden@risestudentliving.com"
STUDENT_EMAIL = "thabo@student.spu.ac.za"
OTHER_STUDENT_EMAIL = "lerato@student.spu.ac.za"
PASSWORD = "correct-horse-1"

T0 = datetime(2026, 3, 1, 8, 0, tzinfo=timezone.utc)


# ───────────────────────────── Records ───────────────────────────── #

@pytest.fixture
def record_factory():
    counter = {"id": 0}

    def _make(**overrides) -> TicketRecord:
        counter["id"] += 1
        fields = dict(
            id=counter["id"],
            room_number="A104",
            issue_type="Plumbing",
            urgency=Urgency.STANDARD,
            description="Leaking tap",
            reporter_email=STUDENT_EMAIL,
            status=TicketStatus.UNRESOLVED,
            date_reported=T0 + timedelta(hours=counter["id"]),
            resolved_by=None,
            resolved_at=None,
        )
        fields.update(overrides)
        return TicketRecord(**fields)

    return _make


# ───────────────────────────── Database ───────────────────────────── #

@pytest.fixture
def session():
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as s:
        yield s
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(session):
    return TestClient(app)


@pytest.fixture
def account_factory(session):
    def _make(email: str, account_type: str = ACCOUNT_STUDENT, **fields) -> User:
        u = User(
            email=email,
            password_hash=hash_password(fields.pop("password", PASSWORD)),
            name=fields.pop("name", "Test"),
            surname=fields.pop("surname", "Account"),
            account_type=account_type,
            status=fields.pop("status", ACCOUNT_ACTIVE),
            **fields,
        )
        session.add(u)
        session.commit()
        session.refresh(u)
        return u

    return _make


@pytest.fixture
def staff_user(account_factory):
    return account_factory(STAFF_EMAIL, account_type=ACCOUNT_ADMIN, staff_role="Administrator")


@pytest.fixture
def student_user(account_factory):
    return account_factory(STUDENT_EMAIL, room_number="A104", uobk_id="UOBK-001")


@pytest.fixture
def other_student(account_factory):
    return account_factory(OTHER_STUDENT_EMAIL, room_number="B201", uobk_id="UOBK-002")


def auth_headers(email: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(email)}"}


@pytest.fixture
def staff_headers(staff_user):
    return auth_headers(staff_user.email)


@pytest.fixture
def student_headers(student_user):
    return auth_headers(student_user.email)


@pytest.fixture
def other_student_headers(other_student):
    return auth_headers(other_student.email)


@pytest.fixture
def stored_ticket_factory(session):
    """Insert rows directly, including legacy spellings the API never writes."""

    def _make(**fields) -> Ticket:
        t = Ticket(
            room_number=fields.pop("room_number", "A104"),
            issue_type=fields.pop("issue_type", "Plumbing"),
            urgency=fields.pop("urgency", "Standard"),
            description=fields.pop("description", "Leaking tap"),
            reporter_email=fields.pop("reporter_email", STUDENT_EMAIL),
            status=fields.pop("status", "Unresolved"),
            date_reported=fields.pop("date_reported", T0),
            **fields,
        )
        session.add(t)
        session.commit()
        session.refresh(t)
        return t

    return _make
