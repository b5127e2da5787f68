import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ..db import get_session
from ..models.user import User, ACCOUNT_ACTIVE, ACCOUNT_PAUSED, ACCOUNT_ADMIN, ACCOUNT_STUDENT
from ..core.config import settings
from ..core.current_user import get_current_user
from ..core.roles import Role, email_domain, normalize_email, require_staff, role_for_email
from ..core.security import hash_password
from ..schemas.user import AccountOut, AdminAccountCreateIn, StudentAccountCreateIn
from ..services.ticket_feed import ticket_feed

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/accounts", tags=["admin-accounts"])

ALLOWED_ACCOUNT_TYPES = {ACCOUNT_STUDENT, ACCOUNT_ADMIN}


def clean_email(raw: str) -> str:
    try:
        return normalize_email(raw)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=f"Invalid email: {exc}")


def get_account_or_404(session: Session, account_id: int) -> User:
    target = session.get(User, account_id)
    if not target:
        raise HTTPException(status_code=404, detail="Account not found")
    return target


def save_account(session: Session, account: User) -> User:
    session.add(account)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=409, detail="An account with this email already exists")
    session.refresh(account)
    return account


@router.get("", response_model=list[AccountOut])
def list_accounts(
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
    account_type: str | None = Query(default=None),
):
    require_staff(user)

    stmt = select(User)
    if account_type is not None:
        if account_type not in ALLOWED_ACCOUNT_TYPES:
            raise HTTPException(status_code=422, detail=f"Invalid account type: {account_type}")
        stmt = stmt.where(User.account_type == account_type)
    stmt = stmt.order_by(User.id.asc())
    return list(session.scalars(stmt).all())


@router.post("/students", response_model=AccountOut)
def create_student_account(
    payload: StudentAccountCreateIn,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    require_staff(user)

    email = clean_email(payload.email)
    if settings.allowed_email_domains and email_domain(email) not in settings.allowed_email_domains:
        raise HTTPException(status_code=422, detail="Student email domain is not allowed")
    if role_for_email(email) is Role.STAFF:
        raise HTTPException(status_code=422, detail="Staff addresses cannot be onboarded as students")

    account = User(
        email=email,
        password_hash=hash_password(payload.password),
        name=payload.name.strip(),
        surname=payload.surname.strip(),
        account_type=ACCOUNT_STUDENT,
        room_number=payload.room_number.strip(),
        uobk_id=payload.uobk_id.strip(),
        status=ACCOUNT_ACTIVE,
    )
    account = save_account(session, account)
    logger.info("student account created (account_id=%s, by=%s)", account.id, user.email)
    return account


@router.post("/admins", response_model=AccountOut)
def create_admin_account(
    payload: AdminAccountCreateIn,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    require_staff(user)

    email = clean_email(payload.email)
    if role_for_email(email) is not Role.STAFF:
        domains = ", ".join(f"@{d}" for d in settings.staff_email_domains)
        raise HTTPException(status_code=422, detail=f"Admin emails must end with {domains}")

    account = User(
        email=email,
        password_hash=hash_password(payload.password),
        name=payload.name.strip(),
        surname=payload.surname.strip(),
        account_type=ACCOUNT_ADMIN,
        staff_role=payload.staff_role,
        status=ACCOUNT_ACTIVE,
    )
    account = save_account(session, account)
    logger.info("admin account created (account_id=%s, by=%s)", account.id, user.email)
    return account


@router.patch("/{account_id}/status", response_model=AccountOut)
def toggle_account_status(
    account_id: int,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    require_staff(user)

    target = get_account_or_404(session, account_id)
    if target.id == user.id:
        raise HTTPException(status_code=422, detail="You cannot pause your own account")

    target.status = ACCOUNT_PAUSED if target.status == ACCOUNT_ACTIVE else ACCOUNT_ACTIVE
    session.commit()
    session.refresh(target)
    logger.info("account status changed (account_id=%s, status=%s, by=%s)", target.id, target.status, user.email)
    # Live subscribers re-check their account on the next snapshot.
    ticket_feed.publish_from_thread()
    return target


@router.delete("/{account_id}")
def delete_account(
    account_id: int,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    require_staff(user)

    target = get_account_or_404(session, account_id)
    if target.id == user.id:
        raise HTTPException(status_code=422, detail="You cannot remove your own account")

    session.delete(target)
    session.commit()
    logger.info("account removed (account_id=%s, by=%s)", account_id, user.email)
    ticket_feed.publish_from_thread()
    return {"ok": True}
