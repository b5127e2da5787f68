import logging
from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..schemas.auth import LoginIn, TokenOut
from ..core.security import verify_password, create_access_token
from ..core.roles import normalize_email, role_for_email, portal_for_role
from ..models.user import User, ACCOUNT_PAUSED
from ..db import get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, session: Session = Depends(get_session)):
    try:
        email = normalize_email(payload.email)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid credentials.")
    user = session.scalar(select(User).where(User.email == email))
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials.")
    if user.status == ACCOUNT_PAUSED:
        raise HTTPException(status_code=403, detail="Account paused.")
    role = role_for_email(user.email)
    logger.info("login (email=%s, role=%s)", user.email, role.value)
    return TokenOut(
        access_token=create_access_token(user.email),
        role=role.value,
        portal=portal_for_role(role),
    )
