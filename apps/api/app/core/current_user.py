from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from sqlalchemy import select
import jwt

from ..db import get_session
from ..models.user import User, ACCOUNT_PAUSED
from .security import decode_token

bearer = HTTPBearer(auto_error=False)


def load_token_user(session: Session, token: str) -> User | None:
    try:
        payload = decode_token(token)
        email = str(payload["sub"])
    except (jwt.PyJWTError, KeyError):
        return None
    return session.scalar(select(User).where(User.email == email))


def get_current_user(
    creds: HTTPAuthorizationCredentials = Depends(bearer),
    session: Session = Depends(get_session),
) -> User:
    if not creds:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = decode_token(creds.credentials)
        email = str(payload["sub"])
    except (jwt.PyJWTError, KeyError):
        raise HTTPException(status_code=401, detail="Invalid token")

    user = session.scalar(select(User).where(User.email == email))
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    if user.status == ACCOUNT_PAUSED:
        raise HTTPException(status_code=403, detail="Account paused")
    return user
