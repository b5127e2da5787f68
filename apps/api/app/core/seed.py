import logging
import os

from sqlalchemy.orm import Session
from sqlalchemy import select

from ..models.user import User, ACCOUNT_ACTIVE, ACCOUNT_ADMIN
from .roles import Role, normalize_email, role_for_email
from .security import hash_password

logger = logging.getLogger(__name__)


def seed_admin(session: Session) -> None:
    """
    DEV admin seed.
    - Updates the account in place when the email already exists.
    - The address must sit in a staff domain, otherwise nothing is created.
    """

    email = normalize_email(os.getenv("ADMIN_EMAIL", "admin@risestudentliving.com"))
    password = os.getenv("ADMIN_PASSWORD", "admin1234!@")

    if role_for_email(email) is not Role.STAFF:
        logger.warning("ADMIN_EMAIL is outside the staff domains; skipping admin seed (email=%s)", email)
        return

    exists = session.scalar(select(User).where(User.email == email))
    if exists:
        exists.account_type = ACCOUNT_ADMIN
        exists.status = ACCOUNT_ACTIVE
        exists.password_hash = hash_password(password)
    else:
        session.add(
            User(
                email=email,
                password_hash=hash_password(password),
                name="Residence",
                surname="Administrator",
                account_type=ACCOUNT_ADMIN,
                staff_role="Administrator",
                status=ACCOUNT_ACTIVE,
            )
        )

    session.commit()
