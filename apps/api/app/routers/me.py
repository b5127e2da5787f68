from fastapi import APIRouter, Depends
from app.core.current_user import get_current_user
from app.core.roles import role_for_email, portal_for_role
from app.models.user import User
from app.schemas.auth import MeOut

router = APIRouter(tags=["me"])

@router.get("/me", response_model=MeOut)
def me(user: User = Depends(get_current_user)):
    role = role_for_email(user.email)
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "surname": user.surname,
        "account_type": user.account_type,
        "room_number": user.room_number,
        "role": role.value,
        "portal": portal_for_role(role),
    }
