import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from officer_duty.core.dependencies import get_current_user, get_optional_user
from officer_duty.core.policy import Role
from officer_duty.core.security import create_access_token, verify_password
from officer_duty.database.session import get_db
from officer_duty.models.user import User
from officer_duty.schemas.common import ApiResponse, ok
from officer_duty.schemas.user import AuthData, LoginRequest, PrincipalOut, RegisterRequest
from officer_duty.services.officer_service import create_principal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _build_auth_response(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "role": user.role,
        "token": create_access_token(user),
    }


@router.post("/register", response_model=ApiResponse[AuthData], status_code=201)
def register(
    data: RegisterRequest,
    db: Session = Depends(get_db),
    current_user: User | None = Depends(get_optional_user)
):
    # Self-service sign-up yields officers; other roles need an admin token.
    if data.role != Role.officer and (current_user is None or current_user.role != Role.admin):
        raise HTTPException(status_code=403, detail="Only admins can create admin or supervisor accounts")

    user = create_principal(
        db,
        username=data.username,
        password=data.password,
        role=data.role,
        full_name=data.full_name,
        department=data.department,
    )
    return ok(_build_auth_response(user))


@router.post("/login", response_model=ApiResponse[AuthData])
def login(data: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.username == data.username.strip()).first()

    if not user or not verify_password(data.password, user.password_hash):
        logger.warning("Failed login attempt for username %r", data.username)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return ok(_build_auth_response(user))


@router.get("/me", response_model=ApiResponse[PrincipalOut])
def get_me(current_user: User = Depends(get_current_user)):
    return ok(current_user)
