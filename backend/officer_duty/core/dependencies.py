from datetime import datetime
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from officer_duty.config import settings
from officer_duty.database.session import get_db
from officer_duty.core.policy import Action, Resource, is_allowed
from officer_duty.core.security import ACCESS_TOKEN_TYPE, decode_token
from officer_duty.models.user import User

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/login", auto_error=False)


def get_now() -> datetime:
    """Local wall-clock time; overridden in tests to pin the clock."""
    return datetime.now()


def _user_from_token(db: Session, token: str) -> User:
    payload = decode_token(token)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized to access this route"
        )

    if payload.get("token_type") != ACCESS_TOKEN_TYPE:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type"
        )

    sub = payload.get("sub")
    if sub is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload"
        )

    try:
        user_id = int(sub)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token subject"
        )

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )
    return user


def get_current_user(
    db: Session = Depends(get_db),
    token: str = Depends(oauth2_scheme)
):
    return _user_from_token(db, token)


def get_optional_user(
    db: Session = Depends(get_db),
    token: str | None = Depends(optional_oauth2_scheme)
):
    if not token:
        return None
    return _user_from_token(db, token)


def require_permission(resource: Resource, action: Action):
    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if not is_allowed(current_user.role, resource, action):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User role is not authorized"
            )
        return current_user

    return dependency
