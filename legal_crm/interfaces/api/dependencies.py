"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from legal_crm.domain.entities import User
from legal_crm.domain.entities.role import ROLE_ADMIN, ROLE_SECRETARY, ROLE_SUPERVISOR
from legal_crm.infrastructure.database import get_db
from legal_crm.infrastructure.repositories import UserRepository
from legal_crm.infrastructure.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")

_STAFF_ROLES = (ROLE_ADMIN, ROLE_SUPERVISOR, ROLE_SECRETARY)


def _credentials_error(detail: str = "Μη έγκυρα διαπιστευτήρια") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_user(token: str, db: Session) -> User:
    """Resolve the authenticated user for the provided token."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _credentials_error() from exc

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError) as exc:
        raise _credentials_error() from exc

    user = UserRepository(db).get(user_id)
    if user is None or user.deleted:
        raise _credentials_error("Ο χρήστης δεν βρέθηκε")
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Return the authenticated user from the provided token."""

    return resolve_current_user(token, db)


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Ensure the authenticated user is active."""

    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Ανενεργός χρήστης",
        )
    return current_user


def require_staff(current_user: User = Depends(get_current_active_user)) -> User:
    """Only office staff (not clients) may send notifications to others."""

    if not any(current_user.has_role(alias) for alias in _STAFF_ROLES):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Δεν επιτρέπεται",
        )
    return current_user
