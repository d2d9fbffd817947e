from typing import Optional
from fastapi import Depends, Header
from sqlalchemy.orm import Session
import structlog

from src.database import get_db
from src.models import User, UserSession
from src.auth.service import UserService
from src.auth.session_service import SessionService
from src.exceptions import (
    AuthenticationError, AuthorizationError, MissingHeaderError, MissingTokenError, SessionInvalidError
)

def extract_bearer_token(authorization: Optional[str]) -> str:
    """Pull the token out of an ``Authorization: Bearer <token>`` header"""
    if not authorization:
        raise MissingHeaderError()
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise MissingTokenError()
    return parts[1].strip()

def get_bearer_token(authorization: Optional[str] = Header(None)) -> str:
    return extract_bearer_token(authorization)

def get_current_session(token: str = Depends(get_bearer_token), db: Session = Depends(get_db)) -> UserSession:
    """Validate the bearer token against the session registry"""
    return SessionService(db).validate(token)

async def get_current_user_id(session: UserSession = Depends(get_current_session)) -> int:
    """Caller's user id; bound to the request's log context"""
    # async so the binding lands in the request context, not a threadpool copy
    structlog.contextvars.bind_contextvars(user_id=session.user_id)
    return session.user_id

def get_current_user(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)) -> User:
    """Get current authenticated user"""
    user = UserService.get_user_by_id(db, user_id)
    if user is None:
        raise SessionInvalidError()
    return user

def ensure_admin(user: Optional[User]) -> User:
    """Authorization predicate shared by every admin-only operation"""
    if user is None or not user.is_admin:
        raise AuthorizationError()
    return user

def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Require admin role; the role is re-read from the database on every request"""
    return ensure_admin(current_user)

def get_optional_user(authorization: Optional[str] = Header(None), db: Session = Depends(get_db)) -> Optional[User]:
    """Resolve the caller on public routes; anonymous or stale tokens count as public"""
    if not authorization:
        return None
    try:
        token = extract_bearer_token(authorization)
        record = SessionService(db).validate(token)
    except AuthenticationError:
        return None
    return UserService.get_user_by_id(db, record.user_id)
