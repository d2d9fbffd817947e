from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional, Tuple
from datetime import datetime, timedelta
import structlog

from src.models import User, UserRole
from src.auth.utils import get_password_hash, verify_password, generate_reset_token, hash_reset_token
from src.config import settings
from src.exceptions import (
    DuplicateEmailError, UserNotFoundError, InvalidCredentialsError, TokenInvalidOrExpiredError
)

logger = structlog.get_logger(__name__)

class UserService:
    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        """Get user by email"""
        return db.query(User).filter(User.email == email.lower()).first()

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        """Get user by ID"""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def register(
        db: Session,
        name: str,
        email: str,
        password: str,
        role: UserRole = UserRole.USER
    ) -> User:
        """Create a new user; only the salted hash of the password is stored"""
        email = email.lower()
        if UserService.get_user_by_email(db, email):
            raise DuplicateEmailError()

        db_user = User(
            name=name,
            email=email,
            password_hash=get_password_hash(password),
            role=UserRole(role).value
        )

        try:
            db.add(db_user)
            db.commit()
            db.refresh(db_user)
        except IntegrityError:
            db.rollback()
            raise DuplicateEmailError()

        logger.info("user_registered", user_id=db_user.id, role=db_user.role)
        return db_user

    @staticmethod
    def verify_credentials(db: Session, email: str, password: str) -> User:
        """Return the user for a valid email/password pair"""
        user = UserService.get_user_by_email(db, email)
        if not user:
            raise UserNotFoundError()
        if not verify_password(password, user.password_hash):
            logger.warning("login_rejected", user_id=user.id, reason="invalid_password")
            raise InvalidCredentialsError()
        return user

    @staticmethod
    def set_role(db: Session, user: User, role: UserRole) -> User:
        user.role = UserRole(role).value
        user.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(user)
        logger.info("user_role_changed", user_id=user.id, role=user.role)
        return user

    # ------------------------------------------------------------------
    # Password reset
    # ------------------------------------------------------------------
    @staticmethod
    def set_password_reset_token(db: Session, email: str) -> Tuple[User, str]:
        """
        Issue a one-hour reset token.

        The plaintext token is returned once, for delivery by email; only its
        SHA-256 digest is persisted.
        """
        user = UserService.get_user_by_email(db, email)
        if not user:
            raise UserNotFoundError()

        token = generate_reset_token()
        user.reset_password_token = hash_reset_token(token)
        user.reset_password_expires = datetime.utcnow() + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
        db.commit()
        db.refresh(user)

        logger.info("password_reset_requested", user_id=user.id)
        return user, token

    @staticmethod
    def clear_password_reset_token(db: Session, user: User) -> None:
        """Drop an issued reset token, e.g. when it could not be delivered"""
        user.reset_password_token = None
        user.reset_password_expires = None
        db.commit()

    @staticmethod
    def get_user_by_reset_token(db: Session, token: str) -> User:
        user = db.query(User).filter(
            User.reset_password_token == hash_reset_token(token),
            User.reset_password_expires > datetime.utcnow()
        ).first()
        if not user:
            raise TokenInvalidOrExpiredError()
        return user

    @staticmethod
    def consume_reset_token(db: Session, token: str, new_password: str) -> User:
        """Replace the password and invalidate the token"""
        user = UserService.get_user_by_reset_token(db, token)

        user.password_hash = get_password_hash(new_password)
        user.reset_password_token = None
        user.reset_password_expires = None
        db.commit()
        db.refresh(user)

        logger.info("password_reset_completed", user_id=user.id)
        return user
