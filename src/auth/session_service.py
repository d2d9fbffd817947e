from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy.orm import Session
import structlog

from src.models import User, UserSession, SessionStatus, SessionEndReason
from src.auth.utils import create_access_token, decode_access_token, token_subject
from src.config import settings
from src.exceptions import (
    TokenExpiredError, SessionInvalidError, SessionSupersededError, AlreadyLoggedOutError
)

logger = structlog.get_logger(__name__)

class SessionService:
    """
    Session registry: issues tokens and decides whether they are still live.

    The ``user_sessions`` table is the only source of truth. A user holds at
    most one active row; rows only ever move from active to inactive, and the
    ``ended_reason`` records why (logout, expiry, or a newer login elsewhere).
    """

    def __init__(self, db: Session, token_ttl: Optional[timedelta] = None):
        self.db = db
        self.token_ttl = token_ttl if token_ttl is not None else timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    def login(self, user: User, new_session: bool = False) -> str:
        """Return the user's live token, minting one if needed"""
        now = datetime.utcnow()
        active = self.get_active_session(user.id)

        if active:
            if active.expires_at <= now:
                self._close(active, SessionEndReason.EXPIRED, now)
            elif new_session:
                self._close(active, SessionEndReason.SUPERSEDED, now)
                logger.info("session_superseded", user_id=user.id, session_id=active.id)
            else:
                logger.info("session_reused", user_id=user.id, session_id=active.id)
                return active.token

        expires_at = now + self.token_ttl
        token = create_access_token(user.id, expires_at=expires_at)
        record = UserSession(
            user_id=user.id,
            token=token,
            status=SessionStatus.ACTIVE.value,
            issued_at=now,
            expires_at=expires_at
        )
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)

        logger.info("session_started", user_id=user.id, session_id=record.id)
        return token

    def validate(self, token: str) -> UserSession:
        """Verify a token and return its active session record"""
        try:
            payload = decode_access_token(token)
        except TokenExpiredError:
            record = self._find(token, active_only=True)
            if record:
                self._close(record, SessionEndReason.EXPIRED, datetime.utcnow())
                logger.info("session_expired", user_id=record.user_id, session_id=record.id)
            raise

        user_id = token_subject(payload)
        record = self._find(token)
        if not record or record.user_id != user_id:
            raise SessionInvalidError()

        if record.status != SessionStatus.ACTIVE.value:
            if record.ended_reason == SessionEndReason.SUPERSEDED.value:
                raise SessionSupersededError()
            raise SessionInvalidError()

        return record

    def logout(self, token: str) -> UserSession:
        record = self._find(token, active_only=True)
        if not record:
            raise AlreadyLoggedOutError()

        self._close(record, SessionEndReason.LOGOUT, datetime.utcnow())
        logger.info("session_logged_out", user_id=record.user_id, session_id=record.id)
        return record

    def get_active_session(self, user_id: int) -> Optional[UserSession]:
        return self.db.query(UserSession).filter(
            UserSession.user_id == user_id,
            UserSession.status == SessionStatus.ACTIVE.value
        ).order_by(UserSession.issued_at.desc()).first()

    def _find(self, token: str, active_only: bool = False) -> Optional[UserSession]:
        query = self.db.query(UserSession).filter(UserSession.token == token)
        if active_only:
            query = query.filter(UserSession.status == SessionStatus.ACTIVE.value)
        return query.first()

    def _close(self, record: UserSession, reason: SessionEndReason, now: datetime) -> None:
        record.status = SessionStatus.INACTIVE.value
        record.ended_reason = reason.value
        record.ended_at = now
        self.db.commit()
