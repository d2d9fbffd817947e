from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import structlog

from src.database import get_db
from src.auth.schemas import (
    RegisterRequest, LoginRequest, AuthResponse, UserOut, UserProfile,
    ForgotPasswordRequest, ResetPasswordRequest
)
from src.auth.service import UserService
from src.auth.session_service import SessionService
from src.auth.dependencies import get_bearer_token, get_current_user
from src.models import User
from src.notifications.email_service import EmailService, get_email_service
from src.exceptions import UserNotFoundError, DependencyError
from src.schemas import MessageResponse

logger = structlog.get_logger(__name__)

router = APIRouter()

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_user(payload: RegisterRequest, db: Session = Depends(get_db)):
    """Register a new user and open their first session"""
    user = UserService.register(db, name=payload.name, email=payload.email, password=payload.password)
    token = SessionService(db).login(user)
    return AuthResponse(token=token, user=UserOut.model_validate(user), message="Registration successful")

@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """Log in; an already logged-in user gets their existing token back"""
    user = UserService.verify_credentials(db, payload.email, payload.password)
    sessions = SessionService(db)
    existing = sessions.get_active_session(user.id)
    token = sessions.login(user, new_session=payload.new_session)

    message = "Login successful"
    if existing is not None and existing.token == token:
        message = "User already logged in"
    return AuthResponse(token=token, user=UserOut.model_validate(user), message=message)

@router.post("/logout", response_model=MessageResponse)
def logout(token: str = Depends(get_bearer_token), db: Session = Depends(get_db)):
    """End the session held by the presented token"""
    SessionService(db).logout(token)
    return MessageResponse(message="Logout successful")

@router.post("/me", response_model=UserProfile)
def read_users_me(current_user: User = Depends(get_current_user)):
    """Get current user profile"""
    return current_user

@router.post("/forgotPassword", response_model=MessageResponse)
def forgot_password(
    payload: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service)
):
    """Email a reset link; the answer never reveals whether the address is registered"""
    try:
        user, reset_token = UserService.set_password_reset_token(db, payload.email)
    except UserNotFoundError:
        return MessageResponse(message="If an account with that email exists, a password reset link has been sent.")

    try:
        email_service.send_password_reset_email(user.email, reset_token, user.name)
    except DependencyError:
        UserService.clear_password_reset_token(db, user)
        logger.warning("password_reset_rolled_back", user_id=user.id)
        raise DependencyError("Failed to send password reset email. Please try again later.")

    return MessageResponse(message="Password reset link has been sent to your email address.")

@router.get("/verifyResetToken/{token}")
def verify_reset_token(token: str, db: Session = Depends(get_db)):
    """Check that a reset token is still usable"""
    user = UserService.get_user_by_reset_token(db, token)
    return {"status": "success", "message": "Token is valid", "data": {"email": user.email}}

@router.post("/resetPassword/{token}", response_model=MessageResponse)
def reset_password(token: str, payload: ResetPasswordRequest, db: Session = Depends(get_db)):
    UserService.consume_reset_token(db, token, payload.password)
    return MessageResponse(
        message="Password has been reset successfully. You can now login with your new password."
    )
