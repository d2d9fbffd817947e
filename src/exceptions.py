"""
Application error taxonomy.

Services raise these; the handlers registered in ``src.main`` turn them into
``{"status": "error", "message": ...}`` responses with the matching HTTP status.
"""

from fastapi import status


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


# Authentication (401)
class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"

class MissingHeaderError(AuthenticationError):
    message = "Authorization Header Missing"

class MissingTokenError(AuthenticationError):
    message = "Access Denied, Token Missing"

class InvalidTokenError(AuthenticationError):
    message = "Invalid Token"

class TokenExpiredError(AuthenticationError):
    message = "Token Expired"

class SessionInvalidError(AuthenticationError):
    message = "Session is no longer valid"

class SessionSupersededError(AuthenticationError):
    message = "Session was signed in on another device"

class AlreadyLoggedOutError(AuthenticationError):
    message = "Already logged out"

class InvalidCredentialsError(AuthenticationError):
    message = "Invalid credentials"


# Authorization (403)
class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Access denied, admin only"


# Validation (400)
class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"

class TokenInvalidOrExpiredError(ValidationError):
    message = "Token is invalid or has expired"


# Not found (404)
class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"

class UserNotFoundError(NotFoundError):
    message = "User not found"

class PackageNotFoundError(NotFoundError):
    message = "Package not found"

class PackageDetailNotFoundError(NotFoundError):
    message = "Package details not found"

class BookingNotFoundError(NotFoundError):
    message = "Booking not found"


# Conflict (409; already-cancelled answers 400)
class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    message = "Conflict"

class DuplicateEmailError(ConflictError):
    message = "User already exists"

class DetailAlreadyExistsError(ConflictError):
    message = "Package details already exist, use updatePackageDetails instead"

class AlreadyCancelledError(ConflictError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Booking is already cancelled"


# Outbound dependencies
class DependencyError(AppError):
    message = "Failed to send email. Please try again later."
