from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import structlog

from src.database import get_db
from src.auth.dependencies import get_current_user_id, require_admin
from src.models import User, PaymentStatus
from src.bookings.schemas import (
    BookingCreate, BookingIdRequest, PaymentUpdateRequest, BookingCancellationRequest,
    BookingListRequest, AdminBookingListRequest, BookingOut, BookingPage, CancellationResult
)
from src.bookings.booking_service import BookingService
from src.notifications.email_service import EmailService, get_email_service
from src.exceptions import DependencyError

logger = structlog.get_logger(__name__)

router = APIRouter()

# Customer endpoints
@router.post("/create", status_code=status.HTTP_201_CREATED)
def create_booking(
    request: BookingCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Create a new booking for the current user"""
    booking = BookingService(db).create_booking(user_id, request)
    return {
        "status": "success",
        "message": "Booking created successfully",
        "data": BookingOut.model_validate(booking)
    }

@router.post("/myBookings", response_model=BookingPage)
def get_my_bookings(
    request: BookingListRequest = BookingListRequest(),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Current user's bookings, newest first"""
    bookings, pagination = BookingService(db).list_user_bookings(user_id, request.page, request.limit)
    return BookingPage(data=[BookingOut.model_validate(b) for b in bookings], pagination=pagination)

@router.post("/getBooking")
def get_booking(
    request: BookingIdRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    booking = BookingService(db).get_booking(request.booking_id, user_id)
    return {"status": "success", "data": BookingOut.model_validate(booking)}

@router.post("/updatePayment")
def update_payment(
    request: PaymentUpdateRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service)
):
    """Record the payment outcome reported by the client"""
    booking = BookingService(db).update_payment_status(
        request.booking_id, user_id, request.payment_status, request.payment_details
    )

    if request.payment_status == PaymentStatus.SUCCESS:
        # Best effort: the booking stands whether or not the email goes out
        try:
            email_service.send_booking_confirmation_email(
                to=booking.user.email,
                user_name=booking.user.name,
                booking_id=booking.id,
                package_title=booking.package.title,
                travel_date=booking.travel_date.date().isoformat(),
                total_amount=str(booking.total_amount)
            )
        except DependencyError:
            logger.warning("booking_confirmation_email_skipped", booking_id=booking.id)

    return {
        "status": "success",
        "message": "Payment status updated successfully",
        "data": BookingOut.model_validate(booking)
    }

@router.post("/cancelBooking")
def cancel_booking(
    request: BookingCancellationRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Cancel a booking; the refund follows the days-before-travel schedule"""
    booking, refund_amount = BookingService(db).cancel_booking(
        request.booking_id, user_id, request.cancellation_reason
    )
    if refund_amount > 0:
        message = f"Refund of ₹{refund_amount} will be processed within 5-7 business days"
    else:
        message = "No refund applicable as per cancellation policy"

    result = CancellationResult(
        booking=BookingOut.model_validate(booking),
        refund_amount=refund_amount,
        message=message
    )
    return {"status": "success", "message": "Booking cancelled successfully", "data": result}

# Admin endpoints
@router.post("/admin/allBookings", response_model=BookingPage)
def get_all_bookings(
    request: AdminBookingListRequest = AdminBookingListRequest(),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    bookings, pagination = BookingService(db).list_all_bookings(
        booking_status=request.status,
        payment_status=request.payment_status,
        page=request.page,
        limit=request.limit
    )
    return BookingPage(data=[BookingOut.model_validate(b) for b in bookings], pagination=pagination)

@router.post("/admin/stats")
def get_booking_stats(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    """Booking counts and revenue for the admin dashboard"""
    return {"status": "success", "data": BookingService(db).get_statistics()}
