"""
Booking Module

This module provides the booking lifecycle for tour packages. It includes:

- Booking creation with price derivation from the package catalog
- Self-reported payment status updates (pending / success / failed)
- Cancellation with the days-before-travel refund schedule
- Paginated listings for customers and administrators
- Booking statistics for the admin dashboard

Key Components:
- booking_service.py: Booking state transitions, refund calculation and reporting
- router.py: FastAPI endpoints for customers and administrators
- schemas.py: Pydantic models for bookings, travelers and contacts

Refund schedule (whole days until travel, rounded up):
- more than 15 days: 75%
- 8 to 15 days: 50%
- 4 to 7 days: 25%
- 3 days or fewer: no refund
"""

from .router import router
from .booking_service import BookingService, calculate_refund, refund_rate, days_until_travel
from .schemas import (
    BookingCreate, BookingOut, BookingPage, BookingStats, CancellationResult,
    PaymentDetails, TravelerDetail, ContactDetails
)

__all__ = [
    "router",
    "BookingService",
    "calculate_refund",
    "refund_rate",
    "days_until_travel",
    "BookingCreate",
    "BookingOut",
    "BookingPage",
    "BookingStats",
    "CancellationResult",
    "PaymentDetails",
    "TravelerDetail",
    "ContactDetails"
]
