from typing import List, Optional, Tuple
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
import math
from sqlalchemy import func, case, extract
from sqlalchemy.orm import Session, joinedload
import structlog

from src.models import Booking, BookingStatus, PaymentStatus, RefundStatus
from src.auth.service import UserService
from src.packages.service import CatalogService
from src.bookings.schemas import (
    BookingCreate, PaymentDetails, StatsOverview, MonthlyStat, BookingStats
)
from src.schemas import Pagination
from src.exceptions import UserNotFoundError, BookingNotFoundError, AlreadyCancelledError

logger = structlog.get_logger(__name__)

# (days strictly greater than, share refunded); checked top to bottom
REFUND_TIERS = (
    (15, Decimal("0.75")),
    (7, Decimal("0.50")),
    (3, Decimal("0.25")),
)

SECONDS_PER_DAY = 24 * 60 * 60

def days_until_travel(travel_date: datetime, now: datetime) -> int:
    """Whole days until travel, rounded up"""
    return math.ceil((travel_date - now).total_seconds() / SECONDS_PER_DAY)

def refund_rate(days: int) -> Decimal:
    """Share of the booking total refunded when cancelling ``days`` before travel"""
    for threshold, rate in REFUND_TIERS:
        if days > threshold:
            return rate
    return Decimal("0")

def calculate_refund(total_amount: Decimal, travel_date: datetime, now: datetime) -> Decimal:
    rate = refund_rate(days_until_travel(travel_date, now))
    return (Decimal(total_amount) * rate).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

def paginate(total: int, page: int, limit: int) -> Pagination:
    total_pages = math.ceil(total / limit) if limit else 0
    return Pagination(
        current_page=page,
        total_pages=total_pages,
        total_bookings=total,
        has_next=page < total_pages,
        has_prev=page > 1
    )

class BookingService:
    """Booking lifecycle: creation, payment updates, cancellation and reporting"""

    def __init__(self, db: Session):
        self.db = db
        self.catalog = CatalogService(db)

    def create_booking(self, user_id: int, request: BookingCreate) -> Booking:
        """Create a pending booking priced from the package"""
        user = UserService.get_user_by_id(self.db, user_id)
        if not user:
            raise UserNotFoundError()

        package = self.catalog.get_package(request.package_id)

        unit_price = self.catalog.unit_price(package)
        total_amount = unit_price * request.travelers

        contact_details = request.contact_details.model_dump(mode="json", exclude_none=True) \
            if request.contact_details else {}
        if not contact_details.get("primary_contact"):
            contact_details["primary_contact"] = {"name": user.name, "email": user.email, "phone": ""}

        booking = Booking(
            user_id=user.id,
            package_id=package.id,
            travel_date=request.travel_date,
            travelers=request.travelers,
            total_amount=total_amount,
            traveler_details=[t.model_dump(mode="json", exclude_none=True) for t in request.traveler_details],
            contact_details=contact_details,
            special_requests=request.special_requests or "",
            payment_status=PaymentStatus.PENDING.value,
            booking_status=BookingStatus.PENDING.value
        )
        self.db.add(booking)
        self.db.commit()

        logger.info(
            "booking_created",
            booking_id=booking.id,
            user_id=user.id,
            package_id=package.id,
            travelers=booking.travelers,
            total_amount=str(total_amount)
        )
        return self._load(booking.id)

    def list_user_bookings(self, user_id: int, page: int = 1, limit: int = 10) -> Tuple[List[Booking], Pagination]:
        query = self.db.query(Booking).filter(Booking.user_id == user_id)
        return self._page(query, page, limit)

    def get_booking(self, booking_id: int, requester_id: int) -> Booking:
        """Get a booking owned by the requester; other users' bookings read as missing"""
        booking = self._query().filter(
            Booking.id == booking_id,
            Booking.user_id == requester_id
        ).first()
        if not booking:
            raise BookingNotFoundError()
        return booking

    def update_payment_status(
        self,
        booking_id: int,
        requester_id: int,
        payment_status: PaymentStatus,
        payment_details: Optional[PaymentDetails] = None,
        now: Optional[datetime] = None
    ) -> Booking:
        booking = self.get_booking(booking_id, requester_id)
        now = now or datetime.utcnow()
        payment_status = PaymentStatus(payment_status)

        booking.payment_status = payment_status.value
        if payment_details is not None:
            merged = dict(booking.payment_details or {})
            merged.update(payment_details.model_dump(mode="json", exclude_unset=True, exclude_none=True))
            merged["payment_date"] = now.isoformat()
            booking.payment_details = merged

        if payment_status == PaymentStatus.SUCCESS:
            booking.booking_status = BookingStatus.CONFIRMED.value
        booking.updated_at = now

        self.db.commit()
        logger.info(
            "booking_payment_updated",
            booking_id=booking.id,
            payment_status=booking.payment_status,
            booking_status=booking.booking_status
        )
        return self._load(booking.id)

    def cancel_booking(
        self,
        booking_id: int,
        requester_id: int,
        reason: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> Tuple[Booking, Decimal]:
        """Cancel a booking and record the refund owed under the cancellation policy"""
        booking = self.get_booking(booking_id, requester_id)
        if booking.booking_status == BookingStatus.CANCELLED.value:
            raise AlreadyCancelledError()

        now = now or datetime.utcnow()
        refund_amount = calculate_refund(booking.total_amount, booking.travel_date, now)

        booking.booking_status = BookingStatus.CANCELLED.value
        booking.cancellation_details = {
            "cancelled_at": now.isoformat(),
            "reason": reason,
            "refund_amount": str(refund_amount),
            "refund_status": (RefundStatus.PENDING if refund_amount > 0 else RefundStatus.PROCESSED).value,
        }
        booking.updated_at = now

        self.db.commit()
        logger.info(
            "booking_cancelled",
            booking_id=booking.id,
            user_id=requester_id,
            refund_amount=str(refund_amount)
        )
        return self._load(booking.id), refund_amount

    def list_all_bookings(
        self,
        booking_status: Optional[BookingStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Booking], Pagination]:
        """Every user's bookings, optionally filtered by status"""
        query = self.db.query(Booking)
        if booking_status:
            query = query.filter(Booking.booking_status == BookingStatus(booking_status).value)
        if payment_status:
            query = query.filter(Booking.payment_status == PaymentStatus(payment_status).value)
        return self._page(query, page, limit)

    def get_statistics(self, now: Optional[datetime] = None) -> BookingStats:
        """Status counts, paid revenue and this year's per-month breakdown"""
        now = now or datetime.utcnow()

        counts = dict(
            self.db.query(Booking.booking_status, func.count(Booking.id))
            .group_by(Booking.booking_status)
            .all()
        )
        total_revenue = self.db.query(func.sum(Booking.total_amount)).filter(
            Booking.payment_status == PaymentStatus.SUCCESS.value
        ).scalar()

        month = extract("month", Booking.created_at)
        paid_amount = case(
            (Booking.payment_status == PaymentStatus.SUCCESS.value, Booking.total_amount),
            else_=0
        )
        monthly_rows = (
            self.db.query(month.label("month"), func.count(Booking.id), func.sum(paid_amount))
            .filter(Booking.created_at >= datetime(now.year, 1, 1))
            .group_by(month)
            .order_by(month)
            .all()
        )

        overview = StatsOverview(
            total_bookings=sum(counts.values()),
            confirmed_bookings=counts.get(BookingStatus.CONFIRMED.value, 0),
            pending_bookings=counts.get(BookingStatus.PENDING.value, 0),
            cancelled_bookings=counts.get(BookingStatus.CANCELLED.value, 0),
            total_revenue=_to_decimal(total_revenue)
        )
        monthly_stats = [
            MonthlyStat(month=int(m), count=count, revenue=_to_decimal(revenue))
            for m, count, revenue in monthly_rows
        ]
        return BookingStats(overview=overview, monthly_stats=monthly_stats)

    def _query(self):
        return self.db.query(Booking).options(
            joinedload(Booking.package),
            joinedload(Booking.user)
        )

    def _load(self, booking_id: int) -> Booking:
        self.db.expire_all()
        return self._query().filter(Booking.id == booking_id).one()

    def _page(self, query, page: int, limit: int) -> Tuple[List[Booking], Pagination]:
        total = query.count()
        bookings = query.options(
            joinedload(Booking.package),
            joinedload(Booking.user)
        ).order_by(
            Booking.created_at.desc(), Booking.id.desc()
        ).offset((page - 1) * limit).limit(limit).all()
        return bookings, paginate(total, page, limit)

def _to_decimal(value) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")
