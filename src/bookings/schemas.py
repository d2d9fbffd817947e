from pydantic import EmailStr, Field, validator
from typing import List, Optional
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from src.models import BookingStatus, PaymentStatus, RefundStatus
from src.packages.schemas import PackageSummary
from src.schemas import CamelModel, PageRequest, Pagination

class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"

class IdType(str, Enum):
    PASSPORT = "passport"
    AADHAR = "aadhar"
    DRIVING_LICENSE = "driving_license"
    VOTER_ID = "voter_id"

class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    UPI = "upi"
    NET_BANKING = "net_banking"
    WALLET = "wallet"

# Traveler and contact information
class TravelerDetail(CamelModel):
    name: str = Field(..., min_length=1)
    age: int = Field(..., ge=0, le=130)
    gender: Gender
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    id_type: Optional[IdType] = None
    id_number: Optional[str] = None

class PrimaryContact(CamelModel):
    name: str
    phone: str = ""
    email: str

class EmergencyContact(CamelModel):
    name: str
    phone: str
    relation: str

class ContactDetails(CamelModel):
    primary_contact: Optional[PrimaryContact] = None
    emergency_contact: Optional[EmergencyContact] = None

class PaymentDetails(CamelModel):
    method: Optional[PaymentMethod] = None
    transaction_id: Optional[str] = None
    payment_date: Optional[datetime] = None
    gateway: Optional[str] = None

class CancellationDetails(CamelModel):
    cancelled_at: datetime
    reason: Optional[str] = None
    refund_amount: Decimal
    refund_status: RefundStatus

# Requests
class BookingCreate(CamelModel):
    package_id: int
    travel_date: datetime
    travelers: int = Field(..., ge=1)
    traveler_details: List[TravelerDetail] = []
    contact_details: Optional[ContactDetails] = None
    special_requests: Optional[str] = ""

    @validator("travel_date")
    def to_naive_utc(cls, v):
        if v.tzinfo is not None:
            v = v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

class BookingIdRequest(CamelModel):
    booking_id: int

class PaymentUpdateRequest(CamelModel):
    booking_id: int
    payment_status: PaymentStatus
    payment_details: Optional[PaymentDetails] = None

class BookingCancellationRequest(CamelModel):
    booking_id: int
    cancellation_reason: Optional[str] = None

class BookingListRequest(PageRequest):
    pass

class AdminBookingListRequest(PageRequest):
    status: Optional[BookingStatus] = None
    payment_status: Optional[PaymentStatus] = None

# Responses
class BookingUser(CamelModel):
    id: int
    name: str
    email: str

class BookingOut(CamelModel):
    id: int
    user_id: int
    package_id: int
    package: Optional[PackageSummary] = None
    user: Optional[BookingUser] = None
    travel_date: datetime
    travelers: int
    total_amount: Decimal
    traveler_details: List[TravelerDetail] = []
    contact_details: Optional[ContactDetails] = None
    payment_status: PaymentStatus
    booking_status: BookingStatus
    payment_details: Optional[PaymentDetails] = None
    cancellation_details: Optional[CancellationDetails] = None
    special_requests: Optional[str] = ""
    created_at: datetime
    updated_at: datetime

class BookingPage(CamelModel):
    status: str = "success"
    data: List[BookingOut]
    pagination: Pagination

class CancellationResult(CamelModel):
    booking: BookingOut
    refund_amount: Decimal
    message: str

class StatsOverview(CamelModel):
    total_bookings: int
    confirmed_bookings: int
    pending_bookings: int
    cancelled_bookings: int
    total_revenue: Decimal

class MonthlyStat(CamelModel):
    month: int
    count: int
    revenue: Decimal

class BookingStats(CamelModel):
    overview: StatsOverview
    monthly_stats: List[MonthlyStat]
