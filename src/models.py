from datetime import datetime
from enum import Enum, IntEnum
from sqlalchemy import Column, Integer, BigInteger, String, DateTime, Text, ForeignKey, Numeric, JSON
from sqlalchemy.orm import relationship
from src.database import Base

# SQLite only autoincrements INTEGER primary keys
BigIntId = BigInteger().with_variant(Integer, "sqlite")

# ================================
# Enumerations
# ================================
class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"

class SessionStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"

class SessionEndReason(str, Enum):
    LOGOUT = "logout"
    EXPIRED = "expired"
    SUPERSEDED = "superseded"

class PackageStatus(IntEnum):
    """Persisted as 1/0; inactive packages are soft-deleted"""
    INACTIVE = 0
    ACTIVE = 1

class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"

class PaymentStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"

class RefundStatus(str, Enum):
    PENDING = "pending"
    PROCESSED = "processed"
    REJECTED = "rejected"

# ================================
# Users & Sessions
# ================================
class User(Base):
    __tablename__ = "users"

    id = Column(BigIntId, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.USER.value)
    reset_password_token = Column(String(64), index=True)
    reset_password_expires = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    sessions = relationship("UserSession", back_populates="user")
    bookings = relationship("Booking", back_populates="user")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

class UserSession(Base):
    """Append-only login history; at most one active row per user"""
    __tablename__ = "user_sessions"

    id = Column(BigIntId, primary_key=True, index=True)
    user_id = Column(BigIntId, ForeignKey("users.id"), nullable=False, index=True)
    token = Column(String(512), nullable=False, unique=True, index=True)
    status = Column(String(20), nullable=False, default=SessionStatus.ACTIVE.value, index=True)
    ended_reason = Column(String(20))
    issued_at = Column(DateTime, default=datetime.utcnow)
    expires_at = Column(DateTime, nullable=False)
    ended_at = Column(DateTime)

    # Relationships
    user = relationship("User", back_populates="sessions")

# ================================
# Catalog
# ================================
class Package(Base):
    __tablename__ = "packages"

    id = Column(BigIntId, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    locations = Column(JSON, nullable=False, default=list)
    price = Column(Numeric(12, 2), nullable=False)
    duration = Column(String(100), nullable=False)
    image_url = Column(String(1024), nullable=False)
    created_by = Column(BigIntId, ForeignKey("users.id"), nullable=False)
    status = Column(Integer, nullable=False, default=int(PackageStatus.ACTIVE), index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    detail = relationship("PackageDetail", back_populates="package", uselist=False)
    bookings = relationship("Booking", back_populates="package")

class PackageDetail(Base):
    __tablename__ = "package_details"

    id = Column(BigIntId, primary_key=True, index=True)
    package_id = Column(BigIntId, ForeignKey("packages.id"), nullable=False, unique=True, index=True)
    itinerary = Column(JSON, nullable=False, default=list)
    inclusions = Column(JSON, nullable=False, default=list)
    exclusions = Column(JSON, nullable=False, default=list)
    terms = Column(JSON, nullable=False, default=list)
    best_time_to_visit = Column(String(255))
    group_size = Column(JSON)
    pricing = Column(JSON)
    gallery = Column(JSON, nullable=False, default=list)
    reviews = Column(JSON, nullable=False, default=list)
    created_by = Column(BigIntId, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    package = relationship("Package", back_populates="detail")

# ================================
# Bookings
# ================================
class Booking(Base):
    __tablename__ = "bookings"

    id = Column(BigIntId, primary_key=True, index=True)
    user_id = Column(BigIntId, ForeignKey("users.id"), nullable=False, index=True)
    package_id = Column(BigIntId, ForeignKey("packages.id"), nullable=False, index=True)
    travel_date = Column(DateTime, nullable=False, index=True)
    travelers = Column(Integer, nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)
    traveler_details = Column(JSON, nullable=False, default=list)
    contact_details = Column(JSON)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value, index=True)
    booking_status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)
    payment_details = Column(JSON)
    cancellation_details = Column(JSON)
    special_requests = Column(Text, default="")
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="bookings")
    package = relationship("Package", back_populates="bookings")
