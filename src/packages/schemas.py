from pydantic import Field, validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from src.schemas import CamelModel

# Detail sub-documents
class ItineraryDay(CamelModel):
    day: int = Field(..., ge=1)
    title: str
    description: str
    activities: List[str] = []
    meals: Optional[str] = None
    accommodation: Optional[str] = None

class GroupSize(CamelModel):
    min: int = Field(..., ge=1)
    max: int = Field(..., ge=1)

    @validator("max")
    def max_not_below_min(cls, v, values):
        if "min" in values and v < values["min"]:
            raise ValueError("groupSize.max must be at least groupSize.min")
        return v

class Pricing(CamelModel):
    adult_price: Decimal = Field(..., ge=0)
    child_price: Optional[Decimal] = Field(None, ge=0)

class GalleryItem(CamelModel):
    url: str
    caption: Optional[str] = None
    type: str = "image"

class Review(CamelModel):
    user_name: str
    rating: int = Field(..., ge=1, le=5)
    comment: str
    date: datetime = Field(default_factory=datetime.utcnow)

# Packages
class PackageBase(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    locations: List[str] = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    duration: str = Field(..., min_length=1)
    image_url: str = Field(..., min_length=1)

class PackageCreate(PackageBase):
    pass

class PackageUpdate(CamelModel):
    package_id: int
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    locations: Optional[List[str]] = Field(None, min_length=1)
    price: Optional[Decimal] = Field(None, ge=0)
    duration: Optional[str] = Field(None, min_length=1)
    image_url: Optional[str] = Field(None, min_length=1)

class PackageIdRequest(CamelModel):
    package_id: int

class PackageOut(PackageBase):
    id: int
    created_by: int
    status: int
    created_at: datetime
    updated_at: datetime

class PackageSummary(CamelModel):
    """Package fields embedded in booking responses"""
    id: int
    title: str
    description: str
    price: Decimal
    locations: List[str]
    duration: str
    image_url: str

# Package details
class PackageDetailBase(CamelModel):
    itinerary: List[ItineraryDay] = []
    inclusions: List[str] = []
    exclusions: List[str] = []
    terms: List[str] = []
    best_time_to_visit: Optional[str] = None
    group_size: Optional[GroupSize] = None
    pricing: Optional[Pricing] = None
    gallery: List[GalleryItem] = []
    reviews: List[Review] = []

    @validator("itinerary")
    def order_itinerary(cls, v):
        return sorted(v, key=lambda item: item.day)

class PackageDetailCreate(PackageDetailBase):
    package_id: int

class PackageDetailUpdate(CamelModel):
    package_id: int
    itinerary: Optional[List[ItineraryDay]] = None
    inclusions: Optional[List[str]] = None
    exclusions: Optional[List[str]] = None
    terms: Optional[List[str]] = None
    best_time_to_visit: Optional[str] = None
    group_size: Optional[GroupSize] = None
    pricing: Optional[Pricing] = None
    gallery: Optional[List[GalleryItem]] = None
    reviews: Optional[List[Review]] = None

    # List sections may be replaced or left out, never cleared to null
    @validator("itinerary", "inclusions", "exclusions", "terms", "gallery", "reviews")
    def list_sections_not_null(cls, v):
        if v is None:
            raise ValueError("must be a list, send [] to clear it")
        return v

    @validator("itinerary")
    def order_itinerary(cls, v):
        return sorted(v, key=lambda item: item.day)

class PackageDetailOut(PackageDetailBase):
    id: int
    package_id: int
    created_by: int
    created_at: datetime
    updated_at: datetime

class PackageWithDetails(CamelModel):
    package: PackageOut
    details: Optional[PackageDetailOut] = None
