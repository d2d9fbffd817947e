from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

class CamelModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

class PageRequest(CamelModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)

class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_bookings: int
    has_next: bool
    has_prev: bool

class MessageResponse(BaseModel):
    status: str = "success"
    message: str
