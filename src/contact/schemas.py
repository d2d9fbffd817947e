from pydantic import EmailStr, Field, model_validator
from typing import Optional
from src.schemas import CamelModel

class ContactForm(CamelModel):
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: EmailStr
    phone: Optional[str] = None
    subject: str = Field(..., min_length=1)
    message: str = Field(..., min_length=10, max_length=1000)

    @model_validator(mode="after")
    def require_name(self):
        if not self.full_name:
            raise ValueError("Name, email, subject and message are required")
        return self

    @property
    def full_name(self) -> Optional[str]:
        if self.name:
            return self.name
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) or None
