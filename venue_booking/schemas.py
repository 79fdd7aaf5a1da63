from datetime import date
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from .domain.enums import Role, VenueStatus
from .models import MAX_PASSWORD_BYTES

VENUE_STATUSES = [status.value for status in VenueStatus]
REGISTRATION_ROLES = [Role.CUSTOMER.value, Role.EVENT_MANAGER.value]


class VenueForm(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Venue name")
    location: str = Field(..., min_length=1, max_length=255, description="Address or area")
    capacity: int = Field(0, description="Maximum number of guests")
    price_per_day: float = Field(..., description="Price charged per booked day")
    status: Optional[VenueStatus] = Field(None, description="Availability status")

    @field_validator("name", "location")
    @classmethod
    def strip_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("price_per_day")
    @classmethod
    def price_non_negative(cls, v):
        if v < 0:
            raise ValueError("price must be non-negative")
        return v

    @field_validator("capacity")
    @classmethod
    def capacity_non_negative(cls, v):
        if v < 0:
            raise ValueError("capacity must be non-negative")
        return v


class BookingForm(BaseModel):
    venue_id: int = Field(..., description="Venue to book")
    start_date: Optional[date] = Field(None, description="First booked day")
    end_date: Optional[date] = Field(None, description="Last booked day, inclusive")


class RegistrationForm(BaseModel):
    username: str = Field(..., min_length=3, max_length=100, description="Login name")
    email: EmailStr = Field(..., description="Contact e-mail")
    password: str = Field(..., min_length=4, description="Password")
    role: str = Field(Role.CUSTOMER.value, description="Requested role")

    @field_validator("username")
    @classmethod
    def strip_username(cls, v):
        return v.strip()

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v):
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


class TicketForm(BaseModel):
    issue_type: str = Field(..., min_length=1, max_length=100, description="Issue category")
    description: str = Field(..., min_length=1, description="What went wrong")
