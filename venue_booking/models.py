import bcrypt
from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    TIMESTAMP,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base
from .domain.enums import BookingStatus, PaymentStatus, Role, TicketStatus, VenueStatus


MAX_PASSWORD_BYTES = 72


def _enum(enum_cls):
    return Enum(enum_cls, name=enum_cls.__name__.lower(), native_enum=False, length=20)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(_enum(Role), nullable=False, default=Role.CUSTOMER)
    enabled = Column(Boolean, nullable=False, default=True)
    created_at = Column(TIMESTAMP, server_default=func.now())

    bookings = relationship("Booking", back_populates="user", cascade="all, delete-orphan")
    tickets = relationship("SupportTicket", back_populates="customer", cascade="all, delete-orphan")

    def set_password(self, password: str) -> None:
        self.password_hash = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

    def check_password(self, password: str) -> bool:
        encoded = password.encode("utf-8")
        # bcrypt only hashes the first 72 bytes, so no stored hash can match a longer one.
        if len(encoded) > MAX_PASSWORD_BYTES:
            return False
        return bcrypt.checkpw(encoded, self.password_hash.encode("utf-8"))

    def __repr__(self) -> str:
        return f"<User {self.username} ({self.role.value})>"


class Venue(Base):
    __tablename__ = "venues"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), index=True, nullable=False)
    location = Column(String(255), nullable=False)
    capacity = Column(Integer, default=0, nullable=False)
    price_per_day = Column(Float, default=0, nullable=False)
    status = Column(_enum(VenueStatus), nullable=False, default=VenueStatus.AVAILABLE)
    image_path = Column(String(500))
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    bookings = relationship("Booking", back_populates="venue", cascade="all, delete-orphan")


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    venue_id = Column(Integer, ForeignKey("venues.id"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(_enum(BookingStatus), nullable=False, default=BookingStatus.PENDING)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="bookings")
    venue = relationship("Venue", back_populates="bookings")
    payment = relationship(
        "Payment", back_populates="booking", uselist=False, cascade="all, delete-orphan"
    )


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), unique=True, nullable=False)
    amount = Column(Float, default=0, nullable=False)
    status = Column(_enum(PaymentStatus), nullable=False, default=PaymentStatus.PENDING)
    paid_at = Column(DateTime)
    created_at = Column(TIMESTAMP, server_default=func.now())

    booking = relationship("Booking", back_populates="payment")


class SupportTicket(Base):
    __tablename__ = "support_tickets"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    issue_type = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(_enum(TicketStatus), nullable=False, default=TicketStatus.OPEN)
    resolution_notes = Column(Text)
    created_at = Column(DateTime, nullable=False)
    resolved_at = Column(DateTime)

    customer = relationship("User", back_populates="tickets")
