"""Pytest configuration and shared fixtures."""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from venue_booking import models  # noqa: F401  registers the tables on Base.metadata
from venue_booking.database import Base, get_db
from venue_booking.domain.enums import Role, VenueStatus
from venue_booking.images import ImageStorage
from venue_booking.main import app
from venue_booking.models import User, Venue
from venue_booking.services import (
    BookingService,
    PaymentService,
    TicketService,
    UserService,
    VenueService,
)
from venue_booking.stores import (
    SqlBookingStore,
    SqlPaymentStore,
    SqlTicketStore,
    SqlUserStore,
    SqlVenueStore,
)

NOW = datetime(2024, 6, 10, 9, 30)
TODAY = NOW.date()
PASSWORD = "secret"


def fixed_clock() -> datetime:
    return NOW


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def image_storage(tmp_path) -> ImageStorage:
    return ImageStorage(tmp_path / "images")


@pytest.fixture
def user_service(db) -> UserService:
    return UserService(SqlUserStore(db))


@pytest.fixture
def venue_service(db, image_storage) -> VenueService:
    return VenueService(SqlVenueStore(db), image_storage)


@pytest.fixture
def payment_service(db) -> PaymentService:
    return PaymentService(SqlPaymentStore(db), SqlBookingStore(db), clock=fixed_clock)


@pytest.fixture
def booking_service(db, payment_service) -> BookingService:
    return BookingService(SqlBookingStore(db), SqlVenueStore(db), payment_service, clock=fixed_clock)


@pytest.fixture
def ticket_service(db) -> TicketService:
    return TicketService(SqlTicketStore(db), clock=fixed_clock)


@pytest.fixture
def make_user(db):
    def factory(username: str = "alice", role: Role = Role.CUSTOMER, enabled: bool = True) -> User:
        user = User(username=username, email=f"{username}@example.com", role=role, enabled=enabled)
        user.set_password(PASSWORD)
        return SqlUserStore(db).save(user)

    return factory


@pytest.fixture
def make_venue(db):
    def factory(
        name: str = "Grand Hall",
        location: str = "Main Street 1",
        price_per_day: float = 1000.0,
        capacity: int = 200,
        status: VenueStatus = VenueStatus.AVAILABLE,
    ) -> Venue:
        venue = Venue(
            name=name,
            location=location,
            price_per_day=price_per_day,
            capacity=capacity,
            status=status,
        )
        return SqlVenueStore(db).save(venue)

    return factory


@pytest.fixture
def customer(make_user) -> User:
    return make_user("carol", Role.CUSTOMER)


@pytest.fixture
def manager(make_user) -> User:
    return make_user("manny", Role.EVENT_MANAGER)


@pytest.fixture
def admin(make_user) -> User:
    return make_user("root", Role.ADMIN)


@pytest.fixture
def venue(make_venue) -> Venue:
    return make_venue()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    def do_login(username: str, password: str = PASSWORD):
        response = client.post(
            "/login",
            data={"username": username, "password": password},
            follow_redirects=False,
        )
        assert response.status_code == 303
        return response

    return do_login
