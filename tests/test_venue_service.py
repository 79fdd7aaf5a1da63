"""Tests for VenueService: CRUD, images and cascading deletes."""

import io
from datetime import timedelta

import pytest
from sqlalchemy.exc import SQLAlchemyError
from starlette.datastructures import UploadFile

from venue_booking.domain.enums import VenueStatus
from venue_booking.domain.errors import NotFoundError, ValidationError
from venue_booking.models import Booking, Payment, Venue
from venue_booking.pagination import PageRequest
from venue_booking.schemas import VenueForm

from conftest import TODAY


def upload(filename: str = "hall.png", content: bytes = b"\x89PNG fake") -> UploadFile:
    return UploadFile(file=io.BytesIO(content), filename=filename)


class TestSaveVenue:
    def test_new_venue_starts_available(self, venue_service):
        form = VenueForm(
            name="  Grand Hall ",
            location="Main Street 1",
            capacity=150,
            price_per_day=800,
            status=VenueStatus.MAINTENANCE,
        )

        venue = venue_service.save_venue(form)

        assert venue.id is not None
        assert venue.name == "Grand Hall"
        assert venue.status == VenueStatus.AVAILABLE

    def test_update_keeps_status_when_not_given(self, venue_service, venue):
        venue_service.set_status(venue.id, VenueStatus.MAINTENANCE)
        form = VenueForm(name="Renamed", location=venue.location, capacity=10, price_per_day=5)

        updated = venue_service.save_venue(form, venue_id=venue.id)

        assert updated.name == "Renamed"
        assert updated.status == VenueStatus.MAINTENANCE

    def test_update_unknown_venue_raises_not_found(self, venue_service):
        form = VenueForm(name="Ghost", location="Nowhere", price_per_day=1)

        with pytest.raises(NotFoundError):
            venue_service.save_venue(form, venue_id=404)

    def test_negative_price_is_rejected(self):
        with pytest.raises(ValueError):
            VenueForm(name="Cheap", location="Here", price_per_day=-1)

    def test_image_is_stored_and_replaced(self, venue_service, image_storage):
        form = VenueForm(name="Loft", location="Dock 3", price_per_day=100)
        venue = venue_service.save_venue(form, upload("first.png"))
        first_path = venue.image_path

        assert first_path.startswith("/static/images/")
        assert (image_storage.directory / first_path.rsplit("/", 1)[1]).exists()

        venue = venue_service.save_venue(form, upload("second.jpg"), venue_id=venue.id)

        assert venue.image_path.endswith(".jpg")
        assert not (image_storage.directory / first_path.rsplit("/", 1)[1]).exists()

    def test_non_image_upload_is_rejected(self, db, venue_service, image_storage):
        form = VenueForm(name="Loft", location="Dock 3", price_per_day=100)

        with pytest.raises(ValidationError):
            venue_service.save_venue(form, upload("page.html", b"<script>alert(1)</script>"))

        assert db.query(Venue).count() == 0
        assert not image_storage.directory.exists() or not any(image_storage.directory.iterdir())

    def test_failed_save_keeps_old_image(self, venue_service, image_storage, monkeypatch):
        form = VenueForm(name="Loft", location="Dock 3", price_per_day=100)
        venue = venue_service.save_venue(form, upload("first.png"))
        old_file = image_storage.directory / venue.image_path.rsplit("/", 1)[1]

        def failing_save(venue):
            raise SQLAlchemyError("disk full")

        monkeypatch.setattr(venue_service._store, "save", failing_save)

        with pytest.raises(SQLAlchemyError):
            venue_service.save_venue(form, upload("second.png"), venue_id=venue.id)

        assert old_file.exists()
        assert list(image_storage.directory.iterdir()) == [old_file]

    def test_empty_upload_keeps_image(self, venue_service):
        form = VenueForm(name="Loft", location="Dock 3", price_per_day=100)
        venue = venue_service.save_venue(form, upload("first.png"))
        image_path = venue.image_path

        venue = venue_service.save_venue(form, upload(""), venue_id=venue.id)

        assert venue.image_path == image_path


class TestDeleteVenue:
    def test_delete_removes_bookings_and_payments(
        self, db, venue_service, booking_service, payment_service, venue, customer
    ):
        booking = booking_service.create_booking(venue.id, customer, TODAY, TODAY + timedelta(days=1))
        payment_service.process_payment(booking.id)

        venue_service.delete_venue(venue.id)

        assert venue_service.count_venues() == 0
        assert db.query(Booking).count() == 0
        assert db.query(Payment).count() == 0

    def test_delete_removes_image_file(self, venue_service, image_storage):
        venue = venue_service.save_venue(
            VenueForm(name="Loft", location="Dock 3", price_per_day=100), upload("loft.png")
        )
        stored = image_storage.directory / venue.image_path.rsplit("/", 1)[1]

        venue_service.delete_venue(venue.id)

        assert not stored.exists()

    def test_delete_unknown_venue_raises_not_found(self, venue_service):
        with pytest.raises(NotFoundError):
            venue_service.delete_venue(404)


class TestListVenues:
    def test_search_matches_name_and_location(self, venue_service, make_venue):
        make_venue("Grand Hall", location="Uptown")
        make_venue("Barn", location="Grand Valley")
        make_venue("Loft", location="Docks")

        page = venue_service.list_venues(PageRequest.of(sort_by="name", sort_dir="asc"), "grand")

        assert [v.name for v in page.items] == ["Barn", "Grand Hall"]

    def test_search_wildcards_match_literally(self, venue_service, make_venue):
        make_venue("100% Club")
        make_venue("1000 Seats")
        make_venue("a_b Lounge")
        make_venue("axb Lounge")

        percent = venue_service.list_venues(PageRequest.of(), "100%")
        underscore = venue_service.list_venues(PageRequest.of(), "a_b")

        assert [v.name for v in percent.items] == ["100% Club"]
        assert [v.name for v in underscore.items] == ["a_b Lounge"]

    def test_available_only(self, venue_service, make_venue):
        make_venue("Open", status=VenueStatus.AVAILABLE)
        make_venue("Closed", status=VenueStatus.MAINTENANCE)

        assert [v.name for v in venue_service.list_available()] == ["Open"]

    def test_unknown_sort_column_falls_back_to_id(self, venue_service, make_venue):
        first = make_venue("A")
        second = make_venue("B")

        page = venue_service.list_venues(PageRequest.of(sort_by="password_hash"))

        assert [v.id for v in page.items] == [second.id, first.id]
