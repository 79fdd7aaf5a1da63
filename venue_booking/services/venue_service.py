"""Venue registry: CRUD over venues plus their images."""

import logging

from fastapi import UploadFile

from venue_booking.domain.enums import VenueStatus
from venue_booking.domain.errors import NotFoundError
from venue_booking.images import ImageStorage
from venue_booking.models import Venue
from venue_booking.pagination import Page, PageRequest
from venue_booking.schemas import VenueForm
from venue_booking.stores.interfaces import VenueStore

logger = logging.getLogger(__name__)


class VenueService:
    def __init__(self, store: VenueStore, images: ImageStorage | None = None) -> None:
        self._store = store
        self._images = images or ImageStorage()

    def list_venues(self, request: PageRequest, search: str | None = None) -> Page[Venue]:
        page = self._store.page(request, search)
        logger.info("Found %d venues (search=%r)", page.total, search)
        return page

    def list_available(self) -> list[Venue]:
        return self._store.list_by_status(VenueStatus.AVAILABLE)

    def get_venue(self, venue_id: int) -> Venue:
        venue = self._store.get(venue_id)
        if venue is None:
            logger.warning("Venue not found with ID: %s", venue_id)
            raise NotFoundError("Venue", venue_id)
        return venue

    def save_venue(
        self, form: VenueForm, image: UploadFile | None = None, venue_id: int | None = None
    ) -> Venue:
        """Create a venue, or update ``venue_id`` when given.

        New venues always start AVAILABLE. An update keeps the current status
        and image unless the form or upload supplies new ones.
        """
        data = form.model_dump()
        if venue_id is None:
            logger.info("Creating new venue: %s", form.name)
            venue = Venue(**data)
            venue.status = VenueStatus.AVAILABLE
        else:
            logger.info("Updating venue ID: %s, name: %s", venue_id, form.name)
            venue = self.get_venue(venue_id)
            for key, value in data.items():
                if key == "status" and value is None:
                    continue
                setattr(venue, key, value)
        old_path = new_path = None
        if image is not None and image.filename:
            old_path = venue.image_path
            new_path = venue.image_path = self._images.save(image)
        try:
            venue = self._store.save(venue)
        except Exception:
            self._images.delete(new_path)
            raise
        if new_path and old_path:
            self._images.delete(old_path)
        logger.info("Venue saved with ID: %s", venue.id)
        return venue

    def set_status(self, venue_id: int, status: VenueStatus) -> Venue:
        venue = self.get_venue(venue_id)
        venue.status = VenueStatus(status)
        logger.info("Marking venue %s as %s", venue_id, venue.status.value)
        return self._store.save(venue)

    def delete_venue(self, venue_id: int) -> None:
        """Delete a venue after its bookings (and their payments)."""
        venue = self.get_venue(venue_id)
        image_path = venue.image_path
        logger.info("Deleting venue %s with %d bookings", venue_id, len(venue.bookings))
        self._store.delete(venue)
        self._images.delete(image_path)

    def count_venues(self) -> int:
        return self._store.count()
