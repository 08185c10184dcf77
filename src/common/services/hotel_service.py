import logging
from dataclasses import replace
from typing import List, Optional
from uuid import uuid4

from common.models.bookings import BookingStats
from common.models.hotels import Hotel, Location
from common.models.users import Requester, UserRole
from common.repository.booking_repo import BookingRepository
from common.repository.hotel_repo import HotelRepository
from common.repository.room_repo import RoomRepository
from common.services.booking_service import newest_first, summarize_bookings
from common.utils.custom_exceptions import InvalidInput, NotFoundException

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "address", "contact", "city", "destination")


class HotelService:
    def __init__(
        self,
        hotel_repo: HotelRepository,
        room_repo: Optional[RoomRepository] = None,
        booking_repo: Optional[BookingRepository] = None,
    ):
        self.hotel_repo = hotel_repo
        self.room_repo = room_repo
        self.booking_repo = booking_repo

    def register_hotel(
        self,
        requester: Requester,
        name: str,
        address: str,
        contact: str,
        city: str,
        destination: str = "",
        location: Optional[Location] = None,
    ) -> Hotel:
        hotel = Hotel(
            hotel_id=str(uuid4()),
            owner_id=requester.user_id,
            name=name.strip(),
            address=address.strip(),
            contact=contact.strip(),
            city=city.strip(),
            destination=destination.strip(),
            location=location or Location(),
        )
        self.hotel_repo.add_hotel(hotel, promote_owner=requester.role == UserRole.GUEST)
        logger.info("Hotel %s registered by %s", hotel.hotel_id, requester.user_id)
        return hotel

    def get_hotel_profile(self, requester: Requester) -> Hotel:
        hotel = self.hotel_repo.get_hotel_by_owner(requester.user_id)
        if hotel is None:
            raise NotFoundException("hotel for owner", requester.user_id)
        return hotel

    def update_hotel(self, requester: Requester, **fields) -> Hotel:
        changes = {k: v for k, v in fields.items() if v is not None}
        if not changes:
            raise InvalidInput("Please provide at least one field to update")
        unknown = set(changes) - set(UPDATABLE_FIELDS) - {"location"}
        if unknown:
            raise InvalidInput(f"Unknown hotel fields: {', '.join(sorted(unknown))}")

        hotel = self.get_hotel_profile(requester)
        updated = replace(hotel, **changes)
        self.hotel_repo.update_hotel(updated)
        return updated

    def list_hotels(self, city: Optional[str] = None) -> List[Hotel]:
        hotels = self.hotel_repo.list_hotels()
        if city:
            needle = city.strip().lower()
            hotels = [h for h in hotels if needle in h.city.lower()]
        return hotels

    def get_dashboard(self, requester: Requester) -> tuple[BookingStats, list]:
        hotel = self.get_hotel_profile(requester)
        rooms = self.room_repo.get_rooms_by_hotel(hotel.hotel_id)
        bookings = newest_first(self.booking_repo.get_hotel_bookings(hotel.hotel_id))
        stats = summarize_bookings(bookings, len(rooms), revenue_requires_confirmed=True)
        return stats, bookings
