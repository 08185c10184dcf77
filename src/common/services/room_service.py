import logging
from dataclasses import replace
from decimal import Decimal
from typing import List, Optional
from uuid import uuid4

from common.models.hotels import Hotel
from common.models.rooms import Room
from common.models.users import Requester
from common.repository.hotel_repo import HotelRepository
from common.repository.room_repo import RoomRepository
from common.services.image_service import ImageStorageService
from common.utils.custom_exceptions import InvalidInput, NotFoundException, Unauthorized

logger = logging.getLogger(__name__)


class RoomService:
    def __init__(
        self,
        room_repo: RoomRepository,
        hotel_repo: HotelRepository,
        image_service: Optional[ImageStorageService] = None,
    ):
        self.room_repo = room_repo
        self.hotel_repo = hotel_repo
        self.image_service = image_service

    def add_room(
        self,
        requester: Requester,
        room_type: str,
        price_per_night: Decimal,
        amenities: list[str],
        images: list[str],
    ) -> Room:
        hotel = self._owner_hotel(requester)
        room_id = str(uuid4())
        room = Room(
            room_id=room_id,
            hotel_id=hotel.hotel_id,
            room_type=room_type.strip(),
            price_per_night=price_per_night,
            amenities=amenities,
            images=self._upload(images, room_id),
        )
        self.room_repo.add_room(room)
        logger.info("Room %s created for hotel %s", room_id, hotel.hotel_id)
        return room

    def get_room(self, room_id: str) -> Room:
        room = self.room_repo.get_room_by_id(room_id)
        if room is None:
            raise NotFoundException("room", room_id)
        return room

    def get_rooms(
        self,
        city: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
    ) -> List[Room]:
        hotels = self.hotel_repo.list_hotels()
        if city:
            needle = city.strip().lower()
            hotels = [h for h in hotels if needle in h.city.lower()]

        rooms: List[Room] = []
        for hotel in hotels:
            rooms.extend(self.room_repo.get_rooms_by_hotel(hotel.hotel_id))

        if min_price is not None:
            rooms = [r for r in rooms if r.price_per_night >= min_price]
        if max_price is not None:
            rooms = [r for r in rooms if r.price_per_night <= max_price]
        return sorted(rooms, key=lambda r: r.created_at, reverse=True)

    def get_owner_rooms(self, requester: Requester) -> List[Room]:
        hotel = self._owner_hotel(requester)
        return self.room_repo.get_rooms_by_hotel(hotel.hotel_id)

    def update_room(self, requester: Requester, room_id: str, **fields) -> Room:
        changes = {k: v for k, v in fields.items() if v is not None}
        if not changes:
            raise InvalidInput("Please provide at least one field to update")

        room = self._owned_room(requester, room_id)
        if "images" in changes:
            changes["images"] = self._upload(changes["images"], room_id)
        updated = replace(room, **changes)
        self.room_repo.save_room(updated)
        return updated

    def toggle_availability(self, requester: Requester, room_id: str) -> Room:
        room = self._owned_room(requester, room_id)
        updated = replace(room, is_available=not room.is_available)
        self.room_repo.save_room(updated)
        logger.info("Room %s listing set to %s", room_id, updated.is_available)
        return updated

    def _upload(self, images: list[str], room_id: str) -> list[str]:
        if not images:
            return []
        if self.image_service is None:
            raise InvalidInput("Image uploads are not configured")
        return self.image_service.upload_images(images, prefix=f"rooms/{room_id}")

    def _owner_hotel(self, requester: Requester) -> Hotel:
        hotel = self.hotel_repo.get_hotel_by_owner(requester.user_id)
        if hotel is None:
            raise NotFoundException("hotel for owner", requester.user_id)
        return hotel

    def _owned_room(self, requester: Requester, room_id: str) -> Room:
        room = self.get_room(room_id)
        hotel = self.hotel_repo.get_hotel_by_id(room.hotel_id)
        if hotel is None:
            raise NotFoundException("hotel", room.hotel_id)
        if not requester.owns(hotel.owner_id):
            raise Unauthorized("Not authorized to modify this room")
        return room
