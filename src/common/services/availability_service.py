from datetime import date
from typing import Iterable

from common.models.bookings import Booking
from common.repository.booking_repo import BookingRepository
from common.repository.room_repo import RoomRepository
from common.utils.custom_exceptions import NotFoundException


def ranges_overlap(
    existing_check_in: date,
    existing_check_out: date,
    check_in: date,
    check_out: date,
) -> bool:
    # Inclusive on both ends: a stay ending on the day another begins overlaps it.
    return existing_check_in <= check_out and existing_check_out >= check_in


def find_conflicts(
    bookings: Iterable[Booking], check_in: date, check_out: date
) -> list[Booking]:
    return [
        b
        for b in bookings
        if b.is_active and ranges_overlap(b.check_in, b.check_out, check_in, check_out)
    ]


class AvailabilityChecker:
    def __init__(self, booking_repo: BookingRepository, room_repo: RoomRepository):
        self.booking_repo = booking_repo
        self.room_repo = room_repo

    def is_available(self, room_id: str, check_in: date, check_out: date) -> bool:
        if self.room_repo.get_room_by_id(room_id) is None:
            raise NotFoundException("room", room_id)
        return self.is_free(room_id, check_in, check_out)

    def is_free(self, room_id: str, check_in: date, check_out: date) -> bool:
        """Date-range check only; the caller has already resolved the room."""
        bookings = self.booking_repo.get_room_bookings(room_id)
        return not find_conflicts(bookings, check_in, check_out)
