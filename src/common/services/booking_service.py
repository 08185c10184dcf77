import logging
import time
from dataclasses import replace
from datetime import date
from typing import List, Optional
from uuid import uuid4

from common.models.bookings import Booking, BookingStats, BookingStatus, PaymentMethod
from common.models.users import Requester
from common.repository.booking_repo import BookingRepository
from common.repository.hotel_repo import HotelRepository
from common.repository.room_repo import RoomRepository
from common.services.availability_service import AvailabilityChecker
from common.services.payment_gateway import PaymentGateway
from common.services.pricing import calculate_nights, calculate_total_price
from common.utils.constants import DEFAULT_PAYMENT_TIMEOUT_SECONDS, MAX_STAY
from common.utils.custom_exceptions import (
    AlreadyPaid,
    GatewayFailure,
    InvalidDates,
    InvalidInput,
    InvalidStatusTransition,
    NotFoundException,
    PaymentInProgress,
    RoomUnavailable,
    Unauthorized,
)
from common.utils.datetime_normaliser import utc_today

logger = logging.getLogger(__name__)

# Owner-driven status changes. Re-applying the current status is always a no-op.
ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.CANCELLED},
    BookingStatus.CANCELLED: set(),
}


def summarize_bookings(
    bookings: List[Booking], rooms_count: int, revenue_requires_confirmed: bool = False
) -> BookingStats:
    stats = BookingStats(total_bookings=len(bookings), rooms_count=rooms_count)
    for booking in bookings:
        if booking.status == BookingStatus.CONFIRMED:
            stats.confirmed_bookings += 1
        elif booking.status == BookingStatus.PENDING:
            stats.pending_bookings += 1
        else:
            stats.cancelled_bookings += 1

        if booking.is_paid:
            stats.paid_bookings += 1
            if not revenue_requires_confirmed or booking.status == BookingStatus.CONFIRMED:
                stats.total_revenue += booking.total_price
        else:
            stats.unpaid_bookings += 1
    return stats


def newest_first(bookings: List[Booking]) -> List[Booking]:
    return sorted(bookings, key=lambda b: b.created_at, reverse=True)


class BookingService:
    def __init__(
        self,
        booking_repo: BookingRepository,
        room_repo: RoomRepository,
        hotel_repo: HotelRepository,
        payment_gateway: Optional[PaymentGateway] = None,
        availability_checker: Optional[AvailabilityChecker] = None,
        payment_timeout: float = DEFAULT_PAYMENT_TIMEOUT_SECONDS,
    ):
        self.booking_repo = booking_repo
        self.room_repo = room_repo
        self.hotel_repo = hotel_repo
        self.payment_gateway = payment_gateway
        self.availability_checker = availability_checker or AvailabilityChecker(
            booking_repo=booking_repo, room_repo=room_repo
        )
        self.payment_timeout = payment_timeout

    def check_availability(self, room_id: str, check_in: date, check_out: date) -> bool:
        self._validate_dates(check_in, check_out)
        return self.availability_checker.is_available(room_id, check_in, check_out)

    def create_booking(
        self,
        requester: Requester,
        room_id: str,
        check_in: date,
        check_out: date,
        guests: int,
    ) -> Booking:
        self._validate_dates(check_in, check_out)
        if check_in < utc_today():
            raise InvalidDates("checkin cannot be in the past")
        if guests < 1:
            raise InvalidInput("guests must be at least 1")

        room = self.room_repo.get_room_by_id(room_id)
        if room is None:
            raise NotFoundException("room", room_id)
        if not room.is_available:
            raise RoomUnavailable("Room is not accepting bookings")

        if not self.availability_checker.is_free(room_id, check_in, check_out):
            raise RoomUnavailable("Room is not available for the selected dates")

        booking = Booking(
            booking_id=str(uuid4()),
            user_id=requester.user_id,
            room_id=room.room_id,
            hotel_id=room.hotel_id,
            check_in=check_in,
            check_out=check_out,
            guests=guests,
            total_price=calculate_total_price(room.price_per_night, check_in, check_out),
        )
        # The write re-checks every night conditionally, so a concurrent
        # overlapping booking that slipped past is_free still loses here.
        self.booking_repo.add_booking(booking)
        logger.info(
            "Booking %s created for room %s (%s to %s)",
            booking.booking_id,
            room_id,
            check_in,
            check_out,
        )
        return booking

    def get_user_bookings(self, requester: Requester) -> List[Booking]:
        return newest_first(self.booking_repo.get_user_bookings(requester.user_id))

    def get_hotel_bookings(self, requester: Requester) -> tuple[List[Booking], BookingStats]:
        hotel = self.hotel_repo.get_hotel_by_owner(requester.user_id)
        if hotel is None:
            raise NotFoundException("hotel for owner", requester.user_id)
        bookings = newest_first(self.booking_repo.get_hotel_bookings(hotel.hotel_id))
        rooms = self.room_repo.get_rooms_by_hotel(hotel.hotel_id)
        return bookings, summarize_bookings(bookings, len(rooms))

    def update_status(
        self,
        requester: Requester,
        booking_id: str,
        status: Optional[BookingStatus] = None,
        is_paid: Optional[bool] = None,
    ) -> Booking:
        if status is None and is_paid is None:
            raise InvalidInput("status or isPaid must be provided")

        booking = self._get_booking(booking_id)
        hotel = self.hotel_repo.get_hotel_by_id(booking.hotel_id)
        if hotel is None:
            raise NotFoundException("hotel", booking.hotel_id)
        if not requester.owns(hotel.owner_id):
            raise Unauthorized("Not authorized to update this booking")

        new_status = booking.status if status is None else status
        if new_status != booking.status and new_status not in ALLOWED_TRANSITIONS[booking.status]:
            raise InvalidStatusTransition(
                f"Cannot change booking from {booking.status.value} to {new_status.value}"
            )

        cancelling = (
            new_status == BookingStatus.CANCELLED and booking.status != BookingStatus.CANCELLED
        )
        # A cancelled booking that still holds a payment is refunded, including
        # a retry on a booking whose earlier refund failed.
        refund_due = (
            new_status == BookingStatus.CANCELLED
            and booking.is_paid
            and bool(booking.payment_id)
        )
        updated = replace(booking, status=new_status)
        if is_paid is not None and not refund_due:
            updated.is_paid = is_paid

        # Refunds only follow a committed cancellation.
        self.booking_repo.update_booking(
            updated, expected_status=booking.status, release_nights=cancelling
        )
        if refund_due:
            self._refund(booking)
            updated = replace(updated, is_paid=False)
            self.booking_repo.update_booking(updated, expected_status=BookingStatus.CANCELLED)

        logger.info(
            "Booking %s updated by owner %s: status=%s is_paid=%s",
            booking_id,
            requester.user_id,
            updated.status.value,
            updated.is_paid,
        )
        return updated

    def process_payment(
        self, requester: Requester, booking_id: str, payment_method: PaymentMethod
    ) -> Booking:
        if self.payment_gateway is None:
            raise RuntimeError("No payment gateway configured")

        booking = self._get_booking(booking_id)
        if booking.user_id != requester.user_id:
            raise Unauthorized("Unauthorized")
        if booking.is_paid:
            raise AlreadyPaid("Booking is already paid")
        if booking.status == BookingStatus.CANCELLED:
            raise InvalidStatusTransition("Cannot pay for a cancelled booking")

        now = int(time.time())
        try:
            self.booking_repo.acquire_payment_lease(
                booking_id, now=now, expires_at=now + int(self.payment_timeout) + 1
            )
        except PaymentInProgress:
            if self._get_booking(booking_id).is_paid:
                raise AlreadyPaid("Booking is already paid")
            raise

        result = self.payment_gateway.process_payment(booking.total_price, payment_method.value)
        if not result.success:
            self.booking_repo.release_payment_lease(booking_id)
            logger.info("Payment for booking %s failed: %s", booking_id, result.message)
            raise GatewayFailure(result.message or "Payment failed")

        paid = replace(
            booking,
            is_paid=True,
            status=BookingStatus.CONFIRMED,
            payment_method=payment_method.value,
            payment_id=result.payment_id,
        )
        try:
            self.booking_repo.mark_paid(paid)
        except InvalidStatusTransition:
            # The booking was cancelled or paid while the gateway call ran.
            self.booking_repo.release_payment_lease(booking_id)
            if result.payment_id:
                self._refund(paid)
            raise
        logger.info("Payment %s recorded for booking %s", result.payment_id, booking_id)
        return paid

    def _refund(self, booking: Booking):
        if self.payment_gateway is None:
            raise RuntimeError("No payment gateway configured")
        result = self.payment_gateway.refund_payment(booking.payment_id, booking.total_price)
        if not result.success:
            logger.error("Refund of payment %s failed: %s", booking.payment_id, result.message)
            raise GatewayFailure(result.message or "Refund failed")
        logger.info("Refunded payment %s of booking %s", booking.payment_id, booking.booking_id)

    def _get_booking(self, booking_id: str) -> Booking:
        booking = self.booking_repo.get_booking_by_id(booking_id)
        if booking is None:
            raise NotFoundException("booking", booking_id)
        return booking

    @staticmethod
    def _validate_dates(check_in: date, check_out: date) -> int:
        if check_out <= check_in:
            raise InvalidDates("checkout must be after checkin")
        nights = calculate_nights(check_in, check_out)
        if nights > MAX_STAY:
            raise InvalidDates(f"Maximum stay is {MAX_STAY} nights")
        return nights
