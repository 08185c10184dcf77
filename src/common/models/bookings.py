from enum import Enum
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from common.utils.constants import DEFAULT_PAYMENT_METHOD


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    CARD = "card"
    PAYPAL = "paypal"
    PAY_AT_HOTEL = DEFAULT_PAYMENT_METHOD


@dataclass
class Booking:
    booking_id: str
    user_id: str
    room_id: str
    hotel_id: str
    check_in: date
    check_out: date
    guests: int
    total_price: Decimal
    status: BookingStatus = BookingStatus.PENDING
    is_paid: bool = False
    payment_method: str = DEFAULT_PAYMENT_METHOD
    payment_id: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_active(self) -> bool:
        return self.status != BookingStatus.CANCELLED

    def to_dict(self) -> dict:
        return {
            "id": self.booking_id,
            "user": self.user_id,
            "room": self.room_id,
            "hotel": self.hotel_id,
            "checkInDate": self.check_in.isoformat(),
            "checkOutDate": self.check_out.isoformat(),
            "guests": self.guests,
            "totalPrice": float(self.total_price),
            "status": self.status.value,
            "isPaid": self.is_paid,
            "paymentMethod": self.payment_method,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass
class BookingStats:
    total_bookings: int = 0
    confirmed_bookings: int = 0
    pending_bookings: int = 0
    cancelled_bookings: int = 0
    paid_bookings: int = 0
    unpaid_bookings: int = 0
    total_revenue: Decimal = Decimal("0")
    rooms_count: int = 0

    def to_dict(self) -> dict:
        return {
            "totalBookings": self.total_bookings,
            "confirmedBookings": self.confirmed_bookings,
            "pendingBookings": self.pending_bookings,
            "cancelledBookings": self.cancelled_bookings,
            "paidBookings": self.paid_bookings,
            "unpaidBookings": self.unpaid_bookings,
            "totalRevenue": float(self.total_revenue),
            "roomsCount": self.rooms_count,
        }
