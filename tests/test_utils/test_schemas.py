import unittest
from datetime import date
from pydantic import ValidationError

from common.models.bookings import BookingStatus, PaymentMethod
from common.schemas.bookings import BookingRequest, PaymentRequest, UpdateStatusRequest
from common.schemas.reviews import CreateReviewRequest, UpdateReviewRequest
from common.schemas.rooms import AddRoomRequest, UpdateRoomRequest


class TestBookingSchemas(unittest.TestCase):
    def test_booking_request_accepts_datetime_strings(self):
        req = BookingRequest.model_validate_json(
            '{"room": "r1", "checkInDate": "2024-06-01T00:00:00.000Z", '
            '"checkOutDate": "2024-06-04", "guests": 2}'
        )
        self.assertEqual(req.check_in, date(2024, 6, 1))
        self.assertEqual(req.check_out, date(2024, 6, 4))
        self.assertEqual(req.guests, 2)

    def test_booking_request_rejects_zero_guests(self):
        with self.assertRaises(ValidationError):
            BookingRequest.model_validate_json(
                '{"room": "r1", "checkInDate": "2024-06-01", "checkOutDate": "2024-06-04", "guests": 0}'
            )

    def test_update_status_requires_a_change(self):
        with self.assertRaises(ValidationError):
            UpdateStatusRequest.model_validate_json('{"bookingId": "b1"}')

    def test_update_status_parses_status(self):
        req = UpdateStatusRequest.model_validate_json('{"bookingId": "b1", "status": "cancelled"}')
        self.assertEqual(req.status, BookingStatus.CANCELLED)
        self.assertIsNone(req.is_paid)

    def test_payment_method_defaults_to_card(self):
        req = PaymentRequest.model_validate_json('{"bookingId": "b1"}')
        self.assertEqual(req.payment_method, PaymentMethod.CARD)


class TestReviewAndRoomSchemas(unittest.TestCase):
    def test_rating_out_of_range(self):
        with self.assertRaises(ValidationError):
            CreateReviewRequest.model_validate_json('{"roomId": "r1", "rating": 6, "comment": "ok"}')

    def test_blank_comment_rejected(self):
        with self.assertRaises(ValidationError):
            CreateReviewRequest.model_validate_json('{"roomId": "r1", "rating": 4, "comment": "   "}')

    def test_update_review_needs_a_field(self):
        with self.assertRaises(ValidationError):
            UpdateReviewRequest.model_validate_json("{}")

    def test_amenities_are_deduplicated(self):
        req = AddRoomRequest.model_validate_json(
            '{"roomType": "Deluxe", "pricePerNight": 120, "amenities": ["Wifi", " Wifi", "TV"]}'
        )
        self.assertEqual(req.amenities, ["Wifi", "TV"])

    def test_non_positive_price_rejected(self):
        with self.assertRaises(ValidationError):
            AddRoomRequest.model_validate_json('{"roomType": "Deluxe", "pricePerNight": 0}')

    def test_update_room_needs_a_field(self):
        with self.assertRaises(ValidationError):
            UpdateRoomRequest.model_validate_json("{}")


if __name__ == "__main__":
    unittest.main()
