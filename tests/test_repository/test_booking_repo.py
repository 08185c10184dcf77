import unittest
from unittest.mock import MagicMock
from datetime import date, datetime, timezone
from decimal import Decimal
from botocore.exceptions import ClientError

from common.repository.booking_repo import BookingRepository
from common.models.bookings import Booking, BookingStatus
from common.utils.custom_exceptions import (
    InvalidStatusTransition,
    PaymentInProgress,
    RoomUnavailable,
)


def cancelled_transaction():
    return ClientError(
        {
            "Error": {"Code": "TransactionCanceledException", "Message": "cancelled"},
            "CancellationReasons": [{"Code": "None"}, {"Code": "ConditionalCheckFailed"}],
        },
        "TransactWriteItems",
    )


class TestBookingRepository(unittest.TestCase):

    def setUp(self):
        self.table = MagicMock()
        self.table.name = "test-table"
        self.client = MagicMock()

        self.table.meta.client = self.client
        self.repo = BookingRepository(self.table, self.client)

        self.booking = Booking(
            booking_id="b1",
            user_id="u1",
            room_id="r1",
            hotel_id="h1",
            check_in=date(2024, 6, 1),
            check_out=date(2024, 6, 4),
            guests=2,
            total_price=Decimal("300"),
            created_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
        )

    def test_add_booking_writes_copies_and_night_locks(self):
        self.repo.add_booking(self.booking)

        self.client.transact_write_items.assert_called_once()
        _, kwargs = self.client.transact_write_items.call_args
        items = kwargs["TransactItems"]

        # four booking copies plus one lock per day of 06-01..06-04
        self.assertEqual(len(items), 8)

        details = items[0]["Put"]
        self.assertEqual(details["Item"]["pk"], "BOOKING#b1")
        self.assertEqual(details["Item"]["sk"], "DETAILS")
        self.assertEqual(details["Item"]["booking_status"], "pending")
        self.assertEqual(details["Item"]["total_price"], Decimal("300"))
        self.assertEqual(details["ConditionExpression"], "attribute_not_exists(pk)")

        partitions = [item["Put"]["Item"]["pk"] for item in items[1:4]]
        self.assertEqual(partitions, ["USER#u1", "HOTEL#h1", "ROOM#r1"])

        nights = [item["Put"]["Item"]["sk"] for item in items[4:]]
        self.assertEqual(
            nights,
            ["NIGHT#2024-06-01", "NIGHT#2024-06-02", "NIGHT#2024-06-03", "NIGHT#2024-06-04"],
        )
        for item in items[4:]:
            self.assertEqual(item["Put"]["ConditionExpression"], "attribute_not_exists(pk)")

    def test_add_booking_lost_race_raises_room_unavailable(self):
        self.client.transact_write_items.side_effect = cancelled_transaction()

        with self.assertRaises(RoomUnavailable):
            self.repo.add_booking(self.booking)

    def test_add_booking_other_client_error_propagates(self):
        self.client.transact_write_items.side_effect = ClientError(
            error_response={"Error": {"Code": "InternalServerError", "Message": "Write failed"}},
            operation_name="TransactWriteItems"
        )

        with self.assertRaises(ClientError):
            self.repo.add_booking(self.booking)

    def test_get_user_bookings(self):
        self.table.query.return_value = {
            "Items": [
                {
                    "pk": "USER#u1",
                    "sk": "BOOKING#b1",
                    "booking_id": "b1",
                    "user_id": "u1",
                    "room_id": "r1",
                    "hotel_id": "h1",
                    "check_in": "2024-06-01",
                    "check_out": "2024-06-04",
                    "guests": Decimal("2"),
                    "total_price": Decimal("300"),
                    "booking_status": "confirmed",
                    "is_paid": True,
                    "payment_method": "card",
                    "payment_id": "pay_1",
                    "created_at": "2024-05-01T00:00:00+00:00",
                }
            ]
        }

        bookings = self.repo.get_user_bookings("u1")

        self.assertEqual(len(bookings), 1)
        booking = bookings[0]
        self.assertEqual(booking.status, BookingStatus.CONFIRMED)
        self.assertEqual(booking.check_in, date(2024, 6, 1))
        self.assertEqual(booking.guests, 2)
        self.assertTrue(booking.is_paid)
        self.assertEqual(booking.payment_id, "pay_1")

    def test_get_booking_by_id_missing(self):
        self.table.get_item.return_value = {}

        self.assertIsNone(self.repo.get_booking_by_id("missing"))
        self.table.get_item.assert_called_once_with(Key={"pk": "BOOKING#missing", "sk": "DETAILS"})

    def test_update_booking_guards_status_and_releases_nights(self):
        self.booking.status = BookingStatus.CANCELLED

        self.repo.update_booking(
            self.booking, expected_status=BookingStatus.PENDING, release_nights=True
        )

        _, kwargs = self.client.transact_write_items.call_args
        items = kwargs["TransactItems"]
        self.assertEqual(len(items), 8)

        details = items[0]["Update"]
        self.assertIn("#status = :expected", details["ConditionExpression"])
        self.assertEqual(details["ExpressionAttributeValues"][":expected"], "pending")
        self.assertEqual(details["ExpressionAttributeValues"][":status"], "cancelled")
        for item in items[1:4]:
            self.assertNotIn("ConditionExpression", item["Update"])

        deletes = [item["Delete"]["Key"]["sk"] for item in items[4:]]
        self.assertEqual(deletes[0], "NIGHT#2024-06-01")
        self.assertEqual(deletes[-1], "NIGHT#2024-06-04")

    def test_update_booking_without_release_keeps_locks(self):
        self.booking.status = BookingStatus.CONFIRMED

        self.repo.update_booking(self.booking, expected_status=BookingStatus.PENDING)

        _, kwargs = self.client.transact_write_items.call_args
        self.assertEqual(len(kwargs["TransactItems"]), 4)

    def test_update_booking_concurrent_change(self):
        self.client.transact_write_items.side_effect = cancelled_transaction()

        with self.assertRaises(InvalidStatusTransition):
            self.repo.update_booking(self.booking, expected_status=BookingStatus.PENDING)

    def test_acquire_payment_lease_conflict(self):
        self.table.update_item.side_effect = ClientError(
            {"Error": {"Code": "ConditionalCheckFailedException"}}, "UpdateItem"
        )

        with self.assertRaises(PaymentInProgress):
            self.repo.acquire_payment_lease("b1", now=100, expires_at=106)

    def test_acquire_payment_lease_condition(self):
        self.repo.acquire_payment_lease("b1", now=100, expires_at=106)

        _, kwargs = self.table.update_item.call_args
        self.assertEqual(kwargs["Key"], {"pk": "BOOKING#b1", "sk": "DETAILS"})
        self.assertIn("#lease < :now", kwargs["ConditionExpression"])
        self.assertEqual(kwargs["ExpressionAttributeValues"][":expires"], 106)

    def test_mark_paid_updates_all_copies(self):
        self.booking.payment_id = "pay_1"
        self.booking.payment_method = "card"

        self.repo.mark_paid(self.booking)

        _, kwargs = self.client.transact_write_items.call_args
        items = kwargs["TransactItems"]
        self.assertEqual(len(items), 4)
        details = items[0]["Update"]
        self.assertIn("REMOVE #lease", details["UpdateExpression"])
        self.assertEqual(details["ExpressionAttributeValues"][":status"], "confirmed")
        self.assertEqual(details["ExpressionAttributeValues"][":payment"], "pay_1")

    def test_mark_paid_on_changed_booking(self):
        self.client.transact_write_items.side_effect = cancelled_transaction()

        with self.assertRaises(InvalidStatusTransition):
            self.repo.mark_paid(self.booking)


if __name__ == "__main__":
    unittest.main()
