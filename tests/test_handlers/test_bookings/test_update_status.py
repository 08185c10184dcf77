import importlib
import json
import os
import unittest
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock, patch

from common.models.bookings import Booking, BookingStatus
from common.models.users import Requester, UserRole
from common.utils.custom_exceptions import GatewayFailure, InvalidStatusTransition, Unauthorized


class UpdateStatusHandlerTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.env = patch.dict(os.environ, {"TABLE_NAME": "test-table"}, clear=False)
        cls.env.start()
        cls.resource = patch("boto3.resource")
        mock_resource = cls.resource.start()
        mock_resource.return_value.Table.return_value = MagicMock()
        import handlers.bookings.update_status as mod
        cls.mod = importlib.reload(mod)

    @classmethod
    def tearDownClass(cls):
        cls.resource.stop()
        cls.env.stop()

    def setUp(self):
        self.p_update = patch.object(self.mod.booking_service, "update_status")
        self.mock_update = self.p_update.start()

    def tearDown(self):
        self.p_update.stop()

    def _event(self, body):
        return {
            "body": json.dumps(body),
            "requestContext": {"authorizer": {"user_id": "o1", "role": "HOTEL_OWNER"}},
        }

    def test_confirm(self):
        self.mock_update.return_value = Booking(
            booking_id="b1", user_id="u1", room_id="r1", hotel_id="h1",
            check_in=date(2024, 6, 1), check_out=date(2024, 6, 4), guests=1,
            total_price=Decimal("300"), status=BookingStatus.CONFIRMED,
        )

        resp = self.mod.update_booking_status(
            self._event({"bookingId": "b1", "status": "confirmed"}), None
        )

        self.assertEqual(resp["statusCode"], 200)
        self.assertEqual(json.loads(resp["body"])["booking"]["status"], "confirmed")
        self.mock_update.assert_called_once_with(
            Requester(user_id="o1", role=UserRole.HOTEL_OWNER),
            "b1",
            status=BookingStatus.CONFIRMED,
            is_paid=None,
        )

    def test_unknown_status(self):
        resp = self.mod.update_booking_status(
            self._event({"bookingId": "b1", "status": "checked-in"}), None
        )
        self.assertEqual(resp["statusCode"], 400)
        self.mock_update.assert_not_called()

    def test_nothing_to_update(self):
        resp = self.mod.update_booking_status(self._event({"bookingId": "b1"}), None)
        self.assertEqual(resp["statusCode"], 400)

    def test_not_the_owner(self):
        self.mock_update.side_effect = Unauthorized("Not authorized to update this booking")
        resp = self.mod.update_booking_status(
            self._event({"bookingId": "b1", "status": "cancelled"}), None
        )
        self.assertEqual(resp["statusCode"], 403)

    def test_forbidden_transition(self):
        self.mock_update.side_effect = InvalidStatusTransition("Cannot change booking")
        resp = self.mod.update_booking_status(
            self._event({"bookingId": "b1", "status": "pending"}), None
        )
        self.assertEqual(resp["statusCode"], 400)

    def test_refund_failure(self):
        self.mock_update.side_effect = GatewayFailure("Refund failed")
        resp = self.mod.update_booking_status(
            self._event({"bookingId": "b1", "status": "cancelled"}), None
        )
        self.assertEqual(resp["statusCode"], 402)


if __name__ == "__main__":
    unittest.main()
