import importlib
import json
import os
import unittest
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock, patch

from common.models.bookings import Booking, BookingStatus, PaymentMethod
from common.models.users import Requester
from common.services.payment_gateway import TimeoutPaymentGateway
from common.utils.custom_exceptions import (
    AlreadyPaid,
    GatewayFailure,
    PaymentInProgress,
    Unauthorized,
)


class ProcessPaymentHandlerTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.env = patch.dict(
            os.environ,
            {"TABLE_NAME": "test-table", "PAYMENT_TIMEOUT_SECONDS": "3"},
            clear=False,
        )
        cls.env.start()
        cls.resource = patch("boto3.resource")
        mock_resource = cls.resource.start()
        mock_resource.return_value.Table.return_value = MagicMock()
        import handlers.bookings.process_payment as mod
        cls.mod = importlib.reload(mod)

    @classmethod
    def tearDownClass(cls):
        cls.resource.stop()
        cls.env.stop()

    def setUp(self):
        self.p_pay = patch.object(self.mod.booking_service, "process_payment")
        self.mock_pay = self.p_pay.start()

    def tearDown(self):
        self.p_pay.stop()

    def _event(self, body=None):
        return {
            "body": json.dumps(body or {"bookingId": "b1", "paymentMethod": "paypal"}),
            "requestContext": {"authorizer": {"user_id": "u1", "role": "GUEST"}},
        }

    def test_gateway_is_bounded_by_timeout(self):
        gateway = self.mod.booking_service.payment_gateway
        self.assertIsInstance(gateway, TimeoutPaymentGateway)
        self.assertEqual(gateway.timeout_seconds, 3.0)

    def test_success(self):
        self.mock_pay.return_value = Booking(
            booking_id="b1", user_id="u1", room_id="r1", hotel_id="h1",
            check_in=date(2024, 6, 1), check_out=date(2024, 6, 4), guests=1,
            total_price=Decimal("300"), status=BookingStatus.CONFIRMED, is_paid=True,
            payment_method="paypal", payment_id="pay_1",
        )

        resp = self.mod.process_payment(self._event(), None)

        body = json.loads(resp["body"])
        self.assertEqual(resp["statusCode"], 200)
        self.assertTrue(body["booking"]["isPaid"])
        self.assertEqual(body["booking"]["paymentMethod"], "paypal")
        self.mock_pay.assert_called_once_with(Requester(user_id="u1"), "b1", PaymentMethod.PAYPAL)

    def test_unsupported_method(self):
        resp = self.mod.process_payment(self._event({"bookingId": "b1", "paymentMethod": "cash"}), None)
        self.assertEqual(resp["statusCode"], 400)
        self.mock_pay.assert_not_called()

    def test_declined(self):
        self.mock_pay.side_effect = GatewayFailure("Payment declined by the processor")

        resp = self.mod.process_payment(self._event(), None)

        self.assertEqual(resp["statusCode"], 402)
        self.assertEqual(json.loads(resp["body"])["message"], "Payment declined by the processor")

    def test_already_paid(self):
        self.mock_pay.side_effect = AlreadyPaid("Booking is already paid")
        resp = self.mod.process_payment(self._event(), None)
        self.assertEqual(resp["statusCode"], 409)

    def test_in_progress(self):
        self.mock_pay.side_effect = PaymentInProgress("busy")
        resp = self.mod.process_payment(self._event(), None)
        self.assertEqual(resp["statusCode"], 409)

    def test_not_the_booker(self):
        self.mock_pay.side_effect = Unauthorized("Unauthorized")
        resp = self.mod.process_payment(self._event(), None)
        self.assertEqual(resp["statusCode"], 403)


if __name__ == "__main__":
    unittest.main()
