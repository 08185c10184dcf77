import random
import threading
import unittest
from decimal import Decimal
from unittest.mock import MagicMock

from common.services.payment_gateway import (
    PaymentResult,
    SimulatedPaymentGateway,
    TimeoutPaymentGateway,
)


class TestSimulatedPaymentGateway(unittest.TestCase):
    def test_always_succeeds_at_full_rate(self):
        sleep = MagicMock()
        gateway = SimulatedPaymentGateway(success_rate=1.0, rng=random.Random(1), sleep=sleep)

        result = gateway.process_payment(Decimal("300"), "card")

        self.assertTrue(result.success)
        self.assertTrue(result.payment_id.startswith("pay_"))
        sleep.assert_called_once()
        delay = sleep.call_args[0][0]
        self.assertTrue(1.0 <= delay <= 1.5)

    def test_always_declines_at_zero_rate(self):
        gateway = SimulatedPaymentGateway(success_rate=0.0, sleep=MagicMock())

        result = gateway.process_payment(Decimal("300"), "card")

        self.assertFalse(result.success)
        self.assertIsNone(result.payment_id)

    def test_rejects_non_positive_amount(self):
        gateway = SimulatedPaymentGateway(success_rate=1.0, sleep=MagicMock())
        self.assertFalse(gateway.process_payment(Decimal("0"), "card").success)

    def test_refund(self):
        gateway = SimulatedPaymentGateway(sleep=MagicMock())
        result = gateway.refund_payment("pay_1", Decimal("300"))
        self.assertTrue(result.success)
        self.assertEqual(result.payment_id, "pay_1")


class TestTimeoutPaymentGateway(unittest.TestCase):
    def test_passes_through_result(self):
        inner = MagicMock()
        inner.process_payment.return_value = PaymentResult(success=True, payment_id="pay_1")
        gateway = TimeoutPaymentGateway(inner, timeout_seconds=1)

        result = gateway.process_payment(Decimal("10"), "card")

        self.assertEqual(result.payment_id, "pay_1")
        inner.process_payment.assert_called_once_with(Decimal("10"), "card")

    def test_slow_gateway_times_out(self):
        release = threading.Event()
        inner = MagicMock()
        inner.process_payment.side_effect = lambda *args: release.wait(5) and PaymentResult(True, "late")
        gateway = TimeoutPaymentGateway(inner, timeout_seconds=0.05)

        try:
            result = gateway.process_payment(Decimal("10"), "card")
        finally:
            release.set()

        self.assertFalse(result.success)
        self.assertEqual(result.message, "Payment gateway timed out")

    def test_gateway_exception_is_a_failure(self):
        inner = MagicMock()
        inner.refund_payment.side_effect = ConnectionError("down")
        gateway = TimeoutPaymentGateway(inner, timeout_seconds=1)

        result = gateway.refund_payment("pay_1", Decimal("10"))

        self.assertFalse(result.success)
        self.assertEqual(result.message, "Payment gateway error")


if __name__ == "__main__":
    unittest.main()
