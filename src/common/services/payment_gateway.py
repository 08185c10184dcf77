import logging
import random
import time
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
from uuid import uuid4

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentResult:
    success: bool
    payment_id: Optional[str] = None
    message: Optional[str] = None


class PaymentGateway(ABC):
    @abstractmethod
    def process_payment(self, amount: Decimal, method: str) -> PaymentResult:
        ...

    @abstractmethod
    def refund_payment(self, payment_id: str, amount: Decimal) -> PaymentResult:
        ...


class SimulatedPaymentGateway(PaymentGateway):
    """Stand-in processor with network-like latency and occasional declines."""

    def __init__(
        self,
        success_rate: float = 0.9,
        latency: tuple[float, float] = (1.0, 1.5),
        rng: Optional[random.Random] = None,
        sleep=time.sleep,
    ):
        self.success_rate = success_rate
        self.latency = latency
        self.rng = rng or random.Random()
        self.sleep = sleep

    def _wait(self):
        self.sleep(self.rng.uniform(*self.latency))

    def process_payment(self, amount: Decimal, method: str) -> PaymentResult:
        self._wait()
        if amount <= 0:
            return PaymentResult(success=False, message="Invalid payment amount")
        if self.rng.random() < self.success_rate:
            return PaymentResult(success=True, payment_id=f"pay_{uuid4().hex}")
        return PaymentResult(success=False, message="Payment declined by the processor")

    def refund_payment(self, payment_id: str, amount: Decimal) -> PaymentResult:
        self._wait()
        return PaymentResult(success=True, payment_id=payment_id, message="Refund issued")


class TimeoutPaymentGateway(PaymentGateway):
    """Bounds every call to the wrapped gateway by a timeout.

    A call that does not finish in time is reported as a failed PaymentResult
    and its late result is discarded.
    """

    def __init__(self, gateway: PaymentGateway, timeout_seconds: float):
        self.gateway = gateway
        self.timeout_seconds = timeout_seconds

    def _call(self, description: str, fn, *args) -> PaymentResult:
        executor = ThreadPoolExecutor(max_workers=1)
        future = executor.submit(fn, *args)
        try:
            return future.result(timeout=self.timeout_seconds)
        except FutureTimeout:
            future.cancel()
            logger.warning("%s timed out after %ss", description, self.timeout_seconds)
            return PaymentResult(success=False, message="Payment gateway timed out")
        except Exception:
            logger.exception("%s raised", description)
            return PaymentResult(success=False, message="Payment gateway error")
        finally:
            executor.shutdown(wait=False)

    def process_payment(self, amount: Decimal, method: str) -> PaymentResult:
        return self._call("Payment", self.gateway.process_payment, amount, method)

    def refund_payment(self, payment_id: str, amount: Decimal) -> PaymentResult:
        return self._call(
            f"Refund {payment_id}", self.gateway.refund_payment, payment_id, amount
        )
