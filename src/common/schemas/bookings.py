from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from common.models.bookings import BookingStatus, PaymentMethod
from common.utils.constants import MAX_GUESTS


def _calendar_date(value):
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


class DateRangeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    room: str = Field(min_length=1)
    check_in: date = Field(alias="checkInDate")
    check_out: date = Field(alias="checkOutDate")

    @field_validator("check_in", "check_out", mode="before")
    @classmethod
    def strip_time(cls, v):
        return _calendar_date(v)


class AvailabilityRequest(DateRangeRequest):
    pass


class BookingRequest(DateRangeRequest):
    guests: int = Field(default=1, ge=1, le=MAX_GUESTS)


class UpdateStatusRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    booking_id: str = Field(alias="bookingId", min_length=1)
    status: Optional[BookingStatus] = None
    is_paid: Optional[bool] = Field(default=None, alias="isPaid")

    @model_validator(mode="after")
    def require_change(self):
        if self.status is None and self.is_paid is None:
            raise ValueError("status or isPaid must be provided")
        return self


class PaymentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    booking_id: str = Field(alias="bookingId", min_length=1)
    payment_method: PaymentMethod = Field(default=PaymentMethod.CARD, alias="paymentMethod")
