from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MAX_IMAGES = 4


def _normalise_amenities(values: list[str]) -> list[str]:
    seen = []
    for value in values:
        value = value.strip()
        if value and value not in seen:
            seen.append(value)
    return seen


class AddRoomRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    room_type: str = Field(alias="roomType", min_length=1)
    price_per_night: Decimal = Field(alias="pricePerNight", gt=0)
    amenities: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list, max_length=MAX_IMAGES)

    @field_validator("amenities")
    @classmethod
    def unique_amenities(cls, v: list[str]):
        return _normalise_amenities(v)


class UpdateRoomRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    room_type: Optional[str] = Field(default=None, alias="roomType", min_length=1)
    price_per_night: Optional[Decimal] = Field(default=None, alias="pricePerNight", gt=0)
    amenities: Optional[list[str]] = None
    images: Optional[list[str]] = Field(default=None, max_length=MAX_IMAGES)

    @field_validator("amenities")
    @classmethod
    def unique_amenities(cls, v: Optional[list[str]]):
        return _normalise_amenities(v) if v is not None else v

    @model_validator(mode="after")
    def require_change(self):
        if not self.model_dump(exclude_none=True):
            raise ValueError("Please provide at least one field to update")
        return self


class ToggleAvailabilityRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    room_id: str = Field(alias="roomId", min_length=1)
