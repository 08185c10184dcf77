from typing import Optional

from pydantic import BaseModel, Field, model_validator


class LocationSchema(BaseModel):
    lat: float = 0.0
    lng: float = 0.0


class RegisterHotelRequest(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    address: str = Field(min_length=1)
    contact: str = Field(min_length=1)
    city: str = Field(min_length=1)
    destination: str = ""
    location: Optional[LocationSchema] = None


class UpdateHotelRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    address: Optional[str] = None
    contact: Optional[str] = None
    city: Optional[str] = None
    destination: Optional[str] = None
    location: Optional[LocationSchema] = None

    @model_validator(mode="after")
    def require_change(self):
        if not self.model_dump(exclude_none=True):
            raise ValueError("Please provide at least one field to update")
        return self
