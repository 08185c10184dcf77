from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class CreateReviewRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    room_id: str = Field(alias="roomId", min_length=1)
    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=1, max_length=2000)
    stay_date: Optional[date] = Field(default=None, alias="stayDate")

    @field_validator("stay_date", mode="before")
    @classmethod
    def strip_time(cls, v):
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        return v

    @field_validator("comment")
    @classmethod
    def comment_not_blank(cls, v: str):
        if not v.strip():
            raise ValueError("comment must not be blank")
        return v.strip()


class UpdateReviewRequest(BaseModel):
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=2000)

    @model_validator(mode="after")
    def require_change(self):
        if self.rating is None and not (self.comment and self.comment.strip()):
            raise ValueError("rating or comment must be provided")
        return self
