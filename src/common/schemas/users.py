import re

from pydantic import BaseModel, EmailStr, Field, field_validator

PASSWORD_REGEX = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[^A-Za-z0-9]).{12,}$")


class SignupRequest(BaseModel):
    email: EmailStr
    username: str = Field(min_length=3, max_length=30)
    password: str

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str):
        if not PASSWORD_REGEX.fullmatch(v):
            raise ValueError(
                "Password must be at least 12 characters long and contain "
                "uppercase, lowercase, digit, and special character"
            )
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RecentSearchRequest(BaseModel):
    city: str = Field(min_length=1, max_length=80)

    @field_validator("city")
    @classmethod
    def strip_city(cls, v: str):
        v = v.strip()
        if not v:
            raise ValueError("city must not be blank")
        return v
