from enum import Enum
from dataclasses import dataclass, field
from typing import Optional


class UserRole(Enum):
    ADMIN = "ADMIN"
    HOTEL_OWNER = "HOTEL_OWNER"
    GUEST = "GUEST"


@dataclass
class User:
    user_id: str
    username: str
    email: str
    role: UserRole = UserRole.GUEST
    password: Optional[str] = None
    recent_searched_cities: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "username": self.username,
            "email": self.email,
            "role": self.role.value,
            "recentSearchedCities": list(self.recent_searched_cities),
        }


@dataclass(frozen=True)
class Requester:
    """Verified identity of the caller, as supplied by the authorizer."""

    user_id: str
    role: UserRole = UserRole.GUEST

    def owns(self, owner_id: Optional[str]) -> bool:
        return owner_id is not None and owner_id == self.user_id
