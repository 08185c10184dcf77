from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class Location:
    lat: float = 0.0
    lng: float = 0.0


@dataclass
class Hotel:
    hotel_id: str
    owner_id: str
    name: str
    address: str
    contact: str
    city: str
    destination: str = ""
    location: Location = field(default_factory=Location)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "id": self.hotel_id,
            "owner": self.owner_id,
            "name": self.name,
            "address": self.address,
            "contact": self.contact,
            "city": self.city,
            "destination": self.destination,
            "location": {"lat": self.location.lat, "lng": self.location.lng},
            "createdAt": self.created_at.isoformat(),
        }
