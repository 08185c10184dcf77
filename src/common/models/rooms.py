from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal


@dataclass
class Room:
    room_id: str
    hotel_id: str
    room_type: str
    price_per_night: Decimal
    amenities: list[str] = field(default_factory=list)
    images: list[str] = field(default_factory=list)
    is_available: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "id": self.room_id,
            "hotel": self.hotel_id,
            "roomType": self.room_type,
            "pricePerNight": float(self.price_per_night),
            "amenities": list(self.amenities),
            "images": list(self.images),
            "isAvailable": self.is_available,
            "createdAt": self.created_at.isoformat(),
        }
