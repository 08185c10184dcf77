from dataclasses import dataclass, field
from datetime import date, datetime, timezone


@dataclass
class Review:
    review_id: str
    user_id: str
    room_id: str
    hotel_id: str
    rating: int
    comment: str
    stay_date: date
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "id": self.review_id,
            "user": self.user_id,
            "room": self.room_id,
            "hotel": self.hotel_id,
            "rating": self.rating,
            "comment": self.comment,
            "stayDate": self.stay_date.isoformat(),
            "createdAt": self.created_at.isoformat(),
        }


@dataclass
class ReviewStats:
    total_reviews: int
    average_rating: float
    rating_counts: dict[int, int]

    def to_dict(self, include_counts: bool = True) -> dict:
        data = {
            "totalReviews": self.total_reviews,
            "averageRating": self.average_rating,
        }
        if include_counts:
            data["ratingCounts"] = {str(k): v for k, v in self.rating_counts.items()}
        return data
