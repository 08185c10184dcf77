import logging
from dataclasses import replace
from datetime import date
from typing import List, Optional
from uuid import uuid4

from common.models.bookings import Booking, BookingStatus
from common.models.reviews import Review, ReviewStats
from common.models.users import Requester
from common.repository.booking_repo import BookingRepository
from common.repository.hotel_repo import HotelRepository
from common.repository.review_repo import ReviewRepository
from common.repository.room_repo import RoomRepository
from common.utils.constants import FEATURED_MIN_RATING, FEATURED_REVIEWS_LIMIT
from common.utils.custom_exceptions import (
    InvalidInput,
    NotEligible,
    NotFoundException,
    Unauthorized,
)

logger = logging.getLogger(__name__)


def review_stats(reviews: List[Review]) -> ReviewStats:
    counts = {rating: 0 for rating in range(5, 0, -1)}
    for review in reviews:
        counts[review.rating] = counts.get(review.rating, 0) + 1
    total = len(reviews)
    average = sum(r.rating for r in reviews) / total if total else 0.0
    return ReviewStats(total_reviews=total, average_rating=round(average, 2), rating_counts=counts)


def newest_first(reviews: List[Review]) -> List[Review]:
    return sorted(reviews, key=lambda r: r.created_at, reverse=True)


class ReviewService:
    def __init__(
        self,
        review_repo: ReviewRepository,
        booking_repo: BookingRepository,
        room_repo: RoomRepository,
        hotel_repo: HotelRepository,
    ):
        self.review_repo = review_repo
        self.booking_repo = booking_repo
        self.room_repo = room_repo
        self.hotel_repo = hotel_repo

    def find_confirmed_stay(self, user_id: str, room_id: str) -> Optional[Booking]:
        """The most recent confirmed booking of user_id for room_id, if any."""
        stays = [
            b
            for b in self.booking_repo.get_user_bookings(user_id)
            if b.room_id == room_id and b.status == BookingStatus.CONFIRMED
        ]
        if not stays:
            return None
        return max(stays, key=lambda b: b.check_in)

    def create_review(
        self,
        requester: Requester,
        room_id: str,
        rating: int,
        comment: str,
        stay_date: Optional[date] = None,
    ) -> Review:
        self._validate(rating, comment)

        stay = self.find_confirmed_stay(requester.user_id, room_id)
        if stay is None:
            raise NotEligible("You can only review rooms you've stayed in")

        room = self.room_repo.get_room_by_id(room_id)
        if room is None:
            raise NotFoundException("room", room_id)

        review = Review(
            review_id=str(uuid4()),
            user_id=requester.user_id,
            room_id=room_id,
            hotel_id=room.hotel_id,
            rating=rating,
            comment=comment.strip(),
            stay_date=stay_date or stay.check_in,
        )
        self.review_repo.add_review(review)
        logger.info("Review %s created by %s for room %s", review.review_id, requester.user_id, room_id)
        return review

    def update_review(
        self,
        requester: Requester,
        review_id: str,
        rating: Optional[int] = None,
        comment: Optional[str] = None,
    ) -> Review:
        review = self._get_authored_review(requester, review_id, "update")
        updated = replace(
            review,
            rating=rating if rating is not None else review.rating,
            comment=comment.strip() if comment and comment.strip() else review.comment,
        )
        self._validate(updated.rating, updated.comment)
        self.review_repo.update_review(updated)
        return updated

    def delete_review(self, requester: Requester, review_id: str):
        review = self._get_authored_review(requester, review_id, "delete")
        self.review_repo.delete_review(review)
        logger.info("Review %s deleted by %s", review_id, requester.user_id)

    def get_room_reviews(self, room_id: str) -> tuple[List[Review], ReviewStats]:
        reviews = newest_first(self.review_repo.get_room_reviews(room_id))
        return reviews, review_stats(reviews)

    def get_user_reviews(self, requester: Requester) -> List[Review]:
        return newest_first(self.review_repo.get_user_reviews(requester.user_id))

    def get_hotel_reviews(self, requester: Requester) -> tuple[List[Review], ReviewStats]:
        hotel = self.hotel_repo.get_hotel_by_owner(requester.user_id)
        if hotel is None:
            raise NotFoundException("hotel for owner", requester.user_id)
        reviews = newest_first(self.review_repo.get_hotel_reviews(hotel.hotel_id))
        return reviews, review_stats(reviews)

    def get_featured_reviews(self) -> List[Review]:
        reviews = self.review_repo.get_reviews_with_min_rating(FEATURED_MIN_RATING)
        reviews.sort(key=lambda r: (r.rating, r.created_at), reverse=True)
        return reviews[:FEATURED_REVIEWS_LIMIT]

    def _get_authored_review(self, requester: Requester, review_id: str, action: str) -> Review:
        review = self.review_repo.get_review_by_id(review_id)
        if review is None:
            raise NotFoundException("review", review_id)
        if review.user_id != requester.user_id:
            raise Unauthorized(f"You can only {action} your own reviews")
        return review

    @staticmethod
    def _validate(rating: int, comment: str):
        if not 1 <= rating <= 5:
            raise InvalidInput("rating must be between 1 and 5")
        if not comment or not comment.strip():
            raise InvalidInput("comment must not be empty")
