import logging
import os
from boto3 import resource
from botocore.exceptions import ClientError

from common.repository.booking_repo import BookingRepository
from common.repository.hotel_repo import HotelRepository
from common.repository.review_repo import ReviewRepository
from common.repository.room_repo import RoomRepository
from common.services.review_service import ReviewService
from common.utils.constants import DEFAULT_REGION
from common.utils.custom_exceptions import HotelBookingError
from common.utils.custom_response import send_custom_response
from common.utils.request_context import get_path_param, get_requester

logger = logging.getLogger(__name__)

TABLE_NAME = os.environ.get("TABLE_NAME")
REGION = os.environ.get("AWS_REGION", DEFAULT_REGION)

dynamodb = resource("dynamodb", region_name=REGION)
table = dynamodb.Table(TABLE_NAME)

review_service = ReviewService(
    review_repo=ReviewRepository(table),
    booking_repo=BookingRepository(table),
    room_repo=RoomRepository(table),
    hotel_repo=HotelRepository(table),
)


def get_room_reviews(event, context):
    try:
        room_id = get_path_param(event, "room_id")
    except ValueError as err:
        return send_custom_response(400, str(err))

    try:
        reviews, stats = review_service.get_room_reviews(room_id)
        return send_custom_response(
            200,
            "Reviews retrieved successfully",
            {"reviews": [r.to_dict() for r in reviews], "stats": stats.to_dict()},
        )
    except HotelBookingError as err:
        return send_custom_response(err.status_code, str(err))
    except ClientError:
        logger.exception("DynamoDB error while fetching reviews of room %s", room_id)
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error while fetching reviews of room %s", room_id)
        return send_custom_response(500, "Internal server error")


def get_featured_reviews(event, context):
    try:
        reviews = review_service.get_featured_reviews()
        return send_custom_response(
            200,
            "Featured reviews retrieved successfully",
            {"reviews": [r.to_dict() for r in reviews]},
        )
    except ClientError:
        logger.exception("DynamoDB error while fetching featured reviews")
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error while fetching featured reviews")
        return send_custom_response(500, "Internal server error")


def get_user_reviews(event, context):
    try:
        requester = get_requester(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    try:
        reviews = review_service.get_user_reviews(requester)
        return send_custom_response(
            200,
            "Reviews retrieved successfully",
            {"reviews": [r.to_dict() for r in reviews]},
        )
    except ClientError:
        logger.exception("DynamoDB error while fetching user reviews")
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error while fetching user reviews")
        return send_custom_response(500, "Internal server error")


def get_hotel_reviews(event, context):
    try:
        requester = get_requester(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    try:
        reviews, stats = review_service.get_hotel_reviews(requester)
        return send_custom_response(
            200,
            "Reviews retrieved successfully",
            {"reviews": [r.to_dict() for r in reviews], "stats": stats.to_dict(include_counts=False)},
        )
    except HotelBookingError as err:
        return send_custom_response(err.status_code, str(err))
    except ClientError:
        logger.exception("DynamoDB error while fetching hotel reviews")
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error while fetching hotel reviews")
        return send_custom_response(500, "Internal server error")
