import logging
import os
from boto3 import resource
from botocore.exceptions import ClientError
from pydantic import ValidationError

from common.repository.booking_repo import BookingRepository
from common.repository.hotel_repo import HotelRepository
from common.repository.review_repo import ReviewRepository
from common.repository.room_repo import RoomRepository
from common.schemas.reviews import UpdateReviewRequest
from common.services.review_service import ReviewService
from common.utils.constants import DEFAULT_REGION
from common.utils.custom_exceptions import HotelBookingError
from common.utils.custom_response import format_validation_errors, send_custom_response
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


def update_review(event, context):
    try:
        requester = get_requester(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    try:
        review_id = get_path_param(event, "review_id")
    except ValueError as err:
        return send_custom_response(400, str(err))

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = UpdateReviewRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return send_custom_response(400, format_validation_errors(e.errors()))

    try:
        review = review_service.update_review(
            requester, review_id, rating=request_body.rating, comment=request_body.comment
        )
        return send_custom_response(
            200, "Review updated successfully", {"review": review.to_dict()}
        )
    except HotelBookingError as err:
        return send_custom_response(err.status_code, str(err))
    except ClientError:
        logger.exception("DynamoDB error while updating review %s", review_id)
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error while updating review %s", review_id)
        return send_custom_response(500, "Internal server error")


def delete_review(event, context):
    try:
        requester = get_requester(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    try:
        review_id = get_path_param(event, "review_id")
    except ValueError as err:
        return send_custom_response(400, str(err))

    try:
        review_service.delete_review(requester, review_id)
        return send_custom_response(200, "Review deleted successfully")
    except HotelBookingError as err:
        return send_custom_response(err.status_code, str(err))
    except ClientError:
        logger.exception("DynamoDB error while deleting review %s", review_id)
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error while deleting review %s", review_id)
        return send_custom_response(500, "Internal server error")
