import logging
import os
from boto3 import resource
from botocore.exceptions import ClientError
from pydantic import ValidationError

from common.repository.booking_repo import BookingRepository
from common.repository.hotel_repo import HotelRepository
from common.repository.room_repo import RoomRepository
from common.schemas.bookings import AvailabilityRequest
from common.services.booking_service import BookingService
from common.utils.constants import DEFAULT_REGION
from common.utils.custom_exceptions import HotelBookingError
from common.utils.custom_response import format_validation_errors, send_custom_response

logger = logging.getLogger(__name__)

TABLE_NAME = os.environ.get("TABLE_NAME")
REGION = os.environ.get("AWS_REGION", DEFAULT_REGION)

dynamodb = resource("dynamodb", region_name=REGION)
table = dynamodb.Table(TABLE_NAME)

booking_service = BookingService(
    booking_repo=BookingRepository(table),
    room_repo=RoomRepository(table),
    hotel_repo=HotelRepository(table),
)


def check_availability(event, context):
    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = AvailabilityRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return send_custom_response(400, format_validation_errors(e.errors()))

    try:
        is_available = booking_service.check_availability(
            request_body.room, request_body.check_in, request_body.check_out
        )
        return send_custom_response(
            200, "Availability checked", {"isAvailable": is_available}
        )
    except HotelBookingError as err:
        return send_custom_response(err.status_code, str(err))
    except ClientError:
        logger.exception("DynamoDB error while checking availability")
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error while checking availability")
        return send_custom_response(500, "Internal server error")
