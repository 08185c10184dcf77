import logging
import os
from boto3 import resource
from botocore.exceptions import ClientError
from pydantic import ValidationError

from common.repository.booking_repo import BookingRepository
from common.repository.hotel_repo import HotelRepository
from common.repository.room_repo import RoomRepository
from common.schemas.bookings import UpdateStatusRequest
from common.services.booking_service import BookingService
from common.services.payment_gateway import SimulatedPaymentGateway, TimeoutPaymentGateway
from common.utils.constants import DEFAULT_PAYMENT_TIMEOUT_SECONDS, DEFAULT_REGION
from common.utils.custom_exceptions import HotelBookingError
from common.utils.custom_response import format_validation_errors, send_custom_response
from common.utils.request_context import get_requester

logger = logging.getLogger(__name__)

TABLE_NAME = os.environ.get("TABLE_NAME")
REGION = os.environ.get("AWS_REGION", DEFAULT_REGION)
PAYMENT_TIMEOUT = float(
    os.environ.get("PAYMENT_TIMEOUT_SECONDS", DEFAULT_PAYMENT_TIMEOUT_SECONDS)
)

dynamodb = resource("dynamodb", region_name=REGION)
table = dynamodb.Table(TABLE_NAME)

booking_service = BookingService(
    booking_repo=BookingRepository(table),
    room_repo=RoomRepository(table),
    hotel_repo=HotelRepository(table),
    payment_gateway=TimeoutPaymentGateway(SimulatedPaymentGateway(), PAYMENT_TIMEOUT),
    payment_timeout=PAYMENT_TIMEOUT,
)


def update_booking_status(event, context):
    try:
        requester = get_requester(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = UpdateStatusRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return send_custom_response(400, format_validation_errors(e.errors()))

    try:
        booking = booking_service.update_status(
            requester,
            request_body.booking_id,
            status=request_body.status,
            is_paid=request_body.is_paid,
        )
        return send_custom_response(
            200, "Booking updated successfully", {"booking": booking.to_dict()}
        )
    except HotelBookingError as err:
        return send_custom_response(err.status_code, str(err))
    except ClientError:
        logger.exception("DynamoDB error while updating booking status")
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error while updating booking status")
        return send_custom_response(500, "Internal server error")
