import logging
import os
from boto3 import client, resource
from botocore.exceptions import ClientError
from pydantic import ValidationError

from common.repository.hotel_repo import HotelRepository
from common.repository.room_repo import RoomRepository
from common.schemas.rooms import ToggleAvailabilityRequest, UpdateRoomRequest
from common.services.image_service import ImageStorageService
from common.services.room_service import RoomService
from common.utils.constants import DEFAULT_REGION
from common.utils.custom_exceptions import HotelBookingError
from common.utils.custom_response import format_validation_errors, send_custom_response
from common.utils.request_context import get_path_param, get_requester

logger = logging.getLogger(__name__)

TABLE_NAME = os.environ.get("TABLE_NAME")
IMAGE_BUCKET = os.environ.get("IMAGE_BUCKET")
REGION = os.environ.get("AWS_REGION", DEFAULT_REGION)

dynamodb = resource("dynamodb", region_name=REGION)
table = dynamodb.Table(TABLE_NAME)

image_service = None
if IMAGE_BUCKET:
    image_service = ImageStorageService(
        client("s3", region_name=REGION), bucket=IMAGE_BUCKET, region=REGION
    )

room_service = RoomService(
    room_repo=RoomRepository(table),
    hotel_repo=HotelRepository(table),
    image_service=image_service,
)


def update_room(event, context):
    try:
        requester = get_requester(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    try:
        room_id = get_path_param(event, "room_id")
    except ValueError as err:
        return send_custom_response(400, str(err))

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = UpdateRoomRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return send_custom_response(400, format_validation_errors(e.errors()))

    try:
        room = room_service.update_room(
            requester,
            room_id,
            room_type=request_body.room_type,
            price_per_night=request_body.price_per_night,
            amenities=request_body.amenities,
            images=request_body.images,
        )
        return send_custom_response(200, "Room updated successfully", {"room": room.to_dict()})
    except HotelBookingError as err:
        return send_custom_response(err.status_code, str(err))
    except ClientError:
        logger.exception("AWS error while updating room %s", room_id)
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error while updating room %s", room_id)
        return send_custom_response(500, "Internal server error")


def toggle_room_availability(event, context):
    try:
        requester = get_requester(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = ToggleAvailabilityRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return send_custom_response(400, format_validation_errors(e.errors()))

    try:
        room = room_service.toggle_availability(requester, request_body.room_id)
        return send_custom_response(
            200, "Room availability updated", {"isAvailable": room.is_available}
        )
    except HotelBookingError as err:
        return send_custom_response(err.status_code, str(err))
    except ClientError:
        logger.exception("DynamoDB error while toggling room %s", request_body.room_id)
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error while toggling room %s", request_body.room_id)
        return send_custom_response(500, "Internal server error")
