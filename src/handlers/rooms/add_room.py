import logging
import os
from boto3 import client, resource
from botocore.exceptions import ClientError
from pydantic import ValidationError

from common.repository.hotel_repo import HotelRepository
from common.repository.room_repo import RoomRepository
from common.schemas.rooms import AddRoomRequest
from common.services.image_service import ImageStorageService
from common.services.room_service import RoomService
from common.utils.constants import DEFAULT_REGION
from common.utils.custom_exceptions import HotelBookingError
from common.utils.custom_response import format_validation_errors, send_custom_response
from common.utils.request_context import get_requester

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


def add_room(event, context):
    try:
        requester = get_requester(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = AddRoomRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return send_custom_response(400, format_validation_errors(e.errors()))

    try:
        room = room_service.add_room(
            requester,
            room_type=request_body.room_type,
            price_per_night=request_body.price_per_night,
            amenities=request_body.amenities,
            images=request_body.images,
        )
        return send_custom_response(201, "Room added successfully", {"room": room.to_dict()})
    except HotelBookingError as err:
        return send_custom_response(err.status_code, str(err))
    except ClientError:
        logger.exception("AWS error while adding room")
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error while adding room")
        return send_custom_response(500, "Internal server error")
