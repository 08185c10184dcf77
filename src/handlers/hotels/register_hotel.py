import logging
import os
from boto3 import resource
from botocore.exceptions import ClientError
from pydantic import ValidationError

from common.models.hotels import Location
from common.repository.hotel_repo import HotelRepository
from common.schemas.hotels import RegisterHotelRequest
from common.services.hotel_service import HotelService
from common.utils.constants import DEFAULT_REGION
from common.utils.custom_exceptions import HotelBookingError
from common.utils.custom_response import format_validation_errors, send_custom_response
from common.utils.request_context import get_requester

logger = logging.getLogger(__name__)

TABLE_NAME = os.environ.get("TABLE_NAME")
REGION = os.environ.get("AWS_REGION", DEFAULT_REGION)

dynamodb = resource("dynamodb", region_name=REGION)
table = dynamodb.Table(TABLE_NAME)

hotel_service = HotelService(hotel_repo=HotelRepository(table))


def register_hotel(event, context):
    try:
        requester = get_requester(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = RegisterHotelRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return send_custom_response(400, format_validation_errors(e.errors()))

    location = None
    if request_body.location is not None:
        location = Location(lat=request_body.location.lat, lng=request_body.location.lng)

    try:
        hotel = hotel_service.register_hotel(
            requester,
            name=request_body.name,
            address=request_body.address,
            contact=request_body.contact,
            city=request_body.city,
            destination=request_body.destination,
            location=location,
        )
        return send_custom_response(
            201, "Hotel registered successfully", {"hotel": hotel.to_dict()}
        )
    except HotelBookingError as err:
        return send_custom_response(err.status_code, str(err))
    except ClientError:
        logger.exception("DynamoDB error while registering hotel")
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error while registering hotel")
        return send_custom_response(500, "Internal server error")
