import logging
import os
from decimal import Decimal, InvalidOperation
from typing import Optional
from boto3 import resource
from botocore.exceptions import ClientError

from common.repository.hotel_repo import HotelRepository
from common.repository.room_repo import RoomRepository
from common.services.room_service import RoomService
from common.utils.constants import DEFAULT_REGION
from common.utils.custom_exceptions import HotelBookingError
from common.utils.custom_response import send_custom_response
from common.utils.request_context import get_path_param, get_query_params, get_requester

logger = logging.getLogger(__name__)

TABLE_NAME = os.environ.get("TABLE_NAME")
REGION = os.environ.get("AWS_REGION", DEFAULT_REGION)

dynamodb = resource("dynamodb", region_name=REGION)
table = dynamodb.Table(TABLE_NAME)

room_service = RoomService(
    room_repo=RoomRepository(table),
    hotel_repo=HotelRepository(table),
)


def _parse_price(params: dict, name: str) -> Optional[Decimal]:
    raw = params.get(name)
    if raw in (None, ""):
        return None
    try:
        value = Decimal(raw)
    except InvalidOperation:
        raise ValueError(f"{name} must be a number")
    if not value.is_finite() or value < 0:
        raise ValueError(f"{name} must be a non-negative number")
    return value


def get_rooms(event, context):
    params = get_query_params(event)
    try:
        min_price = _parse_price(params, "minPrice")
        max_price = _parse_price(params, "maxPrice")
    except ValueError as err:
        return send_custom_response(400, str(err))

    try:
        rooms = room_service.get_rooms(
            city=params.get("city"), min_price=min_price, max_price=max_price
        )
        return send_custom_response(
            200,
            "successfully retrieved",
            {"count": len(rooms), "rooms": [r.to_dict() for r in rooms]},
        )
    except ClientError:
        logger.exception("DynamoDB error while listing rooms")
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error while listing rooms")
        return send_custom_response(500, "Internal server error")


def get_room(event, context):
    try:
        room_id = get_path_param(event, "room_id")
    except ValueError as err:
        return send_custom_response(400, str(err))

    try:
        room = room_service.get_room(room_id)
        return send_custom_response(200, "successfully retrieved", {"room": room.to_dict()})
    except HotelBookingError as err:
        return send_custom_response(err.status_code, str(err))
    except ClientError:
        logger.exception("DynamoDB error while fetching room %s", room_id)
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error while fetching room %s", room_id)
        return send_custom_response(500, "Internal server error")


def get_owner_rooms(event, context):
    try:
        requester = get_requester(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    try:
        rooms = room_service.get_owner_rooms(requester)
        return send_custom_response(
            200,
            "successfully retrieved",
            {"count": len(rooms), "rooms": [r.to_dict() for r in rooms]},
        )
    except HotelBookingError as err:
        return send_custom_response(err.status_code, str(err))
    except ClientError:
        logger.exception("DynamoDB error while fetching owner rooms")
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error while fetching owner rooms")
        return send_custom_response(500, "Internal server error")
