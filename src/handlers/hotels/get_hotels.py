import logging
import os
from boto3 import resource
from botocore.exceptions import ClientError

from common.repository.booking_repo import BookingRepository
from common.repository.hotel_repo import HotelRepository
from common.repository.room_repo import RoomRepository
from common.services.hotel_service import HotelService
from common.utils.constants import DEFAULT_REGION
from common.utils.custom_exceptions import HotelBookingError
from common.utils.custom_response import send_custom_response
from common.utils.request_context import get_query_params, get_requester

logger = logging.getLogger(__name__)

TABLE_NAME = os.environ.get("TABLE_NAME")
REGION = os.environ.get("AWS_REGION", DEFAULT_REGION)

dynamodb = resource("dynamodb", region_name=REGION)
table = dynamodb.Table(TABLE_NAME)

hotel_service = HotelService(
    hotel_repo=HotelRepository(table),
    room_repo=RoomRepository(table),
    booking_repo=BookingRepository(table),
)


def list_hotels(event, context):
    city = get_query_params(event).get("city")
    try:
        hotels = hotel_service.list_hotels(city)
        return send_custom_response(
            200,
            "Hotels retrieved successfully",
            {"count": len(hotels), "hotels": [h.to_dict() for h in hotels]},
        )
    except ClientError:
        logger.exception("DynamoDB error while listing hotels")
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error while listing hotels")
        return send_custom_response(500, "Internal server error")


def get_hotel_profile(event, context):
    try:
        requester = get_requester(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    try:
        hotel = hotel_service.get_hotel_profile(requester)
        return send_custom_response(200, "Hotel retrieved successfully", {"hotel": hotel.to_dict()})
    except HotelBookingError as err:
        return send_custom_response(err.status_code, str(err))
    except ClientError:
        logger.exception("DynamoDB error while fetching hotel profile")
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error while fetching hotel profile")
        return send_custom_response(500, "Internal server error")


def get_hotel_dashboard(event, context):
    try:
        requester = get_requester(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    try:
        stats, bookings = hotel_service.get_dashboard(requester)
        data = stats.to_dict()
        data["bookings"] = [b.to_dict() for b in bookings]
        return send_custom_response(200, "Dashboard retrieved successfully", data)
    except HotelBookingError as err:
        return send_custom_response(err.status_code, str(err))
    except ClientError:
        logger.exception("DynamoDB error while building hotel dashboard")
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error while building hotel dashboard")
        return send_custom_response(500, "Internal server error")
