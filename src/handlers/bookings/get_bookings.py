import logging
import os
from boto3 import resource
from botocore.exceptions import ClientError

from common.repository.booking_repo import BookingRepository
from common.repository.hotel_repo import HotelRepository
from common.repository.room_repo import RoomRepository
from common.services.booking_service import BookingService
from common.utils.constants import DEFAULT_REGION
from common.utils.custom_exceptions import HotelBookingError
from common.utils.custom_response import send_custom_response
from common.utils.request_context import get_requester

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


def get_user_bookings(event, context):
    try:
        requester = get_requester(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    try:
        bookings = booking_service.get_user_bookings(requester)
        return send_custom_response(
            200,
            "Bookings retrieved successfully",
            {"count": len(bookings), "bookings": [b.to_dict() for b in bookings]},
        )
    except HotelBookingError as err:
        return send_custom_response(err.status_code, str(err))
    except ClientError:
        logger.exception("DynamoDB error while fetching user bookings")
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error while fetching user bookings")
        return send_custom_response(500, "Internal server error")


def get_hotel_bookings(event, context):
    try:
        requester = get_requester(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    try:
        bookings, stats = booking_service.get_hotel_bookings(requester)
        return send_custom_response(
            200,
            "Bookings retrieved successfully",
            {
                "bookings": [b.to_dict() for b in bookings],
                "dashboardData": stats.to_dict(),
            },
        )
    except HotelBookingError as err:
        return send_custom_response(err.status_code, str(err), {"bookings": []})
    except ClientError:
        logger.exception("DynamoDB error while fetching hotel bookings")
        return send_custom_response(500, "Internal server error", {"bookings": []})
    except Exception:
        logger.exception("Unhandled error while fetching hotel bookings")
        return send_custom_response(500, "Internal server error", {"bookings": []})
