import logging
import os
from boto3 import resource
from botocore.exceptions import ClientError
from pydantic import ValidationError

from common.repository.user_repo import UserRepository
from common.schemas.users import RecentSearchRequest
from common.services.user_service import UserService
from common.utils.constants import DEFAULT_REGION
from common.utils.custom_exceptions import HotelBookingError
from common.utils.custom_response import format_validation_errors, send_custom_response
from common.utils.request_context import get_requester

logger = logging.getLogger(__name__)

TABLE_NAME = os.environ.get("TABLE_NAME")
REGION = os.environ.get("AWS_REGION", DEFAULT_REGION)

dynamodb = resource("dynamodb", region_name=REGION)
table = dynamodb.Table(TABLE_NAME)

user_service = UserService(user_repo=UserRepository(table))


def get_user_profile(event, context):
    try:
        requester = get_requester(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    try:
        user = user_service.get_profile(requester)
        return send_custom_response(200, "User retrieved successfully", user.to_dict())
    except HotelBookingError as err:
        return send_custom_response(err.status_code, str(err))
    except ClientError:
        logger.exception("DynamoDB error while fetching user profile")
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error while fetching user profile")
        return send_custom_response(500, "Internal server error")


def add_recent_search(event, context):
    try:
        requester = get_requester(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = RecentSearchRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return send_custom_response(400, format_validation_errors(e.errors()))

    try:
        cities = user_service.add_recent_search(requester, request_body.city)
        return send_custom_response(
            200, "Recent search recorded", {"recentSearchedCities": cities}
        )
    except HotelBookingError as err:
        return send_custom_response(err.status_code, str(err))
    except ClientError:
        logger.exception("DynamoDB error while recording recent search")
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error while recording recent search")
        return send_custom_response(500, "Internal server error")
