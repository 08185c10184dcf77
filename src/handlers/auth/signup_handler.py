import logging
import os
from boto3 import resource
from botocore.exceptions import ClientError
from pydantic import ValidationError

from common.repository.user_repo import UserRepository
from common.schemas.users import SignupRequest
from common.services.user_service import UserService
from common.utils.constants import DEFAULT_REGION
from common.utils.custom_exceptions import HotelBookingError
from common.utils.custom_response import format_validation_errors, send_custom_response

logger = logging.getLogger(__name__)

TABLE_NAME = os.environ.get("TABLE_NAME")
REGION = os.environ.get("AWS_REGION", DEFAULT_REGION)

dynamodb = resource("dynamodb", region_name=REGION)
table = dynamodb.Table(TABLE_NAME)

service = UserService(user_repo=UserRepository(table=table))


def signup_handler(event, context):
    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = SignupRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return send_custom_response(400, format_validation_errors(e.errors()))

    try:
        token = service.signup(
            request_body.email, request_body.username, request_body.password
        )
        return send_custom_response(201, "signup successful", {"token": token})
    except HotelBookingError as err:
        return send_custom_response(err.status_code, str(err))
    except ClientError:
        logger.exception("DynamoDB error during signup")
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error during signup")
        return send_custom_response(500, "Internal server error")
