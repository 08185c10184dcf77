from common.models.users import Requester, UserRole


def get_requester(event: dict) -> Requester:
    """Build the caller identity from the API Gateway authorizer context.

    Raises KeyError when the request was not authenticated.
    """
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}
    user_id = authorizer["user_id"]
    if not user_id:
        raise KeyError("user_id")
    try:
        role = UserRole(str(authorizer.get("role", "")).upper())
    except ValueError:
        role = UserRole.GUEST
    return Requester(user_id=user_id, role=role)


def get_path_param(event: dict, name: str) -> str:
    value = (event.get("pathParameters") or {}).get(name)
    if not value:
        raise ValueError(f"{name} is required in the path")
    return value


def get_query_params(event: dict) -> dict:
    return event.get("queryStringParameters") or {}
