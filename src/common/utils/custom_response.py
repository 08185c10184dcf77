from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class APIResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    success: bool
    message: Optional[str] = None


def send_custom_response(
    status_code: int, message: Optional[str] = None, data: Optional[dict[str, Any]] = None
):
    body = APIResponse(success=status_code < 400, message=message, **(data or {}))
    return {
        "statusCode": status_code,
        "headers": {
            "Content-Type": "application/json",
        },
        "body": body.model_dump_json(exclude_none=True),
    }


def format_validation_errors(errors: list) -> str:
    return "; ".join(
        f"{'.'.join(map(str, err['loc']))}: {err['msg']}" if err.get("loc") else err["msg"]
        for err in errors
    )
