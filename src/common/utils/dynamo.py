from datetime import date, timedelta
from typing import Iterator

from botocore.exceptions import ClientError


def error_code(err: ClientError) -> str:
    return err.response.get("Error", {}).get("Code", "")


def is_condition_failure(err: ClientError) -> bool:
    """True when a conditional write, or a transaction guarded by one, was rejected."""
    code = error_code(err)
    if code == "ConditionalCheckFailedException":
        return True
    if code == "TransactionCanceledException":
        reasons = err.response.get("CancellationReasons") or []
        return any(r.get("Code") == "ConditionalCheckFailed" for r in reasons)
    return False


def query_all(table, **kwargs) -> list[dict]:
    response = table.query(**kwargs)
    items = list(response.get("Items", []))
    while "LastEvaluatedKey" in response:
        response = table.query(ExclusiveStartKey=response["LastEvaluatedKey"], **kwargs)
        items.extend(response.get("Items", []))
    return items


def scan_all(table, **kwargs) -> list[dict]:
    response = table.scan(**kwargs)
    items = list(response.get("Items", []))
    while "LastEvaluatedKey" in response:
        response = table.scan(ExclusiveStartKey=response["LastEvaluatedKey"], **kwargs)
        items.extend(response.get("Items", []))
    return items


def calendar_days(start: date, end: date) -> Iterator[date]:
    """Every calendar day from start to end, both inclusive."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)
