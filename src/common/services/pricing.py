import math
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Union

from common.utils.custom_exceptions import InvalidDates

DateLike = Union[date, datetime]

ONE_DAY = timedelta(days=1)


def calculate_nights(check_in: DateLike, check_out: DateLike) -> int:
    """Number of billable nights, rounding any partial day up.

    Raises InvalidDates when the stay is shorter than one night.
    """
    nights = math.ceil((check_out - check_in) / ONE_DAY)
    if nights < 1:
        raise InvalidDates("checkout must be at least one night after checkin")
    return nights


def calculate_total_price(
    price_per_night: Union[Decimal, int, float, str], check_in: DateLike, check_out: DateLike
) -> Decimal:
    return Decimal(str(price_per_night)) * calculate_nights(check_in, check_out)
