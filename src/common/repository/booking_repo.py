from botocore.exceptions import ClientError
import logging
from typing import Optional, List
from boto3.dynamodb.conditions import Key
from common.models.bookings import Booking, BookingStatus
from common.utils.constants import DEFAULT_PAYMENT_METHOD
from common.utils.custom_exceptions import (
    InvalidStatusTransition,
    NotFoundException,
    PaymentInProgress,
    RoomUnavailable,
)
from common.utils.datetime_normaliser import from_iso_date, from_iso_string, to_iso_string
from common.utils.dynamo import calendar_days, is_condition_failure, query_all
from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types_boto3_dynamodb.service_resource import Table
    from types_boto3_dynamodb import DynamoDBClient
else:
    Table = object
    DynamoDBClient = object


logger = logging.getLogger(__name__)


class BookingRepository:
    """Bookings live as a DETAILS item plus copies under the user, hotel and room
    partitions. Every non-cancelled booking also holds one NIGHT# lock per
    calendar day of its inclusive [check_in, check_out] range."""

    def __init__(self, table: Table, client: DynamoDBClient = None):
        self.table = table
        self.client = client if client else table.meta.client

    @staticmethod
    def _booking_keys(booking: Booking) -> list[dict]:
        return [
            {"pk": f"BOOKING#{booking.booking_id}", "sk": "DETAILS"},
            {"pk": f"USER#{booking.user_id}", "sk": f"BOOKING#{booking.booking_id}"},
            {"pk": f"HOTEL#{booking.hotel_id}", "sk": f"BOOKING#{booking.booking_id}"},
            {"pk": f"ROOM#{booking.room_id}", "sk": f"BOOKING#{booking.booking_id}"},
        ]

    @staticmethod
    def _night_keys(booking: Booking) -> list[dict]:
        return [
            {"pk": f"ROOM#{booking.room_id}", "sk": f"NIGHT#{day.isoformat()}"}
            for day in calendar_days(booking.check_in, booking.check_out)
        ]

    @staticmethod
    def _attributes(booking: Booking) -> dict:
        attributes = {
            "booking_id": booking.booking_id,
            "user_id": booking.user_id,
            "room_id": booking.room_id,
            "hotel_id": booking.hotel_id,
            "check_in": booking.check_in.isoformat(),
            "check_out": booking.check_out.isoformat(),
            "guests": booking.guests,
            "total_price": Decimal(str(booking.total_price)),
            "booking_status": booking.status.value,
            "is_paid": booking.is_paid,
            "payment_method": booking.payment_method,
            "created_at": to_iso_string(booking.created_at),
        }
        if booking.payment_id:
            attributes["payment_id"] = booking.payment_id
        return attributes

    def add_booking(self, booking: Booking):
        attributes = self._attributes(booking)
        items = []
        for index, key in enumerate(self._booking_keys(booking)):
            put = {"TableName": self.table.name, "Item": {**key, **attributes}}
            if index == 0:
                put["ConditionExpression"] = "attribute_not_exists(pk)"
            items.append({"Put": put})

        for key in self._night_keys(booking):
            items.append(
                {
                    "Put": {
                        "TableName": self.table.name,
                        "Item": {**key, "booking_id": booking.booking_id},
                        "ConditionExpression": "attribute_not_exists(pk)",
                    }
                }
            )

        try:
            self.client.transact_write_items(TransactItems=items)
        except ClientError as err:
            if is_condition_failure(err):
                raise RoomUnavailable("Room is not available for the selected dates")
            logger.error("Error creating booking %s: %s", booking.booking_id, err)
            raise

    def _query_bookings(self, partition: str) -> List[Booking]:
        try:
            items = query_all(
                self.table,
                KeyConditionExpression=Key("pk").eq(partition)
                & Key("sk").begins_with("BOOKING#"),
            )
        except ClientError as err:
            logger.error("Error retrieving bookings of %s: %s", partition, err)
            raise
        return [self._to_domain(item) for item in items]

    def get_user_bookings(self, user_id: str) -> List[Booking]:
        return self._query_bookings(f"USER#{user_id}")

    def get_hotel_bookings(self, hotel_id: str) -> List[Booking]:
        return self._query_bookings(f"HOTEL#{hotel_id}")

    def get_room_bookings(self, room_id: str) -> List[Booking]:
        return self._query_bookings(f"ROOM#{room_id}")

    def get_booking_by_id(self, booking_id: str) -> Optional[Booking]:
        try:
            response = self.table.get_item(
                Key={"pk": f"BOOKING#{booking_id}", "sk": "DETAILS"}
            )
        except ClientError as err:
            logger.error("Error retrieving booking %s: %s", booking_id, err)
            raise

        item = response.get("Item")
        if not item:
            return None
        return self._to_domain(item)

    def update_booking(
        self,
        booking: Booking,
        expected_status: BookingStatus,
        release_nights: bool = False,
    ):
        """Write status and payment fields to every copy of the booking.

        The DETAILS update only applies while the stored status still equals
        expected_status. When release_nights is set, the booking's night locks
        are deleted in the same transaction.
        """
        names = {
            "#status": "booking_status",
            "#paid": "is_paid",
            "#method": "payment_method",
        }
        values = {
            ":status": booking.status.value,
            ":paid": booking.is_paid,
            ":method": booking.payment_method,
        }
        expression = "SET #status = :status, #paid = :paid, #method = :method"
        if booking.payment_id:
            names["#payment"] = "payment_id"
            values[":payment"] = booking.payment_id
            expression += ", #payment = :payment"

        items = []
        for index, key in enumerate(self._booking_keys(booking)):
            update = {
                "TableName": self.table.name,
                "Key": key,
                "UpdateExpression": expression,
                "ExpressionAttributeNames": dict(names),
                "ExpressionAttributeValues": dict(values),
            }
            if index == 0:
                update["ConditionExpression"] = "attribute_exists(pk) AND #status = :expected"
                update["ExpressionAttributeValues"][":expected"] = expected_status.value
            items.append({"Update": update})

        if release_nights:
            for key in self._night_keys(booking):
                items.append({"Delete": {"TableName": self.table.name, "Key": key}})

        try:
            self.client.transact_write_items(TransactItems=items)
        except ClientError as err:
            if is_condition_failure(err):
                raise InvalidStatusTransition(
                    f"Booking {booking.booking_id} was modified concurrently"
                )
            logger.error("Error updating booking %s: %s", booking.booking_id, err)
            raise

    def acquire_payment_lease(self, booking_id: str, now: int, expires_at: int):
        """Mark a payment attempt as in flight.

        Fails with PaymentInProgress while another unexpired lease exists or
        once the booking is paid.
        """
        try:
            self.table.update_item(
                Key={"pk": f"BOOKING#{booking_id}", "sk": "DETAILS"},
                UpdateExpression="SET #lease = :expires",
                ConditionExpression=(
                    "attribute_exists(pk) AND #paid = :false "
                    "AND (attribute_not_exists(#lease) OR #lease < :now)"
                ),
                ExpressionAttributeNames={"#lease": "payment_lease", "#paid": "is_paid"},
                ExpressionAttributeValues={
                    ":expires": expires_at,
                    ":now": now,
                    ":false": False,
                },
            )
        except ClientError as err:
            if is_condition_failure(err):
                raise PaymentInProgress(
                    f"A payment for booking {booking_id} is already being processed"
                )
            logger.error("Error acquiring payment lease on %s: %s", booking_id, err)
            raise

    def release_payment_lease(self, booking_id: str):
        try:
            self.table.update_item(
                Key={"pk": f"BOOKING#{booking_id}", "sk": "DETAILS"},
                UpdateExpression="REMOVE #lease",
                ConditionExpression="attribute_exists(pk)",
                ExpressionAttributeNames={"#lease": "payment_lease"},
            )
        except ClientError as err:
            if is_condition_failure(err):
                raise NotFoundException("booking", booking_id)
            logger.error("Error releasing payment lease on %s: %s", booking_id, err)
            raise

    def mark_paid(self, booking: Booking):
        """Record a successful payment and release the lease in one transaction.

        Applies only while the booking is unpaid and not cancelled.
        """
        names = {
            "#status": "booking_status",
            "#paid": "is_paid",
            "#method": "payment_method",
            "#payment": "payment_id",
        }
        values = {
            ":status": BookingStatus.CONFIRMED.value,
            ":paid": True,
            ":method": booking.payment_method,
            ":payment": booking.payment_id,
        }
        expression = (
            "SET #status = :status, #paid = :paid, #method = :method, #payment = :payment"
        )

        items = []
        for index, key in enumerate(self._booking_keys(booking)):
            update = {
                "TableName": self.table.name,
                "Key": key,
                "UpdateExpression": expression,
                "ExpressionAttributeNames": dict(names),
                "ExpressionAttributeValues": dict(values),
            }
            if index == 0:
                update["UpdateExpression"] = expression + " REMOVE #lease"
                update["ExpressionAttributeNames"]["#lease"] = "payment_lease"
                update["ConditionExpression"] = (
                    "attribute_exists(pk) AND #paid = :false AND #status <> :cancelled"
                )
                update["ExpressionAttributeValues"][":false"] = False
                update["ExpressionAttributeValues"][":cancelled"] = (
                    BookingStatus.CANCELLED.value
                )
            items.append({"Update": update})

        try:
            self.client.transact_write_items(TransactItems=items)
        except ClientError as err:
            if is_condition_failure(err):
                raise InvalidStatusTransition(
                    f"Booking {booking.booking_id} changed while the payment was processed"
                )
            logger.error("Error recording payment of %s: %s", booking.booking_id, err)
            raise

    @staticmethod
    def _to_domain(item: dict) -> Booking:
        return Booking(
            booking_id=item["booking_id"],
            user_id=item["user_id"],
            room_id=item["room_id"],
            hotel_id=item["hotel_id"],
            check_in=from_iso_date(item["check_in"]),
            check_out=from_iso_date(item["check_out"]),
            guests=int(item.get("guests", 1)),
            total_price=Decimal(str(item["total_price"])),
            status=BookingStatus(item["booking_status"]),
            is_paid=bool(item.get("is_paid", False)),
            payment_method=item.get("payment_method", DEFAULT_PAYMENT_METHOD),
            payment_id=item.get("payment_id"),
            created_at=from_iso_string(item["created_at"]),
        )
