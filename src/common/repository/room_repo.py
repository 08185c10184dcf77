from botocore.exceptions import ClientError
import logging
from decimal import Decimal
from typing import Optional, List
from boto3.dynamodb.conditions import Key
from common.models.rooms import Room
from common.utils.custom_exceptions import NotFoundException
from common.utils.datetime_normaliser import from_iso_string, to_iso_string
from common.utils.dynamo import is_condition_failure, query_all

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types_boto3_dynamodb.service_resource import Table
    from types_boto3_dynamodb import DynamoDBClient
else:
    Table = object
    DynamoDBClient = object


logger = logging.getLogger(__name__)


class RoomRepository:
    def __init__(self, table: Table, client: DynamoDBClient = None):
        self.table = table
        self.client = client if client else table.meta.client

    @staticmethod
    def _attributes(room: Room) -> dict:
        return {
            "room_id": room.room_id,
            "hotel_id": room.hotel_id,
            "room_type": room.room_type,
            "price_per_night": Decimal(str(room.price_per_night)),
            "amenities": list(room.amenities),
            "images": list(room.images),
            "is_available": room.is_available,
            "created_at": to_iso_string(room.created_at),
        }

    def _puts(self, room: Room, condition: str) -> list[dict]:
        attributes = self._attributes(room)
        return [
            {
                "Put": {
                    "TableName": self.table.name,
                    "Item": {"pk": f"ROOM#{room.room_id}", "sk": "DETAILS", **attributes},
                    "ConditionExpression": condition,
                }
            },
            {
                "Put": {
                    "TableName": self.table.name,
                    "Item": {
                        "pk": f"HOTEL#{room.hotel_id}",
                        "sk": f"ROOM#{room.room_id}",
                        **attributes,
                    },
                }
            },
        ]

    def add_room(self, room: Room):
        try:
            self.client.transact_write_items(
                TransactItems=self._puts(room, "attribute_not_exists(pk)")
            )
        except ClientError as err:
            logger.error("Error creating room %s: %s", room.room_id, err)
            raise

    def save_room(self, room: Room):
        try:
            self.client.transact_write_items(
                TransactItems=self._puts(room, "attribute_exists(pk)")
            )
        except ClientError as err:
            if is_condition_failure(err):
                raise NotFoundException("room", room.room_id)
            logger.error("Error updating room %s: %s", room.room_id, err)
            raise

    def get_room_by_id(self, room_id: str) -> Optional[Room]:
        try:
            response = self.table.get_item(
                Key={"pk": f"ROOM#{room_id}", "sk": "DETAILS"}
            )
        except ClientError as err:
            logger.error("Error retrieving room by id %s: %s", room_id, err)
            raise

        item = response.get("Item")
        if not item:
            return None
        return self._to_domain(item)

    def get_rooms_by_hotel(self, hotel_id: str) -> List[Room]:
        try:
            items = query_all(
                self.table,
                KeyConditionExpression=Key("pk").eq(f"HOTEL#{hotel_id}")
                & Key("sk").begins_with("ROOM#"),
            )
        except ClientError as err:
            logger.error("Error retrieving rooms of hotel %s: %s", hotel_id, err)
            raise
        return [self._to_domain(item) for item in items]

    @staticmethod
    def _to_domain(item: dict) -> Room:
        return Room(
            room_id=item["room_id"],
            hotel_id=item["hotel_id"],
            room_type=item["room_type"],
            price_per_night=Decimal(str(item["price_per_night"])),
            amenities=list(item.get("amenities", [])),
            images=list(item.get("images", [])),
            is_available=bool(item.get("is_available", True)),
            created_at=from_iso_string(item["created_at"]),
        )
