from botocore.exceptions import ClientError
import logging
from decimal import Decimal
from typing import Optional, List
from boto3.dynamodb.conditions import Key
from common.models.hotels import Hotel, Location
from common.models.users import UserRole
from common.utils.custom_exceptions import HotelAlreadyRegistered, NotFoundException
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

HOTELS_PARTITION = "HOTELS"


class HotelRepository:
    def __init__(self, table: Table, client: DynamoDBClient = None):
        self.table = table
        self.client = client if client else table.meta.client

    @staticmethod
    def _attributes(hotel: Hotel) -> dict:
        return {
            "hotel_id": hotel.hotel_id,
            "owner_id": hotel.owner_id,
            "name": hotel.name,
            "address": hotel.address,
            "contact": hotel.contact,
            "city": hotel.city,
            "city_lower": hotel.city.lower(),
            "destination": hotel.destination,
            "lat": Decimal(str(hotel.location.lat)),
            "lng": Decimal(str(hotel.location.lng)),
            "created_at": to_iso_string(hotel.created_at),
        }

    def _puts(self, hotel: Hotel, condition: str) -> list[dict]:
        attributes = self._attributes(hotel)
        return [
            {
                "Put": {
                    "TableName": self.table.name,
                    "Item": {"pk": f"HOTEL#{hotel.hotel_id}", "sk": "DETAILS", **attributes},
                    "ConditionExpression": condition,
                }
            },
            {
                "Put": {
                    "TableName": self.table.name,
                    "Item": {"pk": HOTELS_PARTITION, "sk": f"HOTEL#{hotel.hotel_id}", **attributes},
                }
            },
        ]

    def add_hotel(self, hotel: Hotel, promote_owner: bool = False):
        items = [
            {
                "Put": {
                    "TableName": self.table.name,
                    "Item": {
                        "pk": f"OWNER#{hotel.owner_id}",
                        "sk": "HOTEL",
                        "hotel_id": hotel.hotel_id,
                    },
                    "ConditionExpression": "attribute_not_exists(pk)",
                }
            },
            *self._puts(hotel, "attribute_not_exists(pk)"),
        ]
        if promote_owner:
            items.append(
                {
                    "Update": {
                        "TableName": self.table.name,
                        "Key": {"pk": f"USER#{hotel.owner_id}", "sk": "DETAILS"},
                        "UpdateExpression": "SET #role = :role",
                        "ExpressionAttributeNames": {"#role": "role"},
                        "ExpressionAttributeValues": {":role": UserRole.HOTEL_OWNER.value},
                    }
                }
            )
        try:
            self.client.transact_write_items(TransactItems=items)
        except ClientError as err:
            if is_condition_failure(err):
                raise HotelAlreadyRegistered("Hotel already registered for this owner")
            logger.error("Error creating hotel %s: %s", hotel.hotel_id, err)
            raise

    def update_hotel(self, hotel: Hotel):
        try:
            self.client.transact_write_items(
                TransactItems=self._puts(hotel, "attribute_exists(pk)")
            )
        except ClientError as err:
            if is_condition_failure(err):
                raise NotFoundException("hotel", hotel.hotel_id)
            logger.error("Error updating hotel %s: %s", hotel.hotel_id, err)
            raise

    def get_hotel_by_id(self, hotel_id: str) -> Optional[Hotel]:
        try:
            response = self.table.get_item(
                Key={"pk": f"HOTEL#{hotel_id}", "sk": "DETAILS"}
            )
        except ClientError as err:
            logger.error("Error retrieving hotel %s: %s", hotel_id, err)
            raise
        item = response.get("Item")
        if not item:
            return None
        return self._to_domain(item)

    def get_hotel_by_owner(self, owner_id: str) -> Optional[Hotel]:
        try:
            response = self.table.get_item(
                Key={"pk": f"OWNER#{owner_id}", "sk": "HOTEL"}
            )
        except ClientError as err:
            logger.error("Error retrieving hotel of owner %s: %s", owner_id, err)
            raise
        item = response.get("Item")
        if not item:
            return None
        return self.get_hotel_by_id(item["hotel_id"])

    def list_hotels(self) -> List[Hotel]:
        try:
            items = query_all(
                self.table,
                KeyConditionExpression=Key("pk").eq(HOTELS_PARTITION)
                & Key("sk").begins_with("HOTEL#"),
            )
        except ClientError as err:
            logger.error("Error listing hotels: %s", err)
            raise
        return [self._to_domain(item) for item in items]

    @staticmethod
    def _to_domain(item: dict) -> Hotel:
        return Hotel(
            hotel_id=item["hotel_id"],
            owner_id=item["owner_id"],
            name=item["name"],
            address=item["address"],
            contact=item.get("contact", ""),
            city=item["city"],
            destination=item.get("destination", ""),
            location=Location(
                lat=float(item.get("lat", 0)), lng=float(item.get("lng", 0))
            ),
            created_at=from_iso_string(item["created_at"]),
        )
