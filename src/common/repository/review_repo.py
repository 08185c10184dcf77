from botocore.exceptions import ClientError
import logging
from typing import Optional, List
from boto3.dynamodb.conditions import Attr, Key
from common.models.reviews import Review
from common.utils.custom_exceptions import DuplicateReview, NotFoundException
from common.utils.datetime_normaliser import from_iso_date, from_iso_string, to_iso_string
from common.utils.dynamo import is_condition_failure, query_all, scan_all

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types_boto3_dynamodb.service_resource import Table
    from types_boto3_dynamodb import DynamoDBClient
else:
    Table = object
    DynamoDBClient = object


logger = logging.getLogger(__name__)


class ReviewRepository:
    def __init__(self, table: Table, client: DynamoDBClient = None):
        self.table = table
        self.client = client if client else table.meta.client

    @staticmethod
    def _review_keys(review: Review) -> list[dict]:
        return [
            {"pk": f"REVIEW#{review.review_id}", "sk": "DETAILS"},
            {"pk": f"USER#{review.user_id}", "sk": f"REVIEW#{review.review_id}"},
            {"pk": f"ROOM#{review.room_id}", "sk": f"REVIEW#{review.review_id}"},
            {"pk": f"HOTEL#{review.hotel_id}", "sk": f"REVIEW#{review.review_id}"},
        ]

    @staticmethod
    def _marker_key(user_id: str, room_id: str) -> dict:
        return {"pk": f"USER#{user_id}", "sk": f"REVIEWED#{room_id}"}

    @staticmethod
    def _attributes(review: Review) -> dict:
        return {
            "review_id": review.review_id,
            "user_id": review.user_id,
            "room_id": review.room_id,
            "hotel_id": review.hotel_id,
            "rating": review.rating,
            "comment": review.comment,
            "stay_date": review.stay_date.isoformat(),
            "created_at": to_iso_string(review.created_at),
        }

    def add_review(self, review: Review):
        attributes = self._attributes(review)
        items = [
            {
                "Put": {
                    "TableName": self.table.name,
                    "Item": {
                        **self._marker_key(review.user_id, review.room_id),
                        "review_id": review.review_id,
                    },
                    "ConditionExpression": "attribute_not_exists(pk)",
                }
            }
        ]
        for key in self._review_keys(review):
            items.append(
                {"Put": {"TableName": self.table.name, "Item": {**key, **attributes}}}
            )
        try:
            self.client.transact_write_items(TransactItems=items)
        except ClientError as err:
            if is_condition_failure(err):
                raise DuplicateReview("You have already reviewed this room")
            logger.error("Error creating review %s: %s", review.review_id, err)
            raise

    def update_review(self, review: Review):
        attributes = self._attributes(review)
        items = []
        for index, key in enumerate(self._review_keys(review)):
            put = {"TableName": self.table.name, "Item": {**key, **attributes}}
            if index == 0:
                put["ConditionExpression"] = "attribute_exists(pk)"
            items.append({"Put": put})
        try:
            self.client.transact_write_items(TransactItems=items)
        except ClientError as err:
            if is_condition_failure(err):
                raise NotFoundException("review", review.review_id)
            logger.error("Error updating review %s: %s", review.review_id, err)
            raise

    def delete_review(self, review: Review):
        keys = self._review_keys(review) + [self._marker_key(review.user_id, review.room_id)]
        try:
            self.client.transact_write_items(
                TransactItems=[
                    {"Delete": {"TableName": self.table.name, "Key": key}} for key in keys
                ]
            )
        except ClientError as err:
            logger.error("Error deleting review %s: %s", review.review_id, err)
            raise

    def get_review_by_id(self, review_id: str) -> Optional[Review]:
        try:
            response = self.table.get_item(
                Key={"pk": f"REVIEW#{review_id}", "sk": "DETAILS"}
            )
        except ClientError as err:
            logger.error("Error retrieving review %s: %s", review_id, err)
            raise
        item = response.get("Item")
        if not item:
            return None
        return self._to_domain(item)

    def _query_reviews(self, partition: str) -> List[Review]:
        try:
            items = query_all(
                self.table,
                KeyConditionExpression=Key("pk").eq(partition)
                & Key("sk").begins_with("REVIEW#"),
            )
        except ClientError as err:
            logger.error("Error retrieving reviews of %s: %s", partition, err)
            raise
        return [self._to_domain(item) for item in items]

    def get_room_reviews(self, room_id: str) -> List[Review]:
        return self._query_reviews(f"ROOM#{room_id}")

    def get_user_reviews(self, user_id: str) -> List[Review]:
        return self._query_reviews(f"USER#{user_id}")

    def get_hotel_reviews(self, hotel_id: str) -> List[Review]:
        return self._query_reviews(f"HOTEL#{hotel_id}")

    def get_reviews_with_min_rating(self, min_rating: int) -> List[Review]:
        try:
            items = scan_all(
                self.table,
                FilterExpression=Attr("pk").begins_with("REVIEW#")
                & Attr("sk").eq("DETAILS")
                & Attr("rating").gte(min_rating),
            )
        except ClientError as err:
            logger.error("Error scanning reviews rated %s and above: %s", min_rating, err)
            raise
        return [self._to_domain(item) for item in items]

    @staticmethod
    def _to_domain(item: dict) -> Review:
        return Review(
            review_id=item["review_id"],
            user_id=item["user_id"],
            room_id=item["room_id"],
            hotel_id=item["hotel_id"],
            rating=int(item["rating"]),
            comment=item["comment"],
            stay_date=from_iso_date(item["stay_date"]),
            created_at=from_iso_string(item["created_at"]),
        )
