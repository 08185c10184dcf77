from botocore.exceptions import ClientError
import logging
from typing import Optional
from boto3.dynamodb.conditions import Key
from common.models.users import User, UserRole
from common.utils.custom_exceptions import NotFoundException, UserAlreadyExists
from common.utils.dynamo import is_condition_failure

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types_boto3_dynamodb.service_resource import Table
    from types_boto3_dynamodb import DynamoDBClient
else:
    Table = object
    DynamoDBClient = object

logger = logging.getLogger(__name__)


class UserRepository:
    def __init__(self, table: Table, client: DynamoDBClient = None):
        self.table = table
        self.client = client if client else table.meta.client

    def add_user(self, user: User):
        try:
            self.client.transact_write_items(
                TransactItems=[
                    {
                        "Put": {
                            "TableName": self.table.name,
                            "Item": {
                                "pk": f"EMAIL#{user.email}",
                                "sk": f"USER#{user.user_id}",
                            },
                            "ConditionExpression": "attribute_not_exists(pk)",
                        }
                    },
                    {
                        "Put": {
                            "TableName": self.table.name,
                            "Item": {
                                "pk": f"USER#{user.user_id}",
                                "sk": "DETAILS",
                                "username": user.username,
                                "email": user.email,
                                "password": user.password,
                                "role": user.role.value,
                                "recent_searched_cities": list(user.recent_searched_cities),
                            },
                            "ConditionExpression": "attribute_not_exists(pk)",
                        }
                    },
                ]
            )
        except ClientError as err:
            if is_condition_failure(err):
                raise UserAlreadyExists("email is already in use")
            logger.error(
                "couldn't add user %s. Error: %s",
                user.email,
                err.response["Error"].get("Message"),
            )
            raise

    def get_by_mail(self, mail: str) -> Optional[User]:
        try:
            response = self.table.query(
                KeyConditionExpression=(
                    Key("pk").eq(f"EMAIL#{mail}") & Key("sk").begins_with("USER#")
                )
            )
        except ClientError as err:
            logger.error("Error retrieving user by mail %s: %s", mail, err)
            raise

        items = response.get("Items", [])
        if not items:
            return None

        user_id = items[0]["sk"].split("#", 1)[1]
        return self.get_by_id(user_id=user_id)

    def get_by_id(self, user_id: str) -> Optional[User]:
        try:
            response = self.table.get_item(
                Key={"pk": f"USER#{user_id}", "sk": "DETAILS"}
            )
        except ClientError as err:
            logger.error("Error retrieving user by id %s: %s", user_id, err)
            raise

        item = response.get("Item")
        if not item:
            return None

        return self._to_domain(item=item)

    def update_recent_searches(self, user_id: str, cities: list[str]):
        try:
            self.table.update_item(
                Key={"pk": f"USER#{user_id}", "sk": "DETAILS"},
                UpdateExpression="SET #cities = :cities",
                ExpressionAttributeNames={"#cities": "recent_searched_cities"},
                ExpressionAttributeValues={":cities": cities},
                ConditionExpression="attribute_exists(pk)",
            )
        except ClientError as err:
            if is_condition_failure(err):
                raise NotFoundException("user", user_id)
            logger.error("Error updating recent searches of user %s: %s", user_id, err)
            raise

    @staticmethod
    def _to_domain(item: dict) -> User:
        return User(
            user_id=item["pk"].split("#", 1)[1],
            username=item["username"],
            email=item["email"],
            role=UserRole(item["role"]),
            password=item.get("password"),
            recent_searched_cities=list(item.get("recent_searched_cities", [])),
        )
