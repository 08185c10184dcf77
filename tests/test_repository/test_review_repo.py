import unittest
from unittest.mock import MagicMock
from datetime import date, datetime, timezone
from botocore.exceptions import ClientError

from common.repository.review_repo import ReviewRepository
from common.models.reviews import Review
from common.utils.custom_exceptions import DuplicateReview, NotFoundException


def condition_failed():
    return ClientError(
        {
            "Error": {"Code": "TransactionCanceledException", "Message": "cancelled"},
            "CancellationReasons": [{"Code": "ConditionalCheckFailed"}],
        },
        "TransactWriteItems",
    )


class TestReviewRepository(unittest.TestCase):

    def setUp(self):
        self.table = MagicMock()
        self.table.name = "test-table"
        self.client = MagicMock()
        self.repo = ReviewRepository(self.table, self.client)
        self.review = Review(
            review_id="rv1",
            user_id="u1",
            room_id="r1",
            hotel_id="h1",
            rating=5,
            comment="Lovely stay",
            stay_date=date(2024, 6, 1),
            created_at=datetime(2024, 6, 10, tzinfo=timezone.utc),
        )

    def test_add_review_guards_one_review_per_room(self):
        self.repo.add_review(self.review)

        _, kwargs = self.client.transact_write_items.call_args
        items = kwargs["TransactItems"]
        self.assertEqual(len(items), 5)
        marker = items[0]["Put"]
        self.assertEqual(marker["Item"]["pk"], "USER#u1")
        self.assertEqual(marker["Item"]["sk"], "REVIEWED#r1")
        self.assertEqual(marker["ConditionExpression"], "attribute_not_exists(pk)")
        self.assertEqual(
            [item["Put"]["Item"]["pk"] for item in items[1:]],
            ["REVIEW#rv1", "USER#u1", "ROOM#r1", "HOTEL#h1"],
        )

    def test_add_review_duplicate(self):
        self.client.transact_write_items.side_effect = condition_failed()

        with self.assertRaises(DuplicateReview):
            self.repo.add_review(self.review)

    def test_update_review_missing(self):
        self.client.transact_write_items.side_effect = condition_failed()

        with self.assertRaises(NotFoundException):
            self.repo.update_review(self.review)

    def test_delete_review_removes_marker(self):
        self.repo.delete_review(self.review)

        _, kwargs = self.client.transact_write_items.call_args
        keys = [item["Delete"]["Key"] for item in kwargs["TransactItems"]]
        self.assertIn({"pk": "USER#u1", "sk": "REVIEWED#r1"}, keys)
        self.assertEqual(len(keys), 5)

    def test_get_room_reviews(self):
        self.table.query.return_value = {
            "Items": [
                {
                    "review_id": "rv1",
                    "user_id": "u1",
                    "room_id": "r1",
                    "hotel_id": "h1",
                    "rating": 4,
                    "comment": "Nice",
                    "stay_date": "2024-06-01",
                    "created_at": "2024-06-10T00:00:00+00:00",
                }
            ]
        }

        reviews = self.repo.get_room_reviews("r1")

        self.assertEqual(len(reviews), 1)
        self.assertEqual(reviews[0].rating, 4)
        self.assertEqual(reviews[0].stay_date, date(2024, 6, 1))


if __name__ == "__main__":
    unittest.main()
