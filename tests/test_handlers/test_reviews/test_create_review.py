import importlib
import json
import os
import unittest
from datetime import date
from unittest.mock import MagicMock, patch

from common.models.reviews import Review
from common.models.users import Requester
from common.utils.custom_exceptions import DuplicateReview, NotEligible


class CreateReviewHandlerTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.env = patch.dict(os.environ, {"TABLE_NAME": "test-table"}, clear=False)
        cls.env.start()
        cls.resource = patch("boto3.resource")
        mock_resource = cls.resource.start()
        mock_resource.return_value.Table.return_value = MagicMock()
        import handlers.reviews.create_review as mod
        cls.mod = importlib.reload(mod)

    @classmethod
    def tearDownClass(cls):
        cls.resource.stop()
        cls.env.stop()

    def setUp(self):
        self.p_create = patch.object(self.mod.review_service, "create_review")
        self.mock_create = self.p_create.start()

    def tearDown(self):
        self.p_create.stop()

    def _event(self, body=None):
        return {
            "body": json.dumps(body or {"roomId": "r1", "rating": 5, "comment": "Lovely stay"}),
            "requestContext": {"authorizer": {"user_id": "u1", "role": "GUEST"}},
        }

    def test_success(self):
        self.mock_create.return_value = Review(
            review_id="rv1", user_id="u1", room_id="r1", hotel_id="h1", rating=5,
            comment="Lovely stay", stay_date=date(2024, 6, 1),
        )

        resp = self.mod.create_review(self._event(), None)

        self.assertEqual(resp["statusCode"], 201)
        self.assertEqual(json.loads(resp["body"])["review"]["rating"], 5)
        self.mock_create.assert_called_once_with(
            Requester(user_id="u1"), room_id="r1", rating=5, comment="Lovely stay", stay_date=None
        )

    def test_rating_out_of_range(self):
        resp = self.mod.create_review(self._event({"roomId": "r1", "rating": 0, "comment": "bad"}), None)
        self.assertEqual(resp["statusCode"], 400)
        self.mock_create.assert_not_called()

    def test_not_eligible(self):
        self.mock_create.side_effect = NotEligible("You can only review rooms you've stayed in")
        resp = self.mod.create_review(self._event(), None)
        self.assertEqual(resp["statusCode"], 400)

    def test_duplicate(self):
        self.mock_create.side_effect = DuplicateReview("You have already reviewed this room")
        resp = self.mod.create_review(self._event(), None)
        self.assertEqual(resp["statusCode"], 409)

    def test_unauthenticated(self):
        resp = self.mod.create_review({"body": "{}"}, None)
        self.assertEqual(resp["statusCode"], 401)


if __name__ == "__main__":
    unittest.main()
