import importlib
import json
import os
import unittest
from decimal import Decimal
from unittest.mock import MagicMock, patch

from common.models.bookings import BookingStats
from common.models.hotels import Hotel
from common.utils.custom_exceptions import NotFoundException

OWNER_EVENT = {"requestContext": {"authorizer": {"user_id": "o1", "role": "HOTEL_OWNER"}}}


class GetHotelsHandlerTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.env = patch.dict(os.environ, {"TABLE_NAME": "test-table"}, clear=False)
        cls.env.start()
        cls.resource = patch("boto3.resource")
        mock_resource = cls.resource.start()
        mock_resource.return_value.Table.return_value = MagicMock()
        import handlers.hotels.get_hotels as mod
        cls.mod = importlib.reload(mod)

    @classmethod
    def tearDownClass(cls):
        cls.resource.stop()
        cls.env.stop()

    def setUp(self):
        self.hotel = Hotel(
            hotel_id="h1", owner_id="o1", name="Sea View", address="1 Beach Rd",
            contact="12345", city="Goa",
        )

    def test_list_hotels_by_city(self):
        with patch.object(self.mod.hotel_service, "list_hotels", return_value=[self.hotel]) as m:
            resp = self.mod.list_hotels({"queryStringParameters": {"city": "goa"}}, None)

        self.assertEqual(json.loads(resp["body"])["hotels"][0]["city"], "Goa")
        m.assert_called_once_with("goa")

    def test_profile(self):
        with patch.object(self.mod.hotel_service, "get_hotel_profile", return_value=self.hotel):
            resp = self.mod.get_hotel_profile(OWNER_EVENT, None)
        self.assertEqual(json.loads(resp["body"])["hotel"]["id"], "h1")

    def test_profile_without_hotel(self):
        with patch.object(
            self.mod.hotel_service,
            "get_hotel_profile",
            side_effect=NotFoundException("hotel for owner", "o1"),
        ):
            resp = self.mod.get_hotel_profile(OWNER_EVENT, None)
        self.assertEqual(resp["statusCode"], 404)

    def test_dashboard(self):
        stats = BookingStats(total_bookings=2, confirmed_bookings=1, total_revenue=Decimal("300"))
        with patch.object(self.mod.hotel_service, "get_dashboard", return_value=(stats, [])):
            resp = self.mod.get_hotel_dashboard(OWNER_EVENT, None)

        body = json.loads(resp["body"])
        self.assertEqual(body["totalBookings"], 2)
        self.assertEqual(body["totalRevenue"], 300.0)
        self.assertEqual(body["bookings"], [])


if __name__ == "__main__":
    unittest.main()
