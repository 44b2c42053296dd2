# core/tests/test_api.py

from __future__ import annotations

from decimal import Decimal

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from core.models import PackType, ProductType, Room
from core.tests.helpers import api_client, lot_payload, make_customer, make_entry, make_reference


class ReferenceDataApiTests(TestCase):
    def setUp(self):
        self.client = api_client()

    def test_requires_authentication(self):
        res = APIClient().get("/api/room/")
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(res.data["success"])
        self.assertEqual(res.data["code"], "NOT_AUTHENTICATED")

    def test_create_and_list_rooms(self):
        res = self.client.post("/api/room/", {"name": "Room A", "type": "cold", "capacity": 5000}, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertTrue(res.data["success"])
        self.assertEqual(res.data["data"]["type"], "COLD")

        res = self.client.get("/api/room/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual([r["name"] for r in res.data["data"]], ["Room A"])
        self.assertEqual(res.data["data"][0]["itemCount"], 0)

    def test_pack_type_rent_per_day(self):
        res = self.client.post("/api/packtype/", {"name": "Crate", "rentPerDay": "3.50"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(PackType.objects.get(name="Crate").rent_per_day, Decimal("3.50"))

    def test_duplicate_product_type_is_validation_error(self):
        ProductType.objects.create(name="Potato")
        res = self.client.post("/api/producttype/", {"name": "Potato"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["code"], "VALIDATION_ERROR")
        self.assertIn("name", res.data["details"])

    def test_sub_type_filter_by_product_type(self):
        potato = ProductType.objects.create(name="Potato")
        onion = ProductType.objects.create(name="Onion")
        self.client.post("/api/productsubtype/", {"name": "Cardinal", "productTypeId": potato.pk}, format="json")
        self.client.post("/api/productsubtype/", {"name": "Red", "productTypeId": onion.pk}, format="json")

        res = self.client.get(f"/api/productsubtype/?productTypeId={potato.pk}")
        self.assertEqual([r["name"] for r in res.data["data"]], ["Cardinal"])

    def test_room_in_use_cannot_be_deleted(self):
        product_type, pack_type, room = make_reference()
        make_entry(make_customer(), [lot_payload(product_type, pack_type, room)])

        res = self.client.delete(f"/api/room/{room.pk}/")
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["code"], "IN_USE")
        self.assertTrue(Room.objects.filter(pk=room.pk).exists())

    def test_unknown_detail_is_enveloped_404(self):
        res = self.client.get("/api/room/999999/")
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data["code"], "NOT_FOUND")


class HealthAndRootTests(TestCase):
    def test_health_is_public(self):
        res = APIClient().get("/api/health/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["db"], "ok")

    def test_api_root_lists_modules(self):
        res = APIClient().get("/api/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["modules"]["cash_book"], "/api/cash-book/")
