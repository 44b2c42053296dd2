# inventory/tests/test_entry_api.py

from __future__ import annotations

from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from clearances.services.clearance_allocator import create_clearance
from core.tests.helpers import (
    api_client,
    aware,
    lot_payload,
    make_customer,
    make_entry,
    make_reference,
)
from ledger.models import Ledger


class EntryReceiptApiTests(TestCase):
    def setUp(self):
        self.client = api_client()
        self.product_type, self.pack_type, self.room = make_reference()
        self.customer = make_customer()

    def _item(self, **overrides):
        item = {
            "productTypeId": self.product_type.pk,
            "packTypeId": self.pack_type.pk,
            "roomId": self.room.pk,
            "marka": "AA",
            "quantity": 100,
            "unitPrice": "2.00",
        }
        item.update(overrides)
        return item

    def test_create_receipt(self):
        res = self.client.post(
            "/api/entry/",
            {
                "customerId": self.customer.pk,
                "carNo": "LHR-1234",
                "entryDate": "2024-01-01T10:00:00+05:00",
                "items": [
                    self._item(),
                    self._item(quantity=10, hasKhaliJali=True, kjQuantity=5, kjUnitPrice="3.00"),
                ],
            },
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        body = res.data["data"]
        self.assertEqual(body["receiptNo"], "CS-20240101-0001")
        self.assertEqual(Decimal(body["totalAmount"]), Decimal("235.00"))
        self.assertEqual(len(body["items"]), 2)
        self.assertEqual(body["items"][0]["remainingQuantity"], 100)
        self.assertEqual(body["customer"]["name"], "Ahmed Ali")

        self.assertEqual(
            Ledger.objects.get(customer=self.customer).debit_amount, Decimal("235.00")
        )

    def test_unknown_customer_rejected(self):
        res = self.client.post(
            "/api/entry/",
            {"customerId": 999999, "carNo": "X", "items": [self._item()]},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("customerId", res.data["details"])

    def test_empty_items_rejected(self):
        res = self.client.post(
            "/api/entry/",
            {"customerId": self.customer.pk, "carNo": "X", "items": []},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["code"], "VALIDATION_ERROR")

    def test_list_filters_by_customer(self):
        other = make_customer(name="Bilal", phone="03009999999")
        pt, pk, room = self.product_type, self.pack_type, self.room
        make_entry(self.customer, [lot_payload(pt, pk, room)])
        make_entry(other, [lot_payload(pt, pk, room)])

        res = self.client.get(f"/api/entry/?customerId={other.pk}")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["pagination"]["total"], 1)
        self.assertEqual(res.data["data"][0]["customerId"], other.pk)

    def test_customer_cannot_change(self):
        receipt = make_entry(
            self.customer, [lot_payload(self.product_type, self.pack_type, self.room)]
        )
        other = make_customer(name="Bilal", phone="03009999999")

        res = self.client.put(
            f"/api/entry/{receipt.pk}/", {"customerId": other.pk, "carNo": "NEW"}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        receipt.refresh_from_db()
        self.assertEqual(receipt.car_no, "LHR-1234")

    def test_delete_with_clearance_conflicts(self):
        receipt = make_entry(
            self.customer,
            [lot_payload(self.product_type, self.pack_type, self.room)],
            entry_date=aware(2024, 1, 1),
        )
        create_clearance(
            customer_id=self.customer.pk,
            entry_receipt_no=receipt.receipt_no,
            items=[{"entry_item_id": receipt.items.get().pk, "quantity_cleared": 5}],
            clearance_date=aware(2024, 1, 3),
        )

        res = self.client.delete(f"/api/entry/{receipt.pk}/")
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["code"], "LOT_LOCKED")

    def test_delete_untouched_receipt(self):
        receipt = make_entry(
            self.customer, [lot_payload(self.product_type, self.pack_type, self.room)]
        )
        res = self.client.delete(f"/api/entry/{receipt.pk}/")
        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)


class ReceiptLookupApiTests(TestCase):
    """
    GUARANTEES:
    - Exact receipt-number match only
    - Only lots with stock left are offered for clearance
    """

    def setUp(self):
        self.client = api_client()
        pt, pk, room = make_reference()
        self.customer = make_customer()
        self.receipt = make_entry(
            self.customer,
            [lot_payload(pt, pk, room, quantity=10), lot_payload(pt, pk, room, quantity=20)],
            entry_date=aware(2024, 1, 1),
            receipt_no="CS-100",
        )
        self.first, self.second = self.receipt.items.order_by("id")

    def test_lookup_returns_customer_and_lots(self):
        res = self.client.get("/api/entry/by-receipt-no/CS-100/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        body = res.data["data"]
        self.assertEqual(body["customer"]["id"], self.customer.pk)
        self.assertEqual([i["id"] for i in body["items"]], [self.first.pk, self.second.pk])

    def test_fully_cleared_lots_are_hidden(self):
        create_clearance(
            customer_id=self.customer.pk,
            entry_receipt_no="CS-100",
            items=[{"entry_item_id": self.first.pk, "quantity_cleared": 10}],
            clearance_date=aware(2024, 1, 5),
        )

        res = self.client.get("/api/entry/by-receipt-no/CS-100/")
        self.assertEqual([i["id"] for i in res.data["data"]["items"]], [self.second.pk])

    def test_partial_number_is_not_found(self):
        res = self.client.get("/api/entry/by-receipt-no/CS-10/")
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data["code"], "RECEIPT_NOT_FOUND")
