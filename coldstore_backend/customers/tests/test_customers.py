# customers/tests/test_customers.py

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase
from rest_framework import status

from core.tests.helpers import api_client, lot_payload, make_customer, make_entry, make_reference
from customers.models import Customer
from ledger.models import MovementDirection
from ledger.services import ledger_service


class CustomerModelTests(TestCase):
    """
    GUARANTEES:
    - Phone numbers follow the local format
    - A customer with financial history cannot be deleted
    """

    def test_invalid_phone_rejected(self):
        with self.assertRaises(ValidationError):
            Customer.objects.create(name="Bilal", phone="12345")

    def test_valid_phone_formats(self):
        for phone in ("03001234567", "+923001234567", "3001234567"):
            Customer.objects.create(name=f"C {phone}", phone=phone)

    def test_delete_blocked_with_ledger_history(self):
        customer = make_customer()
        ledger_service.post_direct_cash(
            customer=customer,
            direction=MovementDirection.DEBIT,
            amount=Decimal("500.00"),
            description="Advance",
        )
        with self.assertRaises(ValidationError):
            customer.delete()

    def test_with_balance_annotation_matches_service(self):
        customer = make_customer()
        ledger_service.post_direct_cash(
            customer=customer, direction=MovementDirection.DEBIT, amount="300", description="Loan"
        )
        ledger_service.post_direct_cash(
            customer=customer, direction=MovementDirection.CREDIT, amount="120", description="Cash"
        )

        row = Customer.objects.with_balance().get(pk=customer.pk)
        self.assertEqual(row.total_debit - row.total_credit, Decimal("180.00"))
        self.assertEqual(ledger_service.balance(customer), Decimal("180.00"))


class CustomerApiTests(TestCase):
    def setUp(self):
        self.client = api_client()

    def test_create_customer(self):
        res = self.client.post(
            "/api/customer/",
            {"name": "Ahmed Ali", "fatherName": "Ali Khan", "phone": "03001234567", "village": "Okara"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertTrue(res.data["success"])
        self.assertEqual(res.data["data"]["fatherName"], "Ali Khan")
        self.assertEqual(Decimal(str(res.data["data"]["balance"])), Decimal("0"))

    def test_blank_name_rejected(self):
        res = self.client.post("/api/customer/", {"name": "   "}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["code"], "VALIDATION_ERROR")

    def test_list_is_paginated_and_searchable(self):
        make_customer(name="Ahmed Ali", phone="03001111111")
        make_customer(name="Bilal Shah", phone="03002222222", village="Sahiwal")

        res = self.client.get("/api/customer/?search=bilal")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual([c["name"] for c in res.data["data"]], ["Bilal Shah"])
        self.assertEqual(res.data["pagination"]["total"], 1)

        res = self.client.get("/api/customer/?limit=1&page=2")
        self.assertEqual(len(res.data["data"]), 1)
        self.assertEqual(res.data["pagination"]["totalPages"], 2)

    def test_detail_carries_balance(self):
        product_type, pack_type, room = make_reference()
        customer = make_customer()
        make_entry(customer, [lot_payload(product_type, pack_type, room, quantity=10)])

        res = self.client.get(f"/api/customer/{customer.pk}/")
        self.assertEqual(Decimal(str(res.data["data"]["balance"])), Decimal("20.00"))

    def test_delete_with_receipts_refused(self):
        product_type, pack_type, room = make_reference()
        customer = make_customer()
        make_entry(customer, [lot_payload(product_type, pack_type, room)])

        res = self.client.delete(f"/api/customer/{customer.pk}/")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Customer.objects.filter(pk=customer.pk).exists())

    def test_delete_clean_customer(self):
        customer = make_customer()
        res = self.client.delete(f"/api/customer/{customer.pk}/")
        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Customer.objects.filter(pk=customer.pk).exists())
