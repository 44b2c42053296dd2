# expenses/tests/test_expenses.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase
from rest_framework import status

from core.tests.helpers import api_client
from expenses.models import Expense, ExpenseCategory


class ExpenseModelTests(TestCase):
    def test_amount_must_be_positive(self):
        category = ExpenseCategory.objects.create(name="Electricity")
        with self.assertRaises(ValidationError):
            Expense.objects.create(category=category, amount=Decimal("0.00"))

    def test_inactive_category_refused_for_new_expense(self):
        category = ExpenseCategory.objects.create(name="Old", is_active=False)
        with self.assertRaises(ValidationError):
            Expense.objects.create(category=category, amount=Decimal("10.00"))


class ExpenseApiTests(TestCase):
    def setUp(self):
        self.client = api_client()
        self.category = ExpenseCategory.objects.create(name="Electricity")

    def test_create_and_list(self):
        res = self.client.post(
            "/api/expenses/",
            {
                "categoryId": self.category.pk,
                "amount": "4500.00",
                "date": "2024-02-01",
                "description": "WAPDA bill",
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["data"]["categoryName"], "Electricity")

        res = self.client.get("/api/expenses/?dateFrom=2024-02-01&dateTo=2024-02-29")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["pagination"]["total"], 1)

        res = self.client.get("/api/expenses/?dateFrom=2024-03-01")
        self.assertEqual(res.data["pagination"]["total"], 0)

    def test_filter_by_category_and_search(self):
        other = ExpenseCategory.objects.create(name="Labour")
        Expense.objects.create(category=self.category, amount=Decimal("100"), date=date(2024, 1, 1))
        Expense.objects.create(
            category=other, amount=Decimal("200"), date=date(2024, 1, 2), description="Loading crew"
        )

        res = self.client.get(f"/api/expenses/?categoryId={other.pk}")
        self.assertEqual(res.data["pagination"]["total"], 1)

        res = self.client.get("/api/expenses/?search=crew")
        self.assertEqual(res.data["data"][0]["categoryName"], "Labour")

    def test_zero_amount_rejected(self):
        res = self.client.post(
            "/api/expenses/", {"categoryId": self.category.pk, "amount": "0"}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["code"], "VALIDATION_ERROR")

    def test_inactive_category_rejected(self):
        self.category.is_active = False
        self.category.save()

        res = self.client.post(
            "/api/expenses/", {"categoryId": self.category.pk, "amount": "10"}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("categoryId", res.data["details"])

    def test_update_expense(self):
        expense = Expense.objects.create(category=self.category, amount=Decimal("100"))
        res = self.client.patch(f"/api/expenses/{expense.pk}/", {"amount": "150.00"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        expense.refresh_from_db()
        self.assertEqual(expense.amount, Decimal("150.00"))


class ExpenseCategoryApiTests(TestCase):
    def setUp(self):
        self.client = api_client()

    def test_create_and_filter_active(self):
        self.client.post("/api/expenses/categories/", {"name": "Fuel"}, format="json")
        ExpenseCategory.objects.create(name="Retired", is_active=False)

        res = self.client.get("/api/expenses/categories/")
        self.assertEqual(len(res.data["data"]), 2)

        res = self.client.get("/api/expenses/categories/?active=true")
        self.assertEqual([c["name"] for c in res.data["data"]], ["Fuel"])

    def test_duplicate_name_rejected(self):
        ExpenseCategory.objects.create(name="Fuel")
        res = self.client.post("/api/expenses/categories/", {"name": "Fuel"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_category_in_use_cannot_be_deleted(self):
        category = ExpenseCategory.objects.create(name="Fuel")
        Expense.objects.create(category=category, amount=Decimal("10"))

        res = self.client.delete(f"/api/expenses/categories/{category.pk}/")
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["code"], "IN_USE")
        self.assertTrue(ExpenseCategory.objects.filter(pk=category.pk).exists())

    def test_unused_category_deleted(self):
        category = ExpenseCategory.objects.create(name="Fuel")
        res = self.client.delete(f"/api/expenses/categories/{category.pk}/")
        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)
