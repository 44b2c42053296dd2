# cashbook/tests/test_manual_service.py

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from cashbook.models import ManualCashTransaction
from cashbook.services import manual_service
from cashbook.services.exceptions import DuplicateTransaction, ReadOnlyCashBookEntry
from cashbook.tests.helpers import manual_on
from core.exceptions import NotFound, ValidationError
from core.tests.helpers import make_customer
from ledger.models import Ledger
from ledger.services import ledger_service

DAY = date(2024, 3, 1)


class ManualTransactionTests(TestCase):
    """
    GUARANTEES:
    - a customer-linked transaction keeps exactly one direct_cash ledger row
    - inflow credits the customer, outflow debits them
    - identical transactions inside a minute are refused
    """

    def setUp(self):
        self.customer = make_customer()

    def test_unlinked_transaction_posts_no_ledger_row(self):
        manual_on(DAY, "outflow", "120", "Tea and snacks")
        self.assertFalse(Ledger.objects.exists())

    def test_inflow_credits_customer(self):
        txn = manual_on(DAY, "inflow", "2500", "Rent paid at counter", customer=self.customer)

        row = Ledger.objects.get(cash_transaction=txn)
        self.assertEqual(row.type, Ledger.Type.DIRECT_CASH)
        self.assertEqual(row.credit_amount, Decimal("2500.00"))
        self.assertEqual(timezone.localdate(row.created_at), DAY)
        self.assertEqual(ledger_service.balance(self.customer), Decimal("-2500.00"))

    def test_outflow_debits_customer(self):
        manual_on(DAY, "outflow", "800", "Advance to farmer", customer=self.customer)
        self.assertEqual(ledger_service.balance(self.customer), Decimal("800.00"))

    def test_update_reposts_mirror(self):
        txn = manual_on(DAY, "inflow", "2500", "Rent paid", customer=self.customer)

        manual_service.update_manual_transaction(txn.pk, amount="3000.00", description="Rent paid (corrected)")

        rows = Ledger.objects.filter(cash_transaction=txn)
        self.assertEqual(rows.count(), 1)
        self.assertEqual(rows.get().credit_amount, Decimal("3000.00"))
        self.assertEqual(rows.get().description, "Rent paid (corrected)")

    def test_unlinking_customer_drops_mirror(self):
        txn = manual_on(DAY, "inflow", "2500", "Rent paid", customer=self.customer)
        manual_service.update_manual_transaction(txn.pk, customer_id=None)

        self.assertFalse(Ledger.objects.filter(cash_transaction=txn).exists())
        self.assertEqual(ledger_service.balance(self.customer), Decimal("0.00"))

    def test_delete_removes_mirror(self):
        txn = manual_on(DAY, "inflow", "2500", "Rent paid", customer=self.customer)
        manual_service.delete_manual_transaction(txn.pk)

        self.assertFalse(ManualCashTransaction.objects.exists())
        self.assertFalse(Ledger.objects.exists())

    def test_duplicate_within_window_refused(self):
        manual_on(DAY, "inflow", "500", "Cash sale")
        with self.assertRaises(DuplicateTransaction):
            manual_on(DAY, "inflow", "500", "Cash sale")

        manual_on(DAY, "inflow", "500", "Second cash sale")
        self.assertEqual(ManualCashTransaction.objects.count(), 2)

    def test_amount_rules(self):
        for bad in ("0", "-5", "1.005", "abc", "1000000000"):
            with self.assertRaises(ValidationError, msg=bad):
                manual_on(DAY, "inflow", bad, f"Bad amount {bad}")

    def test_whitespace_description_rejected(self):
        with self.assertRaises(ValidationError):
            manual_on(DAY, "inflow", "10", "   ")

    def test_future_date_window(self):
        tomorrow = timezone.localdate() + timedelta(days=1)
        manual_on(tomorrow, "inflow", "10", "Booked for tomorrow")

        with self.assertRaises(ValidationError):
            manual_on(tomorrow + timedelta(days=1), "inflow", "10", "Too far ahead")

    def test_unknown_customer_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            manual_service.create_manual_transaction(
                date=DAY,
                transaction_type="inflow",
                amount="10",
                description="Ghost",
                customer_id=999999,
            )
        self.assertEqual(ctx.exception.field, "customerId")


class EntryIdResolutionTests(TestCase):
    def test_manual_ids(self):
        self.assertEqual(manual_service.resolve_entry_id("manual-12"), 12)
        self.assertEqual(manual_service.resolve_entry_id("12"), 12)

    def test_other_sources_are_read_only(self):
        for entry_id in ("clearance-1", "ledger-4", "expense-9"):
            with self.assertRaises(ReadOnlyCashBookEntry):
                manual_service.resolve_entry_id(entry_id)

    def test_malformed_id_not_found(self):
        with self.assertRaises(NotFound):
            manual_service.resolve_entry_id("manual-abc")

    def test_missing_transaction_not_found(self):
        with self.assertRaises(NotFound):
            manual_service.get_manual_transaction("manual-424242")
