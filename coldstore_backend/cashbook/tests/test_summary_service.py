# cashbook/tests/test_summary_service.py

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from django.test import TestCase, override_settings
from django.utils import timezone

from cashbook.models import DailyCashSummary, OpeningBalanceAudit
from cashbook.services import summary_service
from cashbook.services.exceptions import InvalidOpeningBalance
from cashbook.tests.helpers import expense_on, manual_on

D1 = date(2024, 3, 1)
D2 = date(2024, 3, 2)
D3 = date(2024, 3, 3)


class DailySummaryTests(TestCase):
    """
    GUARANTEES:
    - closing = opening + inflows − outflows
    - opening(D) = closing(D − 1) unless overridden
    - an override re-anchors every later day
    """

    def setUp(self):
        manual_on(D1, "inflow", "1000", "Counter sales")
        expense_on(D1, "300")
        manual_on(D2, "inflow", "200", "Rent collected")

    def test_closing_balance(self):
        day = summary_service.summary(D1)
        self.assertEqual(day.opening_balance, Decimal("0.00"))
        self.assertEqual(day.total_inflows, Decimal("1000.00"))
        self.assertEqual(day.total_outflows, Decimal("300.00"))
        self.assertEqual(day.closing_balance, Decimal("700.00"))
        self.assertEqual(day.transaction_count, 2)

    def test_opening_carries_previous_closing(self):
        day = summary_service.summary(D2)
        self.assertEqual(day.opening_balance, Decimal("700.00"))
        self.assertEqual(day.closing_balance, Decimal("900.00"))
        self.assertFalse(day.opening_is_override)

    def test_quiet_day_carries_forward(self):
        later = summary_service.summary(D3 + timedelta(days=5))
        self.assertEqual(later.opening_balance, Decimal("900.00"))
        self.assertEqual(later.closing_balance, Decimal("900.00"))
        self.assertEqual(later.transaction_count, 0)

    def test_range_is_consecutive_chain(self):
        days = summary_service.summaries(D1, D3)
        self.assertEqual([d.date for d in days], [D1, D2, D3])
        for previous, current in zip(days, days[1:]):
            self.assertEqual(current.opening_balance, previous.closing_balance)

    def test_override_anchors_later_days(self):
        summary_service.set_opening_balance(D2, "5000")

        self.assertEqual(summary_service.summary(D2).opening_balance, Decimal("5000.00"))
        self.assertTrue(summary_service.summary(D2).opening_is_override)
        self.assertEqual(summary_service.summary(D3).opening_balance, Decimal("5200.00"))
        # earlier days are unaffected
        self.assertEqual(summary_service.summary(D1).closing_balance, Decimal("700.00"))

    def test_no_summary_rows_written_on_read(self):
        summary_service.summaries(D1, D3)
        self.assertFalse(DailyCashSummary.objects.exists())


@override_settings(CASH_BOOK_SIGNIFICANT_CHANGE_THRESHOLD=Decimal("1000"))
class OpeningBalanceTests(TestCase):
    def test_change_at_threshold_is_not_audited(self):
        _, audited = summary_service.set_opening_balance(D1, "1000")
        self.assertFalse(audited)
        self.assertFalse(OpeningBalanceAudit.objects.exists())

    def test_significant_change_is_audited(self):
        summary_service.set_opening_balance(D1, "1000")
        day, audited = summary_service.set_opening_balance(
            D1, "2500.01", reason="Counted till", actor="manager"
        )

        self.assertTrue(audited)
        self.assertEqual(day.opening_balance, Decimal("2500.01"))
        audit = OpeningBalanceAudit.objects.get()
        self.assertEqual(audit.old_opening_balance, Decimal("1000.00"))
        self.assertEqual(audit.new_opening_balance, Decimal("2500.01"))
        self.assertEqual(audit.changed_by, "manager")
        self.assertEqual(audit.change_reason, "Counted till")

    def test_audit_compares_against_carried_balance(self):
        manual_on(D1, "inflow", "3000", "Opening cash sales")
        _, audited = summary_service.set_opening_balance(D2, "3500")
        self.assertFalse(audited)

    def test_negative_rejected(self):
        with self.assertRaises(InvalidOpeningBalance):
            summary_service.set_opening_balance(D1, "-1")

    def test_far_future_rejected(self):
        with self.assertRaises(InvalidOpeningBalance):
            summary_service.set_opening_balance(timezone.localdate() + timedelta(days=8), "10")

        day, _ = summary_service.set_opening_balance(timezone.localdate() + timedelta(days=7), "10")
        self.assertEqual(day.opening_balance, Decimal("10.00"))

    def test_override_keeps_reconciliation(self):
        summary_service.reconcile(D1, is_reconciled=True, reconciled_by="Ali")
        day, _ = summary_service.set_opening_balance(D1, "50")

        self.assertTrue(day.is_reconciled)
        self.assertEqual(day.reconciled_by, "Ali")

    def test_unreconcile_clears_stamp(self):
        summary_service.reconcile(D1, is_reconciled=True, reconciled_by="Ali")
        day = summary_service.reconcile(D1, is_reconciled=False)

        self.assertFalse(day.is_reconciled)
        self.assertEqual(day.reconciled_by, "")
        self.assertIsNone(day.reconciled_at)
