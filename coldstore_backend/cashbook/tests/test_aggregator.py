# cashbook/tests/test_aggregator.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.test import TestCase

from cashbook.services import aggregator
from cashbook.services.aggregator import CashBookFilters
from cashbook.services.sources import DateWindow
from cashbook.tests.helpers import expense_on, manual_on
from clearances.services.clearance_allocator import create_clearance
from core.exceptions import ValidationError
from core.tests.helpers import aware, lot_payload, make_customer, make_entry, make_reference
from ledger.models import MovementDirection
from ledger.services import ledger_service

DAY = date(2024, 3, 11)


class CashBookAggregatorTests(TestCase):
    """
    GUARANTEES:
    - every till movement appears exactly once
    - non-cash ledger rows (inventory, rent charges, discounts) never appear
    """

    def setUp(self):
        self.customer = make_customer()
        pt, pk, room = make_reference()
        receipt = make_entry(
            self.customer, [lot_payload(pt, pk, room, quantity=100)], entry_date=aware(2024, 3, 1)
        )
        create_clearance(
            customer_id=self.customer.pk,
            entry_receipt_no=receipt.receipt_no,
            items=[{"entry_item_id": receipt.items.get().pk, "quantity_cleared": 40}],
            clearance_date=aware(2024, 3, 11),
            payment_amount="500",
            discount_amount="100",
        )
        ledger_service.post_direct_cash(
            customer=self.customer,
            direction=MovementDirection.DEBIT,
            amount="250",
            description="Loan for transport",
            created_at=aware(2024, 3, 11, 12),
        )
        expense_on(DAY, "300", description="Generator diesel")
        self.linked = manual_on(DAY, "inflow", "1200", "Old dues settled", customer=self.customer)
        manual_on(DAY, "outflow", "75", "Tea")

    def _day(self, **kwargs):
        return aggregator.list_entries(CashBookFilters(date=DAY, **kwargs))

    def test_all_sources_merged_once(self):
        entries = self._day()

        self.assertEqual(
            sorted((e.source, e.transaction_type, e.amount) for e in entries),
            [
                ("clearance", "inflow", Decimal("500.00")),
                ("expense", "outflow", Decimal("300.00")),
                ("ledger", "outflow", Decimal("250.00")),
                ("manual", "inflow", Decimal("1200.00")),
                ("manual", "outflow", Decimal("75.00")),
            ],
        )

    def test_ids_and_editability(self):
        entries = {e.id: e for e in self._day()}
        self.assertIn(f"manual-{self.linked.pk}", entries)
        self.assertTrue(entries[f"manual-{self.linked.pk}"].is_editable)
        self.assertFalse(any(e.is_editable for e in entries.values() if e.source != "manual"))

    def test_day_flows(self):
        flows = aggregator.flows_by_date(DateWindow.day(DAY))[DAY]
        self.assertEqual(flows.inflows, Decimal("1700.00"))
        self.assertEqual(flows.outflows, Decimal("625.00"))
        self.assertEqual(flows.count, 5)

    def test_other_days_excluded(self):
        self.assertEqual(aggregator.list_entries(CashBookFilters(date=date(2024, 3, 1))), [])

    def test_filter_by_type_and_source(self):
        self.assertEqual(len(self._day(transaction_type="outflow")), 3)
        self.assertEqual([e.source for e in self._day(source="expense")], ["expense"])
        self.assertEqual(len(self._day(source="all", transaction_type="all")), 5)

    def test_filter_by_customer(self):
        entries = self._day(customer_id=self.customer.pk)
        self.assertEqual({e.source for e in entries}, {"clearance", "ledger", "manual"})

    def test_search_description_and_amount(self):
        self.assertEqual([e.description for e in self._day(search="diesel")], ["Electricity: Generator diesel"])
        self.assertEqual([e.amount for e in self._day(search="1200")], [Decimal("1200.00")])
        self.assertEqual(len(self._day(search="ahmed")), 3)

    def test_non_numeric_decimal_search_terms_match_text_only(self):
        for term in ("sNaN", "NaN", "Infinity", "-inf"):
            self.assertEqual(self._day(search=term), [], term)

    def test_sort_by_amount(self):
        amounts = [e.amount for e in self._day(sort_by="amount", sort_order="asc")]
        self.assertEqual(amounts, sorted(amounts))

    def test_invalid_filters(self):
        with self.assertRaises(ValidationError):
            self._day(source="bank")
        with self.assertRaises(ValidationError):
            self._day(transaction_type="transfer")
        with self.assertRaises(ValidationError):
            aggregator.list_entries(
                CashBookFilters(date_from=date(2024, 3, 2), date_to=date(2024, 3, 1))
            )
