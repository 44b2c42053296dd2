# clearances/tests/test_clearance_allocator.py

from __future__ import annotations

from decimal import Decimal

from django.test import TestCase

from clearances.models import ClearanceReceipt, ClearedItem
from clearances.services.clearance_allocator import create_clearance
from clearances.services.exceptions import EmptySelection, OverClearance
from core.exceptions import ValidationError
from core.tests.helpers import aware, lot_payload, make_customer, make_entry, make_reference
from inventory.services.exceptions import LotNotInReceipt, ReceiptNotFound
from ledger.models import Ledger
from ledger.services import ledger_service


class ClearanceAllocatorTests(TestCase):
    """
    GUARANTEES:
    - rent = qty × days × unit price, with a one-day floor
    - Khali Jali is charged flat
    - a lot can never be cleared past its remaining quantity
    - a failed request leaves lots, receipts and ledger untouched
    """

    def setUp(self):
        self.product_type, self.pack_type, self.room = make_reference()
        self.customer = make_customer()
        self.receipt = make_entry(
            self.customer,
            [
                lot_payload(self.product_type, self.pack_type, self.room, quantity=100),
                lot_payload(
                    self.product_type,
                    self.pack_type,
                    self.room,
                    quantity=50,
                    unit_price=Decimal("3.00"),
                    has_khali_jali=True,
                    kj_quantity=20,
                    kj_unit_price=Decimal("5.00"),
                ),
            ],
            entry_date=aware(2024, 1, 1),
        )
        self.lot, self.kj_lot = self.receipt.items.order_by("id")

    def _clear(self, lines, *, when=None, **kwargs):
        return create_clearance(
            customer_id=self.customer.pk,
            entry_receipt_no=self.receipt.receipt_no,
            items=lines,
            clearance_date=when or aware(2024, 1, 11),
            **kwargs,
        )

    def test_ten_day_clearance_end_to_end(self):
        clearance = self._clear([{"entry_item_id": self.lot.pk, "quantity_cleared": 40}])

        line = clearance.cleared_items.get()
        self.assertEqual(line.days_stored, 10)
        self.assertEqual(line.rent_amount, Decimal("800.00"))
        self.assertEqual(clearance.total_amount, Decimal("800.00"))
        self.assertEqual(clearance.clearance_no, "CL-20240111-0001")

        self.lot.refresh_from_db()
        self.assertEqual(self.lot.remaining_quantity, 60)

        debit = Ledger.objects.get(clearance_receipt=clearance)
        self.assertEqual(debit.debit_amount, Decimal("800.00"))
        self.assertEqual(debit.type, Ledger.Type.CLEARANCE)

    def test_same_day_clearance_pays_one_day(self):
        clearance = self._clear(
            [{"entry_item_id": self.lot.pk, "quantity_cleared": 10}],
            when=aware(2024, 1, 1, 18),
        )
        self.assertEqual(clearance.cleared_items.get().days_stored, 1)
        self.assertEqual(clearance.total_amount, Decimal("20.00"))

    def test_partial_day_rounds_up(self):
        clearance = self._clear(
            [{"entry_item_id": self.lot.pk, "quantity_cleared": 1}],
            when=aware(2024, 1, 3, 11),
        )
        self.assertEqual(clearance.cleared_items.get().days_stored, 3)

    def test_khali_jali_is_flat(self):
        clearance = self._clear(
            [{"entry_item_id": self.kj_lot.pk, "quantity_cleared": 10, "kj_quantity_cleared": 4}]
        )
        line = clearance.cleared_items.get()
        self.assertEqual(line.rent_amount, Decimal("300.00"))
        self.assertEqual(line.kj_amount, Decimal("20.00"))
        self.assertEqual(clearance.total_amount, Decimal("320.00"))

        self.kj_lot.refresh_from_db()
        self.assertEqual(self.kj_lot.remaining_kj_quantity, 16)

    def test_kj_on_lot_without_kj_rejected(self):
        with self.assertRaises(ValidationError):
            self._clear([{"entry_item_id": self.lot.pk, "quantity_cleared": 1, "kj_quantity_cleared": 1}])

    def test_second_request_for_same_stock_is_refused(self):
        self._clear([{"entry_item_id": self.lot.pk, "quantity_cleared": 60}])

        with self.assertRaises(OverClearance) as ctx:
            self._clear([{"entry_item_id": self.lot.pk, "quantity_cleared": 60}])

        problem = ctx.exception.details[0]
        self.assertEqual(problem["lot_id"], self.lot.pk)
        self.assertEqual(problem["remaining"], 40)
        self.assertEqual(problem["shortfall"], 20)

        self.lot.refresh_from_db()
        self.assertEqual(self.lot.remaining_quantity, 40)
        self.assertEqual(ClearanceReceipt.objects.count(), 1)

    def test_duplicate_lines_are_summed(self):
        with self.assertRaises(OverClearance):
            self._clear(
                [
                    {"entry_item_id": self.lot.pk, "quantity_cleared": 60},
                    {"entry_item_id": self.lot.pk, "quantity_cleared": 60},
                ]
            )

    def test_multi_line_failure_changes_nothing(self):
        balance_before = ledger_service.balance(self.customer)

        with self.assertRaises(OverClearance):
            self._clear(
                [
                    {"entry_item_id": self.lot.pk, "quantity_cleared": 10},
                    {"entry_item_id": self.kj_lot.pk, "quantity_cleared": 51},
                ]
            )

        self.lot.refresh_from_db()
        self.assertEqual(self.lot.remaining_quantity, 100)
        self.assertFalse(ClearedItem.objects.exists())
        self.assertEqual(ledger_service.balance(self.customer), balance_before)

    def test_failure_after_decrement_rolls_back(self):
        self._clear([{"entry_item_id": self.lot.pk, "quantity_cleared": 10}], clearance_no="CL-1")

        with self.assertRaises(ValidationError):
            self._clear(
                [{"entry_item_id": self.kj_lot.pk, "quantity_cleared": 5}],
                clearance_no="CL-1",
            )

        self.kj_lot.refresh_from_db()
        self.assertEqual(self.kj_lot.remaining_quantity, 50)
        self.assertEqual(ClearanceReceipt.objects.count(), 1)

    def test_empty_selection(self):
        with self.assertRaises(EmptySelection):
            self._clear([])
        with self.assertRaises(EmptySelection):
            self._clear([{"entry_item_id": self.lot.pk, "quantity_cleared": 0}])

    def test_lot_from_another_receipt(self):
        other = make_entry(
            self.customer, [lot_payload(self.product_type, self.pack_type, self.room)]
        )
        with self.assertRaises(LotNotInReceipt):
            self._clear([{"entry_item_id": other.items.get().pk, "quantity_cleared": 1}])

    def test_unknown_receipt(self):
        with self.assertRaises(ReceiptNotFound):
            create_clearance(
                customer_id=self.customer.pk,
                entry_receipt_no="NOPE",
                items=[{"entry_item_id": self.lot.pk, "quantity_cleared": 1}],
            )

    def test_customer_must_match_receipt(self):
        stranger = make_customer(name="Bilal", phone="03009999999")
        with self.assertRaises(ValidationError) as ctx:
            create_clearance(
                customer_id=stranger.pk,
                entry_receipt_no=self.receipt.receipt_no,
                items=[{"entry_item_id": self.lot.pk, "quantity_cleared": 1}],
                clearance_date=aware(2024, 1, 11),
            )
        self.assertEqual(ctx.exception.field, "customerId")

    def test_clearance_before_entry_rejected(self):
        with self.assertRaises(ValidationError):
            self._clear(
                [{"entry_item_id": self.lot.pk, "quantity_cleared": 1}],
                when=aware(2023, 12, 31),
            )

    def test_payment_and_discount_post_credits(self):
        clearance = self._clear(
            [{"entry_item_id": self.lot.pk, "quantity_cleared": 40}],
            payment_amount="500",
            discount_amount="50",
        )

        rows = Ledger.objects.filter(clearance_receipt=clearance).order_by("id")
        self.assertEqual(
            [(r.debit_amount, r.credit_amount, r.is_discount) for r in rows],
            [
                (Decimal("800.00"), Decimal("0.00"), False),
                (Decimal("0.00"), Decimal("500.00"), False),
                (Decimal("0.00"), Decimal("50.00"), True),
            ],
        )
        # receipt debit (200 + 150 + 100) + 800 − 500 − 50
        self.assertEqual(ledger_service.balance(self.customer), Decimal("700.00"))

    def test_discount_above_total_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            self._clear(
                [{"entry_item_id": self.lot.pk, "quantity_cleared": 1}],
                discount_amount="1000",
            )
        self.assertEqual(ctx.exception.field, "discountAmount")
