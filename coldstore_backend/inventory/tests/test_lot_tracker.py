# inventory/tests/test_lot_tracker.py

from __future__ import annotations

from django.db import transaction
from django.test import TestCase

from core.tests.helpers import lot_payload, make_customer, make_entry, make_reference
from inventory.services import lot_tracker
from inventory.services.exceptions import InsufficientStock, LotLocked


class LotTrackerTests(TestCase):
    """
    GUARANTEES:
    - remaining quantities only go down and never below zero
    - KJ remaining is tracked independently of the primary quantity
    - a touched lot is no longer editable
    """

    def setUp(self):
        product_type, pack_type, room = make_reference()
        receipt = make_entry(
            make_customer(),
            [
                lot_payload(
                    product_type,
                    pack_type,
                    room,
                    quantity=100,
                    has_khali_jali=True,
                    kj_quantity=10,
                    kj_unit_price="5.00",
                )
            ],
        )
        self.lot = receipt.items.get()

    def test_initial_remaining_equals_quantity(self):
        remaining = lot_tracker.get_remaining(self.lot.pk)
        self.assertEqual(remaining.quantity, 100)
        self.assertEqual(remaining.kj_quantity, 10)
        self.assertTrue(lot_tracker.is_editable(self.lot))

    def test_decrement_reduces_both_kinds(self):
        with transaction.atomic():
            remaining = lot_tracker.decrement(self.lot.pk, 40, 3)

        self.assertEqual(remaining.quantity, 60)
        self.assertEqual(remaining.kj_quantity, 7)

    def test_decrement_beyond_remaining_refused(self):
        with self.assertRaises(InsufficientStock) as ctx:
            with transaction.atomic():
                lot_tracker.decrement(self.lot.pk, 101)

        self.assertEqual(ctx.exception.details["remaining"], 100)
        self.assertEqual(lot_tracker.get_remaining(self.lot.pk).quantity, 100)

    def test_kj_shortfall_refused_even_when_quantity_fits(self):
        with self.assertRaises(InsufficientStock):
            with transaction.atomic():
                lot_tracker.decrement(self.lot.pk, 1, 11)

        remaining = lot_tracker.get_remaining(self.lot.pk)
        self.assertEqual((remaining.quantity, remaining.kj_quantity), (100, 10))

    def test_sequential_decrements_cannot_double_spend(self):
        with transaction.atomic():
            lot_tracker.decrement(self.lot.pk, 60)

        with self.assertRaises(InsufficientStock):
            with transaction.atomic():
                lot_tracker.decrement(self.lot.pk, 60)

        self.assertEqual(lot_tracker.get_remaining(self.lot.pk).quantity, 40)

    def test_touched_lot_is_locked(self):
        with transaction.atomic():
            lot_tracker.decrement(self.lot.pk, 0, 1)

        self.lot.refresh_from_db()
        self.assertFalse(lot_tracker.is_editable(self.lot))
        with self.assertRaises(LotLocked):
            lot_tracker.assert_editable(self.lot)

    def test_lock_lots_returns_rows_by_id(self):
        with transaction.atomic():
            locked = lot_tracker.lock_lots([self.lot.pk, self.lot.pk])
        self.assertEqual(list(locked), [self.lot.pk])
