# core/tests/test_reference_data.py

from __future__ import annotations

from decimal import Decimal

from django.test import TestCase

from core.exceptions import ValidationError
from core.models import PackType, ProductSubType, ProductType, Room
from core.money import format_amount, money, to_int_qty
from core.reference_data import ReferenceDataCache


class ReferenceDataCacheTests(TestCase):
    """
    GUARANTEES:
    - Lookups are served from one load per table
    - Unknown / inactive references fail with a field-attributed ValidationError
    """

    def setUp(self):
        self.potato = ProductType.objects.create(name="Potato")
        self.onion = ProductType.objects.create(name="Onion")
        self.cardinal = ProductSubType.objects.create(product_type=self.potato, name="Cardinal")
        self.bag = PackType.objects.create(name="Bag", rent_per_day=Decimal("2.00"))
        self.room = Room.objects.create(name="Room 1")
        self.closed_room = Room.objects.create(name="Room 9", is_active=False)

    def test_tables_load_once(self):
        cache = ReferenceDataCache()
        cache.product_type(self.potato.pk)

        with self.assertNumQueries(0):
            self.assertEqual(cache.product_type(self.onion.pk), self.onion)

    def test_invalidate_reloads(self):
        cache = ReferenceDataCache()
        cache.pack_type(self.bag.pk)
        crate = PackType.objects.create(name="Crate", rent_per_day=Decimal("3.00"))

        with self.assertRaises(ValidationError):
            cache.pack_type(crate.pk)

        cache.invalidate()
        self.assertEqual(cache.pack_type(crate.pk), crate)

    def test_unknown_id_is_attributed_to_field(self):
        cache = ReferenceDataCache()
        with self.assertRaises(ValidationError) as ctx:
            cache.room(999999, field="items[0].roomId")

        self.assertEqual(ctx.exception.field, "items[0].roomId")
        self.assertIn("items[0].roomId", ctx.exception.details)

    def test_inactive_room_rejected(self):
        with self.assertRaises(ValidationError):
            ReferenceDataCache().room(self.closed_room.pk)

    def test_sub_type_must_belong_to_product_type(self):
        cache = ReferenceDataCache()
        self.assertEqual(
            cache.product_sub_type(self.cardinal.pk, product_type=self.potato),
            self.cardinal,
        )
        with self.assertRaises(ValidationError):
            cache.product_sub_type(self.cardinal.pk, product_type=self.onion)

    def test_missing_sub_type_is_optional(self):
        self.assertIsNone(ReferenceDataCache().product_sub_type(None))


class MoneyTests(TestCase):
    def test_money_rounds_half_up(self):
        self.assertEqual(money("2.345"), Decimal("2.35"))
        self.assertEqual(money(None), Decimal("0.00"))

    def test_money_rejects_garbage(self):
        with self.assertRaises(ValidationError):
            money("abc")

    def test_money_rejects_non_finite(self):
        for bad in ("NaN", "sNaN", "Infinity", "-inf"):
            with self.assertRaises(ValidationError):
                money(bad)

    def test_quantities_are_whole_units(self):
        self.assertEqual(to_int_qty("40"), 40)
        self.assertEqual(to_int_qty(None), 0)
        for bad in (1.5, True, -1, "4.0"):
            with self.assertRaises(ValidationError):
                to_int_qty(bad)

    def test_format_amount(self):
        self.assertEqual(format_amount(Decimal("1234.5")), "Rs. 1,234.50")
