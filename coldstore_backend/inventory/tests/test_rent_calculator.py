# inventory/tests/test_rent_calculator.py

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.test import SimpleTestCase

from core.tests.helpers import aware
from inventory.services import rent_calculator


class RentCalculatorTests(SimpleTestCase):
    def test_whole_days(self):
        self.assertEqual(rent_calculator.days_stored(aware(2024, 1, 1), aware(2024, 1, 11)), 10)

    def test_same_day_is_one_day(self):
        start = aware(2024, 1, 1, 9)
        self.assertEqual(rent_calculator.days_stored(start, start), 1)
        self.assertEqual(rent_calculator.days_stored(start, start + timedelta(hours=3)), 1)

    def test_partial_day_rounds_up(self):
        start = aware(2024, 1, 1, 9)
        self.assertEqual(rent_calculator.days_stored(start, start + timedelta(days=2, minutes=1)), 3)

    def test_rent_is_qty_days_price(self):
        self.assertEqual(rent_calculator.rent(40, 10, Decimal("2.00")), Decimal("800.00"))

    def test_kj_rent_is_flat(self):
        # not multiplied by days
        self.assertEqual(rent_calculator.kj_rent(3, Decimal("5.00")), Decimal("15.00"))
