# core/tests/helpers.py

"""
Shared fixtures for the cold storage test suites.

Plain functions (no factory library): each suite builds exactly the rows it
needs on top of these.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient

from core.models import PackType, ProductType, Room
from customers.models import Customer
from inventory.services.entry_service import create_entry_receipt

User = get_user_model()


def aware(year, month, day, hour=10, minute=0) -> datetime:
    return timezone.make_aware(datetime(year, month, day, hour, minute))


def make_reference(*, rent_per_day="2.00"):
    product_type = ProductType.objects.create(name="Potato")
    pack_type = PackType.objects.create(name="Bag", rent_per_day=Decimal(rent_per_day))
    room = Room.objects.create(name="Room 1", room_type=Room.RoomType.COLD)
    return product_type, pack_type, room


def make_customer(name="Ahmed Ali", phone="03001234567", **extra) -> Customer:
    return Customer.objects.create(name=name, phone=phone, **extra)


def lot_payload(product_type, pack_type, room, **overrides) -> dict:
    payload = {
        "product_type_id": product_type.pk,
        "pack_type_id": pack_type.pk,
        "room_id": room.pk,
        "marka": "AA",
        "quantity": 100,
        "unit_price": Decimal("2.00"),
    }
    payload.update(overrides)
    return payload


def make_entry(customer, items, *, entry_date=None, car_no="LHR-1234", receipt_no=None):
    return create_entry_receipt(
        customer=customer,
        car_no=car_no,
        items=items,
        entry_date=entry_date,
        receipt_no=receipt_no,
    )


def api_client(username="operator") -> APIClient:
    user = User.objects.create_user(username=username, password="password123")
    client = APIClient()
    client.force_authenticate(user=user)
    return client
