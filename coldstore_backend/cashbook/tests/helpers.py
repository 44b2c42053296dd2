# cashbook/tests/helpers.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from cashbook.services.manual_service import create_manual_transaction
from expenses.models import Expense, ExpenseCategory


def expense_on(day: date, amount, *, category_name="Electricity", description=""):
    category, _ = ExpenseCategory.objects.get_or_create(name=category_name)
    return Expense.objects.create(
        category=category,
        amount=Decimal(str(amount)),
        date=day,
        description=description,
    )


def manual_on(day: date, transaction_type: str, amount, description, *, customer=None):
    return create_manual_transaction(
        date=day,
        transaction_type=transaction_type,
        amount=amount,
        description=description,
        customer_id=customer.pk if customer is not None else None,
        created_by="tester",
    )
