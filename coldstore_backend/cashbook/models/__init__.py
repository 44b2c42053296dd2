"""
PATH: cashbook/models/__init__.py

Cash book models export surface.
"""

from .daily_summary import DailyCashSummary, OpeningBalanceAudit
from .manual_transaction import ManualCashTransaction, TransactionType

__all__ = [
    "DailyCashSummary",
    "ManualCashTransaction",
    "OpeningBalanceAudit",
    "TransactionType",
]
