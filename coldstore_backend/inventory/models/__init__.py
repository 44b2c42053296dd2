"""
PATH: inventory/models/__init__.py

Inventory models export surface.
"""

from .entry_receipt import EntryReceipt
from .entry_item import EntryItem

__all__ = [
    "EntryReceipt",
    "EntryItem",
]
