"""
PATH: clearances/models/__init__.py

Clearance models export surface.
"""

from .clearance_receipt import ClearanceReceipt
from .cleared_item import ClearedItem

__all__ = [
    "ClearanceReceipt",
    "ClearedItem",
]
