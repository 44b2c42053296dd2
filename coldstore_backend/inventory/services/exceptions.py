# inventory/services/exceptions.py

"""
INVENTORY SERVICE ERRORS

Raised by the lot tracker and the entry receipt service.
"""

from core.exceptions import ColdStoreError, NotFound, ValidationError


class ReceiptNotFound(NotFound):
    """Raised when an entry receipt number does not match exactly."""

    code = "RECEIPT_NOT_FOUND"
    default_message = "Entry receipt not found"


class InsufficientStock(ColdStoreError):
    """Raised when a decrement would take a lot below zero."""

    code = "INSUFFICIENT_STOCK"
    status_code = 409
    default_message = "Insufficient remaining quantity"


class LotLocked(ColdStoreError):
    """Raised when a partially or fully cleared lot is edited."""

    code = "LOT_LOCKED"
    status_code = 409
    default_message = "Lot has clearance history and can no longer be edited"


class LotNotInReceipt(ValidationError):
    """Raised when a clearance line references a lot from another receipt."""

    default_message = "Entry item does not belong to this receipt"
