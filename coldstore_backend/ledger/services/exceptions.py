# ledger/services/exceptions.py

"""
LEDGER SERVICE ERRORS
"""

from core.exceptions import ColdStoreError


class ProtectedLedgerEntry(ColdStoreError):
    """Raised when a system-generated ledger row (receipt-backed) is deleted or edited."""

    code = "PROTECTED_LEDGER_ENTRY"
    status_code = 400
    default_message = (
        "Cannot delete system-generated ledger entries. "
        "Delete or adjust the associated receipt instead."
    )
