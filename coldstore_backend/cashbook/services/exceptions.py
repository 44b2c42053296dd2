# cashbook/services/exceptions.py

"""
CASH BOOK SERVICE ERRORS
"""

from core.exceptions import ColdStoreError


class InvalidOpeningBalance(ColdStoreError):
    """Raised for negative, oversized or too-far-future opening balances."""

    code = "INVALID_OPENING_BALANCE"
    status_code = 400
    default_message = "Opening balance cannot be negative"


class ReadOnlyCashBookEntry(ColdStoreError):
    """Raised when a non-manual cash-book row is edited or deleted."""

    code = "READ_ONLY_ENTRY"
    status_code = 403
    default_message = (
        "Only manual transactions can be edited here. "
        "Edit the originating receipt, ledger entry or expense instead."
    )


class DuplicateTransaction(ColdStoreError):
    """Raised when an identical manual transaction was created within the last minute."""

    code = "DUPLICATE_TRANSACTION"
    status_code = 409
    default_message = "Potential duplicate transaction detected"
