# clearances/services/exceptions.py

"""
CLEARANCE SERVICE ERRORS
"""

from core.exceptions import ColdStoreError


class EmptySelection(ColdStoreError):
    """Raised when a clearance request selects no items."""

    code = "EMPTY_SELECTION"
    status_code = 400
    default_message = "At least one item must be selected for clearance"


class OverClearance(ColdStoreError):
    """
    Raised when requested quantities exceed what remains on one or more lots.
    details = [{lot_id, kind, requested, remaining, shortfall}, ...]
    """

    code = "OVER_CLEARANCE"
    status_code = 409
    default_message = "Requested quantity exceeds remaining quantity"
