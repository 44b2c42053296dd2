# core/receipt_numbers.py

"""
RECEIPT NUMBERING

Format: <PREFIX>-YYYYMMDD-XXXX   (e.g. CS-20240101-0001, CL-20240111-0003)

- Date part uses the local business date of the receipt instant.
- Sequence = number of receipts already carrying that day's prefix + 1,
  skipping forward past any manually entered number that collides.
- Callers run inside transaction.atomic; the unique constraint on the
  number column is the final arbiter.
"""

from __future__ import annotations

from django.utils import timezone

ENTRY_PREFIX = "CS"
CLEARANCE_PREFIX = "CL"


def next_receipt_number(*, model, field: str, prefix: str, instant=None) -> str:
    instant = instant or timezone.now()
    day = timezone.localtime(instant).strftime("%Y%m%d")
    stem = f"{prefix}-{day}-"

    qs = model.objects.filter(**{f"{field}__startswith": stem})
    seq = qs.count() + 1

    candidate = f"{stem}{seq:04d}"
    while model.objects.filter(**{field: candidate}).exists():
        seq += 1
        candidate = f"{stem}{seq:04d}"
    return candidate
