"""Invoice number generation."""
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

INVOICE_NUMBER_PATTERN = re.compile(r"^INV-\d{8}-\d{6}$")

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def generate_invoice_number(now: Optional[datetime] = None) -> str:
    """
    Build an invoice number: INV-YYYYMMDD-<last 6 digits of epoch millis>.

    The date is the UTC calendar date. Numbers are not persisted, so two
    calls landing on the same 6-digit millisecond suffix can collide.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    else:
        now = now.astimezone(timezone.utc)

    millis = (now - EPOCH) // timedelta(milliseconds=1)
    suffix = str(millis)[-6:].zfill(6)
    return f"INV-{now.strftime('%Y%m%d')}-{suffix}"
