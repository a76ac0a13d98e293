# Filename: rutz/utils.py
# Shared helpers: logging setup, id generation, timestamps, money rounding.

import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def new_id() -> str:
    """Opaque identifier for rows the service creates."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    """Naive UTC timestamp (the database columns carry no tz)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_money(value: Union[Decimal, str, int, float]) -> Decimal:
    """Quantize to cents, e.g. '49.9' -> Decimal('49.90')."""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def latin1(text: str) -> str:
    # core PDF fonts only cover latin-1 (product names carry β and friends)
    return (text or "").encode("latin-1", "replace").decode("latin-1")
