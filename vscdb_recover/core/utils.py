"""
Utility functions for timestamp handling.
"""
import math
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
ONE_MS = timedelta(milliseconds=1)


def epoch_ms_to_iso(value: Union[int, float]) -> Optional[str]:
    """
    Convert epoch milliseconds to an ISO-8601 UTC string.

    Parameters
    ----------
    value : int or float
        Milliseconds since the Unix epoch. Fractions are truncated toward zero.

    Returns
    -------
    str or None
        e.g. ``2024-01-01T00:00:00.000Z``; None for non-finite values or
        values outside years 1-9999 (``datetime`` range). Expanded-year forms
        such as ``+010000-01-01T00:00:00.000Z`` are never produced.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        value = int(value)

    try:
        moment = EPOCH + timedelta(milliseconds=value)
    except OverflowError:
        return None

    return (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
        f".{moment.microsecond // 1000:03d}Z"
    )


def iso_to_epoch_ms(value: Optional[str]) -> Optional[int]:
    """
    Convert an ISO-8601 string back to whole epoch milliseconds.

    Parameters
    ----------
    value : str, optional
        ISO timestamp, ``Z`` suffix accepted. Naive values are taken as UTC.

    Returns
    -------
    int or None
        Milliseconds since the epoch, or None when the value is missing or
        unparseable
    """
    if not value:
        return None
    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, TypeError):
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (moment - EPOCH) // ONE_MS
