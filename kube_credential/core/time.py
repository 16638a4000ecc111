from __future__ import annotations

from datetime import datetime, timezone


def format_iso(moment: datetime) -> str:
    """Format as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` (UTC, millisecond precision)."""
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def now_utc_iso() -> str:
    return format_iso(datetime.now(timezone.utc))


def is_canonical_iso(value: str) -> bool:
    """True if ``value`` parses and formats back to exactly the same string.

    Only the canonical UTC millisecond form passes, e.g.
    ``2024-01-01T00:00:00.000Z``.
    """
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return False
    if parsed.tzinfo is None:
        return False
    return format_iso(parsed) == value
