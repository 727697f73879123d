from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional, Union


def ensure_utc(dt: datetime) -> datetime:
    """naive datetime 视为 UTC"""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def parse_timestamp(value: Union[str, datetime, int, float, None]) -> Optional[datetime]:
    """
    Parse an ISO-8601 / RFC-2822 string, epoch seconds or datetime.
    Returns None when the value cannot be understood.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)

    text = str(value).strip()
    if not text:
        return None

    iso_text = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        return ensure_utc(datetime.fromisoformat(iso_text))
    except ValueError:
        pass

    try:
        return ensure_utc(parsedate_to_datetime(text))
    except (TypeError, ValueError, IndexError):
        return None


def to_iso(dt: datetime) -> str:
    return ensure_utc(dt).isoformat()


def hours_between(a: datetime, b: datetime) -> float:
    return abs((a - b).total_seconds()) / 3600
