from datetime import datetime, timezone
from zoneinfo import ZoneInfo
from .config import settings

DISPLAY_FORMAT = "%d/%m/%Y %H:%M:%S"


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """Normalize to an aware UTC datetime. Naive values are taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_display(dt: datetime) -> str:
    """Format a stored UTC timestamp as local wall-clock time, DD/MM/YYYY HH:MM:SS."""
    return as_utc(dt).astimezone(ZoneInfo(settings.display_timezone)).strftime(DISPLAY_FORMAT)
