"""
Wall-clock access for time-dependent analytics
"""
from datetime import date, datetime, timezone


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Clock:
    """System clock; subclass to pin "now" in tests"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def today(self) -> date:
        return self.now().date()
