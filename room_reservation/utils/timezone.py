"""
Conversion between stored instants and the civil timezone.

Instants are stored as naive datetimes in UTC. The civil zone is only used
to display them and to decide which calendar day "today" is.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

CIVIL_FORMAT = "%Y-%m-%d %H:%M:%S"


def _as_utc(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def _naive_utc(instant: datetime) -> datetime:
    return _as_utc(instant).replace(tzinfo=None)


def to_civil(instant: datetime, zone: str) -> str:
    """Format a stored instant as civil time, e.g. `2024-05-01 09:00:00`."""
    return _as_utc(instant).astimezone(ZoneInfo(zone)).strftime(CIVIL_FORMAT)


def civil_today(zone: str, now: Optional[datetime] = None) -> date:
    now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    return now.astimezone(ZoneInfo(zone)).date()


def civil_today_start(zone: str, now: Optional[datetime] = None) -> datetime:
    """Instant (naive UTC) at which the current civil day began."""
    start = datetime.combine(civil_today(zone, now), time.min, tzinfo=ZoneInfo(zone))
    return _naive_utc(start)


def civil_day_bounds(zone: str, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Half-open [start, end) range (naive UTC) covering the current civil day."""
    start = civil_today_start(zone, now)
    return start, start + timedelta(days=1)


def parse_civil(value: str, zone: str) -> datetime:
    """
    Parse a client-supplied date or datetime into a naive UTC instant.

    Values without an offset are read as civil time in `zone`.
    Raises ValueError for anything `datetime.fromisoformat` rejects and for
    instants that cannot be represented both in UTC and in `zone`.
    """
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=ZoneInfo(zone))
    try:
        instant = _naive_utc(parsed)
        to_civil(instant, zone)
    except OverflowError as e:
        raise ValueError(f"{value!r} is out of range") from e
    return instant
