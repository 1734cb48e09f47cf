"""Instant parsing and formatting in the rental office's timezone."""
from datetime import datetime, date, timezone, time as dtime

import pytz

from rentdesk.utils.constants import BUSINESS_TZ, DATE_FMT, TIME_FMT


def business_tz():
    return pytz.timezone(BUSINESS_TZ)


def now_utc() -> datetime:
    """Wrapper for easier testing/mocking."""
    return datetime.now(timezone.utc)


def to_millis(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def localize(dt: datetime) -> datetime:
    """Attach the business timezone to a naive datetime; aware values pass through."""
    if dt.tzinfo is None:
        return business_tz().localize(dt)
    return dt


def parse_instant(value) -> datetime:
    """
    Coerce any instant-like value to an aware datetime.
    Supports:
      - datetime (naive values are business-local wall clock)
      - date (midnight, business-local)
      - 'YYYY-MM-DD'
      - 'YYYY-MM-DDTHH:MM[:SS]' or with a space instead of 'T'
      - Above with 'Z' or offsets like '+07:00'
    Raises ValueError on anything else.
    """
    if isinstance(value, datetime):
        return localize(value)
    if isinstance(value, date):
        return localize(datetime.combine(value, dtime.min))
    if not isinstance(value, str):
        raise ValueError(f"Unsupported instant: {value!r}")

    s = value.strip()
    if not s:
        raise ValueError("Empty instant")
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    if len(s) == 10:
        return localize(datetime.strptime(s, DATE_FMT))
    return localize(datetime.fromisoformat(s))


def combine_local(date_str: str, time_str: str | None = None) -> datetime:
    """Combine separate form fields ('2024-01-01', '08:00') into an aware instant."""
    d = datetime.strptime(date_str.strip(), DATE_FMT)
    if time_str:
        t = datetime.strptime(time_str.strip(), TIME_FMT).time()
        d = datetime.combine(d.date(), t)
    return localize(d)


def to_iso(dt: datetime) -> str:
    """Serialize to the storage format: ISO-8601 in UTC."""
    return localize(dt).astimezone(timezone.utc).isoformat(timespec="seconds")


def local_date_str(value) -> str:
    """Calendar day ('YYYY-MM-DD') of an instant as seen at the office."""
    return parse_instant(value).astimezone(business_tz()).strftime(DATE_FMT)


def fmt_iso_local(value, use_12h: bool = False) -> str:
    """
    Format a stored instant for people at the office.
    On parse error, returns the original value (so the output never goes blank).
    """
    if value is None:
        return ""
    s = str(value).strip()
    if not s:
        return ""
    try:
        dt = parse_instant(value).astimezone(business_tz())
    except ValueError:
        return s

    if use_12h:
        # Avoid %-I (not portable on Windows). Strip any leading zero manually.
        hh = dt.strftime("%I").lstrip("0") or "0"
        return f"{dt.strftime('%d %b %Y')}, {hh}:{dt.strftime('%M %p')}"
    return dt.strftime("%d/%m/%Y %H:%M")
