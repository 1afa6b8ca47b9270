"""Business hours and the "is this shop open right now" check.

Times are compared on the wall clock ``now`` carries; no timezone conversion
is done, so ``now`` must be in the zone the shop's hours were written in.
Windows are half-open: a shop "open until 21:00" is closed at 21:00.
Windows that cross midnight (close <= open) never match; a closing time of
``24:00`` runs to the end of the day.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, time
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

WEEKDAYS: Tuple[str, ...] = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")

# "24:00" as a closing time; windows ending here run to midnight.
END_OF_DAY = time.max


def parse_time(value: Any, end_of_day: bool = False) -> Optional[time]:
    """Parse ``HH:MM`` or ``HH:MM:SS``; anything else gives None.

    With ``end_of_day`` set, ``24:00`` (and ``24:00:00``) is accepted and
    returned as :data:`END_OF_DAY`. Only closing times should allow it.
    """
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        return None
    m = _TIME_RE.match(value.strip())
    if not m:
        return None
    hour, minute, second = int(m.group(1)), int(m.group(2)), int(m.group(3) or 0)
    if end_of_day and hour == 24 and minute == 0 and second == 0:
        return END_OF_DAY
    if hour > 23 or minute > 59 or second > 59:
        return None
    return time(hour, minute, second)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def weekday_key(now: datetime) -> str:
    return WEEKDAYS[now.weekday()]


@dataclass(frozen=True)
class DayWindow:
    open: time
    close: time

    def contains(self, moment: time) -> bool:
        if self.close == END_OF_DAY:
            return self.open <= moment
        return self.open <= moment < self.close

    def label(self) -> str:
        close = "24:00" if self.close == END_OF_DAY else self.close.strftime("%H:%M")
        return f"{self.open.strftime('%H:%M')} - {close}"


@dataclass(frozen=True)
class BusinessHours:
    """Per-day schedule, or the legacy single window plus open days.

    ``days`` is None when the shop has no per-day structure at all; a day
    mapped to None (or missing from a present mapping) is closed all day.
    ``legacy_malformed`` marks legacy times that were given but could not be
    parsed; such a shop is closed rather than treated as having no hours.
    """

    days: Optional[Dict[str, Optional[DayWindow]]] = None
    opening_time: Optional[time] = None
    closing_time: Optional[time] = None
    days_open: Optional[Tuple[str, ...]] = None
    legacy_malformed: bool = False

    @property
    def has_schedule(self) -> bool:
        return self.days is not None

    @property
    def has_legacy_window(self) -> bool:
        return self.opening_time is not None and self.closing_time is not None

    @property
    def is_unknown(self) -> bool:
        """True when nothing at all is known about the opening hours."""
        return self.days is None and not self.has_legacy_window and not self.legacy_malformed

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "BusinessHours":
        """Build from a shop record; malformed pieces degrade to "closed that day"."""
        raw_open = record.get("opening_time")
        raw_close = record.get("closing_time")
        opening_time = parse_time(raw_open)
        closing_time = parse_time(raw_close, end_of_day=True)
        malformed = (not _is_blank(raw_open) and opening_time is None) or (
            not _is_blank(raw_close) and closing_time is None
        )
        if malformed:
            logger.debug("Unparseable legacy hours %r - %r", raw_open, raw_close)
        return cls(
            days=_parse_schedule(record.get("business_hours")),
            opening_time=opening_time,
            closing_time=closing_time,
            days_open=_parse_days(record.get("days_open")),
            legacy_malformed=malformed,
        )


def _parse_schedule(raw: Any) -> Optional[Dict[str, Optional[DayWindow]]]:
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        logger.debug("Ignoring business_hours of type %s", type(raw).__name__)
        return None
    if not raw:
        return None
    days: Dict[str, Optional[DayWindow]] = {}
    for day, window in raw.items():
        key = str(day).strip().lower()[:3]
        if key not in WEEKDAYS:
            continue
        if not isinstance(window, Mapping):
            days[key] = None
            continue
        opens = parse_time(window.get("open"))
        closes = parse_time(window.get("close"), end_of_day=True)
        days[key] = DayWindow(opens, closes) if opens is not None and closes is not None else None
    # No weekday keys at all reads as no per-day structure.
    return days or None


def _parse_days(raw: Any) -> Optional[Tuple[str, ...]]:
    if raw is None:
        return None
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, Iterable):
        return None
    return tuple(str(d).strip().lower()[:3] for d in raw)


def todays_hours(hours: BusinessHours, now: datetime) -> Optional[DayWindow]:
    """Today's opening window, or None when closed all day or no hours are known."""
    day = weekday_key(now)
    if hours.days is not None:
        return hours.days.get(day)
    if not hours.has_legacy_window:
        return None
    if hours.days_open is not None and day not in hours.days_open:
        return None
    return DayWindow(hours.opening_time, hours.closing_time)


def is_open_now(hours: BusinessHours, now: datetime) -> bool:
    if hours.is_unknown:
        return True
    window = todays_hours(hours, now)
    if window is None:
        return False
    return window.contains(now.time())


def format_hours(hours: BusinessHours, now: datetime) -> str:
    if hours.is_unknown:
        return "Open"
    window = todays_hours(hours, now)
    if window is None:
        return "Closed today"
    return window.label()
