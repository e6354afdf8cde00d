from __future__ import annotations

import logging
from datetime import datetime, time, timezone
from typing import FrozenSet, Iterable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from utils.errors import TimezoneError

log = logging.getLogger("notifier.business_hours")

SUNDAY = 6


class BusinessHoursGate:
    """
    Decides whether a poll may run at a given instant.

    Open iff the local time-of-day is in [start, end) and the local weekday is
    not closed. If the reference timezone cannot be loaded the gate is closed.
    """

    def __init__(
        self,
        tz_name: str = "America/New_York",
        start: time = time(9, 0),
        end: time = time(15, 0),
        closed_weekdays: Optional[Iterable[int]] = None,
    ):
        if start >= end:
            raise ValueError("business hours start must be before end")
        self.tz_name = tz_name
        self.start = start
        self.end = end
        self.closed_weekdays: FrozenSet[int] = frozenset(closed_weekdays if closed_weekdays is not None else (SUNDAY,))

    def _zone(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.tz_name)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise TimezoneError(f"cannot load timezone {self.tz_name!r}: {e}") from e

    def is_open(self, instant: Optional[datetime] = None) -> bool:
        instant = instant or datetime.now(timezone.utc)
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)

        try:
            zone = self._zone()
        except TimezoneError as e:
            log.error(
                "business_hours_timezone_error",
                extra={"extra": {"event": "business_hours_timezone_error", "tz": self.tz_name, "message": str(e)}},
            )
            return False

        local = instant.astimezone(zone)
        if local.weekday() in self.closed_weekdays:
            return False
        return self.start <= local.time() < self.end
