from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from notify.dispatch import BatchResult, ContactDispatcher
from ops.metrics import Timer
from repos.contact_repo import ContactRepository
from schedule.business_hours import BusinessHoursGate
from utils.errors import CredentialError, StoreError

log = logging.getLogger("notifier.poller")

OUTCOME_CLOSED = "closed"
OUTCOME_STORE_ERROR = "store_error"
OUTCOME_CREDENTIAL_ERROR = "credential_error"
OUTCOME_DISPATCHED = "dispatched"


@dataclass
class CycleResult:
    outcome: str
    contacts_found: int = 0
    batch: Optional[BatchResult] = None


class PollScheduler:
    """
    Single-threaded poll loop.

    One tick runs one full cycle (gate, query, throttled dispatch) before the
    next tick is considered. Ticks that come due while a cycle is still running
    are absorbed, never replayed.
    """

    def __init__(
        self,
        gate: BusinessHoursGate,
        repo: ContactRepository,
        dispatcher: ContactDispatcher,
        interval_s: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        if interval_s <= 0:
            raise ValueError("interval_s must be > 0")
        self.gate = gate
        self.repo = repo
        self.dispatcher = dispatcher
        self.interval_s = interval_s
        self._clock = clock
        self._sleep = sleep
        self._now = now

    def run_cycle(self) -> CycleResult:
        instant = self._now()
        if not self.gate.is_open(instant):
            log.warning(
                "poll_skipped_outside_hours",
                extra={"extra": {"event": "poll_skipped_outside_hours", "at": instant.isoformat()}},
            )
            return CycleResult(outcome=OUTCOME_CLOSED)

        t = Timer()
        log.info("poll_cycle_start", extra={"extra": {"event": "poll_cycle_start", "at": instant.isoformat()}})
        try:
            contacts = self.repo.list_unacknowledged()
        except StoreError as e:
            log.error(
                "contact_poll_failed",
                extra={"extra": {"event": "contact_poll_failed", "error_type": type(e).__name__, "message": str(e)}},
            )
            return CycleResult(outcome=OUTCOME_STORE_ERROR)

        try:
            batch = self.dispatcher.dispatch_batch(contacts)
        except CredentialError as e:
            log.error(
                "dispatch_credentials_missing",
                extra={
                    "extra": {
                        "event": "dispatch_credentials_missing",
                        "contacts_found": len(contacts),
                        "message": str(e),
                    }
                },
            )
            return CycleResult(outcome=OUTCOME_CREDENTIAL_ERROR, contacts_found=len(contacts))

        log.info(
            "poll_cycle_metrics",
            extra={
                "extra": {
                    "event": "poll_cycle_metrics",
                    "contacts_found": len(contacts),
                    "sent_ok": batch.succeeded,
                    "sent_failed": batch.failed,
                    "cycle_duration_ms": t.ms(),
                }
            },
        )
        return CycleResult(outcome=OUTCOME_DISPATCHED, contacts_found=len(contacts), batch=batch)

    def run_forever(self, max_ticks: Optional[int] = None) -> int:
        """Drive cycles on a fixed cadence. Returns the number of ticks served."""
        ticks = 0
        next_due = self._clock() + self.interval_s
        while max_ticks is None or ticks < max_ticks:
            wait = next_due - self._clock()
            if wait > 0:
                self._sleep(wait)

            try:
                self.run_cycle()
            except Exception as e:
                log.error(
                    "poll_cycle_exception",
                    extra={"extra": {"event": "poll_cycle_exception", "error_type": type(e).__name__, "message": str(e)}},
                    exc_info=True,
                )
            ticks += 1

            next_due += self.interval_s
            absorbed = 0
            now = self._clock()
            while next_due <= now:
                next_due += self.interval_s
                absorbed += 1
            if absorbed:
                log.debug("poll_ticks_absorbed", extra={"extra": {"event": "poll_ticks_absorbed", "absorbed": absorbed}})
        return ticks
