from __future__ import annotations

import logging
import time
from typing import Callable

log = logging.getLogger("notifier.throttle")

# Fixed pacing between consecutive sends. This is the gateway rate limit, so sends
# stay strictly sequential.


class SendThrottle:
    def __init__(self, delay_s: float, sleep: Callable[[float], None] = time.sleep):
        if delay_s < 0:
            raise ValueError("delay_s must be >= 0")
        self.delay_s = delay_s
        self._sleep = sleep

    def pause(self) -> None:
        log.debug("send_throttle_pause", extra={"extra": {"event": "send_throttle_pause", "delay_s": self.delay_s}})
        if self.delay_s:
            self._sleep(self.delay_s)
