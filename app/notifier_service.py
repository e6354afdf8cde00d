from __future__ import annotations

import argparse
import logging
import sys
from datetime import time
from typing import List, Optional

from sqlalchemy.engine import Engine

from config.settings import Settings, TwilioConfig, settings
from messaging.sms import TwilioSmsClient
from notify.dispatch import ContactDispatcher
from notify.throttle import SendThrottle
from ops.structured_logger import setup_logging
from repos.contact_repo import ContactRepository
from schedule.business_hours import BusinessHoursGate
from schedule.poller import PollScheduler
from storage.postgres_client import get_engine, verify_connection
from utils.errors import ConnectivityError

log = logging.getLogger("notifier.service")


def build_scheduler(s: Settings, engine: Engine) -> PollScheduler:
    twilio = TwilioConfig.from_settings(s)
    gate = BusinessHoursGate(
        tz_name=s.BUSINESS_TIMEZONE,
        start=time(s.BUSINESS_HOURS_START),
        end=time(s.BUSINESS_HOURS_END),
        closed_weekdays=s.closed_weekdays(),
    )
    dispatcher = ContactDispatcher(
        config=twilio,
        sms=TwilioSmsClient(twilio),
        throttle=SendThrottle(delay_s=s.SEND_DELAY_SECONDS),
    )
    return PollScheduler(
        gate=gate,
        repo=ContactRepository(engine),
        dispatcher=dispatcher,
        interval_s=s.POLL_INTERVAL_SECONDS,
    )


def main(argv: Optional[List[str]] = None, s: Settings = settings) -> int:
    parser = argparse.ArgumentParser(prog="contact-notifier", description="Relay unacknowledged contacts to the point-of-contact by SMS.")
    parser.add_argument("--once", action="store_true", help="run a single poll cycle now and exit")
    args = parser.parse_args(argv)

    setup_logging(s.effective_log_level)

    try:
        engine = get_engine(s.DATABASE_URL, s.DB_CONNECT_TIMEOUT_SECONDS)
        verify_connection(engine)
    except ConnectivityError as e:
        log.critical(
            "startup_failed",
            extra={"extra": {"event": "startup_failed", "error_type": type(e).__name__, "message": str(e)}},
        )
        return 1

    scheduler = build_scheduler(s, engine)
    log.info(
        "notifier_started",
        extra={
            "extra": {
                "event": "notifier_started",
                "once": args.once,
                "poll_interval_s": s.POLL_INTERVAL_SECONDS,
                "send_delay_s": s.SEND_DELAY_SECONDS,
                "timezone": s.BUSINESS_TIMEZONE,
            }
        },
    )

    try:
        if args.once:
            scheduler.run_cycle()
        else:
            scheduler.run_forever()
    except KeyboardInterrupt:
        log.info("notifier_stopped", extra={"extra": {"event": "notifier_stopped"}})
    finally:
        scheduler.dispatcher.close()
        engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
