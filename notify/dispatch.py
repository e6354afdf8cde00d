from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from config.settings import TwilioConfig
from messaging.sms import TwilioSmsClient
from models.contact import Contact
from notify.formatter import build_sms_payload
from notify.throttle import SendThrottle
from ops.metrics import Timer
from utils.errors import CredentialError, SendError

log = logging.getLogger("notifier.dispatch")


@dataclass
class DispatchOutcome:
    contact_id: str
    ok: bool
    status_code: Optional[int] = None
    error: Optional[str] = None
    latency_ms: int = 0
    resp: Dict[str, Any] = field(default_factory=dict)


@dataclass
class BatchResult:
    batch_id: str
    outcomes: List[DispatchOutcome] = field(default_factory=list)
    pauses: int = 0

    @property
    def attempted(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return self.attempted - self.succeeded


class ContactDispatcher:
    """
    Relays a batch of contacts to the point-of-contact, one SMS each.

    Credentials are checked once per batch. A failed send is logged and the
    batch moves on; the throttle runs between contacts, not after the last one.
    """

    def __init__(self, config: TwilioConfig, sms: Optional[TwilioSmsClient] = None, throttle: Optional[SendThrottle] = None):
        self.config = config
        self.sms = sms
        self.throttle = throttle or SendThrottle(delay_s=15.0)

    def close(self) -> None:
        if self.sms is not None:
            self.sms.close()

    def dispatch_batch(self, contacts: Sequence[Contact]) -> BatchResult:
        if not self.config.has_credentials:
            raise CredentialError("Invalid twilio credentials, check TWILIO_ACCOUNT_SID / TWILIO_AUTH_TOKEN")
        if self.sms is None:
            self.sms = TwilioSmsClient(self.config)

        t = Timer()
        result = BatchResult(batch_id=str(uuid.uuid4()))
        for i, contact in enumerate(contacts):
            if i > 0:
                self.throttle.pause()
                result.pauses += 1
            result.outcomes.append(self._dispatch_one(contact, result.batch_id))

        log.info(
            "contact_batch_complete",
            extra={
                "extra": {
                    "event": "contact_batch_complete",
                    "batch_id": result.batch_id,
                    "attempted": result.attempted,
                    "succeeded": result.succeeded,
                    "failed": result.failed,
                    "pauses": result.pauses,
                    "duration_ms": t.ms(),
                }
            },
        )
        return result

    def _dispatch_one(self, contact: Contact, batch_id: str) -> DispatchOutcome:
        payload = build_sms_payload(contact, self.config.from_number, self.config.to_number)
        t = Timer()
        log.info(
            "contact_send_attempt",
            extra={"extra": {"event": "contact_send_attempt", "batch_id": batch_id, "contact_id": contact.id, "contact_name": contact.name}},
        )
        try:
            sent = self.sms.send_message(payload)
        except SendError as e:
            log.error(
                "contact_send_failed",
                extra={
                    "extra": {
                        "event": "contact_send_failed",
                        "batch_id": batch_id,
                        "contact_id": contact.id,
                        "contact": contact.describe(),
                        "status_code": e.status_code,
                        "error_type": type(e).__name__,
                        "message": str(e),
                    }
                },
            )
            return DispatchOutcome(contact_id=contact.id, ok=False, status_code=e.status_code, error=str(e), latency_ms=t.ms())

        log.info(
            "contact_send_result",
            extra={"extra": {"event": "contact_send_result", "batch_id": batch_id, "contact_id": contact.id, "ok": True, "status_code": sent.status_code, "latency_ms": t.ms()}},
        )
        return DispatchOutcome(contact_id=contact.id, ok=True, status_code=sent.status_code, latency_ms=t.ms(), resp=sent.data)
