from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from config.settings import TwilioConfig
from utils.errors import CredentialError, SendError

log = logging.getLogger("notifier.sms")


def _dest_hint(v: str, keep: int = 4) -> str:
    v = (v or "").strip()
    if not v:
        return ""
    if len(v) <= keep:
        return v
    return f"...{v[-keep:]}"


@dataclass
class SmsSendResult:
    status_code: int
    data: Dict[str, Any] = field(default_factory=dict)


class TwilioSmsClient:
    def __init__(self, config: TwilioConfig, http: Optional[httpx.Client] = None):
        self.config = config
        self.http = http or httpx.Client(timeout=config.timeout_s)

    def close(self) -> None:
        self.http.close()

    def send_message(self, payload: Dict[str, str]) -> SmsSendResult:
        """
        POST one form-encoded message to the Messages resource.
        Returns the status and decoded JSON body (diagnostics only) on a 2xx.
        Raises SendError for any other status or a transport failure.
        """
        if not self.config.has_credentials:
            raise CredentialError("TWILIO_ACCOUNT_SID / TWILIO_AUTH_TOKEN not configured")

        dest = _dest_hint(payload.get("To", ""))
        t0 = time.time()
        try:
            r = self.http.post(
                self.config.messages_url,
                data=payload,
                auth=(self.config.account_sid, self.config.auth_token),
                headers={
                    "Accept": "application/json",
                    "Content-Type": "application/x-www-form-urlencoded",
                },
            )
        except httpx.HTTPError as e:
            dt_ms = int((time.time() - t0) * 1000)
            log.warning(
                "sms_send_exception",
                extra={
                    "extra": {
                        "event": "sms_send_exception",
                        "dest": dest,
                        "error_type": type(e).__name__,
                        "message": str(e),
                        "latency_ms": dt_ms,
                    }
                },
            )
            raise SendError(f"{type(e).__name__}: {e}") from e

        dt_ms = int((time.time() - t0) * 1000)
        if not (200 <= r.status_code < 300):
            status = f"{r.status_code} {r.reason_phrase}".strip()
            log.warning(
                "sms_send_failed",
                extra={
                    "extra": {
                        "event": "sms_send_failed",
                        "dest": dest,
                        "status_code": r.status_code,
                        "resp": (r.text or "")[:500],
                        "latency_ms": dt_ms,
                    }
                },
            )
            raise SendError(f"Failed to send message to contact. Issue: {status}", status_code=r.status_code)

        try:
            data = r.json()
        except ValueError as e:
            log.debug(
                "sms_response_decode_failed",
                extra={"extra": {"event": "sms_response_decode_failed", "status_code": r.status_code, "message": str(e)}},
            )
            data = {}
        if not isinstance(data, dict):
            data = {"body": data}

        log.debug(
            "sms_send_result",
            extra={"extra": {"event": "sms_send_result", "dest": dest, "status_code": r.status_code, "resp": data, "latency_ms": dt_ms}},
        )
        return SmsSendResult(status_code=r.status_code, data=data)
