from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Core
    LOG_LEVEL: str = Field(default="INFO")
    DEV: Optional[str] = Field(default=None)  # presence alone enables debug logging

    # Store
    DATABASE_URL: str = Field(default="")
    DB_CONNECT_TIMEOUT_SECONDS: int = Field(default=5)

    # Messaging
    TWILIO_ACCOUNT_SID: str = Field(default="")
    TWILIO_AUTH_TOKEN: str = Field(default="")
    TWILIO_FROM_NUMBER: str = Field(default="")
    TWILIO_TO_NUMBER: str = Field(default="")  # point-of-contact
    TWILIO_API_BASE: str = Field(default="https://api.twilio.com/2010-04-01/Accounts")
    TWILIO_TIMEOUT_SECONDS: float = Field(default=20.0)

    # Polling
    POLL_INTERVAL_SECONDS: float = Field(default=3 * 60 * 60)
    SEND_DELAY_SECONDS: float = Field(default=15.0)

    # Business hours
    BUSINESS_TIMEZONE: str = Field(default="America/New_York")
    BUSINESS_HOURS_START: int = Field(default=9)
    BUSINESS_HOURS_END: int = Field(default=15)
    CLOSED_WEEKDAYS: str = Field(default="6")  # comma-separated, Monday=0

    @property
    def debug_enabled(self) -> bool:
        return self.DEV is not None

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug_enabled else self.LOG_LEVEL.upper()

    def closed_weekdays(self) -> FrozenSet[int]:
        return frozenset(int(x) for x in self.CLOSED_WEEKDAYS.split(",") if x.strip())


@dataclass(frozen=True)
class TwilioConfig:
    """Gateway settings, resolved once at startup and handed to the SMS layer."""

    account_sid: str
    auth_token: str
    from_number: str
    to_number: str
    api_base: str = "https://api.twilio.com/2010-04-01/Accounts"
    timeout_s: float = 20.0

    @classmethod
    def from_settings(cls, s: Settings) -> "TwilioConfig":
        return cls(
            account_sid=s.TWILIO_ACCOUNT_SID.strip(),
            auth_token=s.TWILIO_AUTH_TOKEN.strip(),
            from_number=s.TWILIO_FROM_NUMBER.strip(),
            to_number=s.TWILIO_TO_NUMBER.strip(),
            api_base=s.TWILIO_API_BASE.rstrip("/"),
            timeout_s=s.TWILIO_TIMEOUT_SECONDS,
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self.account_sid and self.auth_token)

    @property
    def messages_url(self) -> str:
        return f"{self.api_base}/{self.account_sid}/Messages.json"


settings = Settings()
