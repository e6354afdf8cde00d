from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from config.settings import settings
from ops.metrics import Timer
from utils.errors import ConnectivityError

log = logging.getLogger("notifier.storage")

_DRIVER_PREFIX = "postgresql+psycopg://"


def normalize_database_url(url: str) -> str:
    # Hosted Postgres providers hand out postgres:// URLs; SQLAlchemy needs an explicit dialect+driver.
    url = (url or "").strip()
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return _DRIVER_PREFIX + url[len(prefix):]
    return url


def get_engine(url: Optional[str] = None, connect_timeout_s: Optional[int] = None) -> Engine:
    db_url = normalize_database_url(url if url is not None else settings.DATABASE_URL)
    if not db_url:
        raise ConnectivityError("DATABASE_URL not configured")
    timeout = connect_timeout_s if connect_timeout_s is not None else settings.DB_CONNECT_TIMEOUT_SECONDS

    connect_args: Dict[str, Any] = {}
    if db_url.startswith("postgresql"):
        connect_args["connect_timeout"] = timeout
    try:
        return create_engine(db_url, pool_pre_ping=True, connect_args=connect_args)
    except (SQLAlchemyError, ValueError, ImportError) as e:
        raise ConnectivityError(f"invalid database url: {type(e).__name__}: {e}") from e


def verify_connection(engine: Engine) -> None:
    """
    Startup handshake: one bounded `SELECT 1`.
    - Read-only
    - Raises ConnectivityError; callers treat it as fatal.
    """
    t = Timer()
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        log.critical(
            "store_connect_failed",
            extra={"extra": {"event": "store_connect_failed", "error_type": type(e).__name__, "message": str(e), "latency_ms": t.ms()}},
        )
        raise ConnectivityError(f"failed to connect to store: {e}") from e
    log.info("store_connect_ok", extra={"extra": {"event": "store_connect_ok", "latency_ms": t.ms()}})
