from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from models.contact import Contact
from models.schema import CONTACT_COLUMNS, TABLE_CONTACTS
from storage.postgres_client import get_engine
from utils.errors import StoreError

log = logging.getLogger("notifier.repos.contacts")

_LIST_UNACKNOWLEDGED = text(
    f"SELECT {', '.join(CONTACT_COLUMNS)} FROM {TABLE_CONTACTS} "
    "WHERE acknowledged = false "
    "ORDER BY created_on ASC, id ASC"
)


class ContactRepository:
    def __init__(self, engine: Optional[Engine] = None):
        self.engine = engine or get_engine()

    def list_unacknowledged(self) -> List[Contact]:
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(_LIST_UNACKNOWLEDGED).mappings().all()
        except SQLAlchemyError as e:
            log.debug("contact_query_error", extra={"extra": {"event": "contact_query_error", "message": str(e)}})
            raise StoreError(f"{type(e).__name__}: {e}") from e
        try:
            return [Contact.from_row(r) for r in rows]
        except (KeyError, TypeError, ValueError) as e:
            log.error("contact_row_decode_failed", extra={"extra": {"event": "contact_row_decode_failed", "error_type": type(e).__name__, "message": str(e)}})
            raise StoreError(f"undecodable contact row: {type(e).__name__}: {e}") from e
