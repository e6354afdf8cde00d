from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class Contact:
    """An inbound inquiry, as stored in the contacts table.

    The notifier only reads contacts. `acknowledged` is owned by whatever
    process handles the point-of-contact's reply.
    """

    id: str
    name: str
    email: str
    phone: str
    message: str
    captcha_score: float
    acknowledged: bool
    created_on: int
    updated_on: int

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Contact":
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            email=row.get("email") or "",
            phone=row.get("phone") or "",
            message=row.get("message") or "",
            captcha_score=float(row.get("captcha_score") or 0.0),
            acknowledged=bool(row.get("acknowledged")),
            created_on=int(row.get("created_on") or 0),
            updated_on=int(row.get("updated_on") or 0),
        )

    def describe(self) -> str:
        return f"Contact name: {self.name}, email: {self.email}, phone: {self.phone}"
