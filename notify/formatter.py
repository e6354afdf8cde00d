from __future__ import annotations

from typing import Dict

from models.contact import Contact

_POC_TEMPLATE = (
    "We are being contacted by '{name}' with email: '{email}' and phone number '{phone}' "
    "for the following reason: '{message}'.\n"
    "Please acknowledge receipt of this contact by replying '{ack_token}' to this message."
)


def format_contact_message(contact: Contact) -> str:
    # The contact id doubles as the reply token the point-of-contact sends back.
    return _POC_TEMPLATE.format(
        name=contact.name,
        email=contact.email,
        phone=contact.phone,
        message=contact.message,
        ack_token=contact.id,
    )


def build_sms_payload(contact: Contact, from_number: str, to_number: str) -> Dict[str, str]:
    return {
        "From": from_number,
        "To": to_number,
        "provideFeedback": "true",
        "Body": format_contact_message(contact),
    }
