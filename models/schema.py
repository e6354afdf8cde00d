# Centralized table/column names to prevent drift.

TABLE_CONTACTS = "contacts"

CONTACT_COLUMNS = (
    "id",
    "name",
    "email",
    "phone",
    "message",
    "captcha_score",
    "acknowledged",
    "created_on",
    "updated_on",
)
