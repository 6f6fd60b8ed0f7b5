import re
from datetime import datetime, timezone
from typing import Any, Mapping

from exceptions import InvalidEmailError, MissingFieldError
from schemas import SubmissionRecord

REQUIRED_FIELDS = ("name", "email", "phone", "message")

# Loose x@y.z shape, not RFC 5322
EMAIL_PATTERN = re.compile(r'[^\s@]+@[^\s@]+\.[^\s@]+')


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def validate_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.fullmatch(email))


def validate_form(fields: Mapping[str, Any]) -> SubmissionRecord:
    """Check a raw submission and attach the server timestamp.

    Values are passed through untouched: no trimming, case folding or length
    limits. Raises MissingFieldError or InvalidEmailError.
    """
    for field in REQUIRED_FIELDS:
        value = fields.get(field)
        if not isinstance(value, str) or not value:
            raise MissingFieldError(field)

    if not validate_email(fields["email"]):
        raise InvalidEmailError()

    return SubmissionRecord(
        timestamp=utc_timestamp(),
        name=fields["name"],
        email=fields["email"],
        phone=fields["phone"],
        message=fields["message"],
    )
