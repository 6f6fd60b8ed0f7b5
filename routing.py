"""Framework-neutral request dispatch shared by every deployment shape."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from config import DEFAULT_SHEET_TITLE
from exceptions import FormError, MethodNotAllowed, StoreError
from form_service import health, read_submissions, write_submission
from schemas import ErrorResponse, SubmissionsResponse, SubmitResponse
from stores import SubmissionStore
from validators import validate_form

logger = logging.getLogger(__name__)

HEALTH_PATH = "/api/health"
SUBMISSIONS_PATH = "/api/submissions"
SUBMIT_PATH = "/api/submit-form"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}
PREFLIGHT_HEADERS = {**CORS_HEADERS, "Access-Control-Max-Age": "86400"}

WRITE_ERROR_MESSAGE = "Internal server error"
READ_ERROR_MESSAGE = "Error fetching submissions"


@dataclass
class Reply:
    status: int
    payload: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=lambda: dict(CORS_HEADERS))


def error_reply(status: int, message: str) -> Reply:
    return Reply(status, ErrorResponse(message=message).model_dump())


def submit(body: Any, store: SubmissionStore, title: Optional[str] = None) -> Reply:
    fields = body if isinstance(body, dict) else {}
    try:
        record = validate_form(fields)
    except FormError as e:
        return error_reply(e.status_code, str(e))

    try:
        write_submission(store, record, title or DEFAULT_SHEET_TITLE)
    except StoreError as e:
        logger.error(f"Error submitting form: {e}")
        return error_reply(e.status_code, WRITE_ERROR_MESSAGE)
    except Exception:
        logger.exception("Unexpected error submitting form")
        return error_reply(500, WRITE_ERROR_MESSAGE)
    return Reply(200, SubmitResponse().model_dump())


def list_all(store: SubmissionStore) -> Reply:
    try:
        records = read_submissions(store)
    except StoreError as e:
        logger.error(f"Error fetching submissions: {e}")
        return error_reply(e.status_code, READ_ERROR_MESSAGE)
    except Exception:
        logger.exception("Unexpected error fetching submissions")
        return error_reply(500, READ_ERROR_MESSAGE)
    return Reply(200, SubmissionsResponse(submissions=records).model_dump())


def handle_request(method: str, path: str, body: Any,
                   store_factory: Callable[[], SubmissionStore],
                   title: Optional[str] = None) -> Reply:
    """Run one request through preflight, dispatch and error mapping.

    The store is only built for the two routes that need it, so preflight,
    health and rejected methods never touch the backing store.
    """
    method = method.upper()
    path = path.rstrip("/") or "/"

    if method == "OPTIONS":
        return Reply(200, {}, dict(PREFLIGHT_HEADERS))

    if (method, path) == ("GET", HEALTH_PATH):
        return Reply(200, health().model_dump())
    if (method, path) == ("GET", SUBMISSIONS_PATH):
        return list_all(store_factory())
    if (method, path) == ("POST", SUBMIT_PATH):
        return submit(body, store_factory(), title)

    rejected = MethodNotAllowed(method, path)
    logger.info(f"Rejected request: {rejected}")
    return error_reply(rejected.status_code, rejected.public_message)
