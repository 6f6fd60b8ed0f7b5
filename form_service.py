import logging
from typing import List

from config import DEFAULT_SHEET_TITLE
from exceptions import StoreError
from schemas import HealthResponse, SubmissionRecord
from stores import SubmissionStore
from validators import utc_timestamp

logger = logging.getLogger(__name__)

HEADER_ROW = ["Timestamp", "Name", "Email", "Number", "Message"]


def resolve_table(store: SubmissionStore, title: str = DEFAULT_SHEET_TITLE) -> str:
    """First existing table, or a new one named `title`."""
    table = store.first_table()
    if table is None:
        table = store.create_table(title)
    return table


def ensure_header(store: SubmissionStore, table: str) -> None:
    # Not atomic with the following append; two racing first writes may both write it
    if store.row_count(table) == 0:
        store.set_header_row(table, HEADER_ROW)


def write_submission(store: SubmissionStore, record: SubmissionRecord,
                     title: str = DEFAULT_SHEET_TITLE) -> None:
    store.open()
    table = resolve_table(store, title)
    ensure_header(store, table)
    store.append_row(table, [
        record.timestamp,
        record.name,
        record.email,
        record.phone,
        record.message,
    ])
    logger.info(f"Form submitted successfully: name={record.name!r} email={record.email!r}")


def read_submissions(store: SubmissionStore) -> List[SubmissionRecord]:
    store.open()
    table = store.first_table()
    if table is None:
        return []
    return [
        SubmissionRecord(
            timestamp=row.get("Timestamp", ""),
            name=row.get("Name", ""),
            email=row.get("Email", ""),
            phone=row.get("Number", ""),
            message=row.get("Message", ""),
        )
        for row in store.list_rows(table)
    ]


def health() -> HealthResponse:
    return HealthResponse(status="OK", timestamp=utc_timestamp())


def prepare_store(store: SubmissionStore, title: str = DEFAULT_SHEET_TITLE) -> bool:
    """Warm up the store at process start. Failures are logged, never raised."""
    try:
        store.open()
        table = resolve_table(store, title)
        ensure_header(store, table)
    except StoreError as e:
        logger.error(f"Error initializing store: {e}")
        return False
    except Exception:
        logger.exception("Unexpected error initializing store")
        return False
    logger.info("Store initialized successfully")
    return True
