"""Backing store interface shared by the Sheets and SQL implementations."""

from typing import Dict, List, Optional, Protocol

from config import Settings


class SubmissionStore(Protocol):
    def open(self) -> None: ...

    def first_table(self) -> Optional[str]: ...

    def create_table(self, title: str) -> str: ...

    def row_count(self, table: str) -> int: ...

    def set_header_row(self, table: str, columns: List[str]) -> None: ...

    def append_row(self, table: str, values: List[str]) -> None: ...

    def list_rows(self, table: str) -> List[Dict[str, str]]: ...


def build_store(settings: Settings) -> SubmissionStore:
    """Construct the configured store. Nothing is contacted until open()."""
    if settings.STORAGE_BACKEND == "sql":
        from sql_store import SqlStore
        return SqlStore.from_url(settings.DATABASE_URL)

    from google_sheets import SheetsStore
    return SheetsStore.from_settings(settings)
