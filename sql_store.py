import logging
from typing import Dict, List, Optional

from sqlalchemy import func, inspect, select
from sqlalchemy.exc import SQLAlchemyError

import models
from database import Base, make_engine, make_session_factory
from exceptions import ReadFailed, StoreUnavailable, WriteFailed

logger = logging.getLogger(__name__)


class SqlStore:
    """Relational submission store with the same table/row contract as the sheet.

    The header row is implied by the `submissions` table schema, so
    set_header_row only checks that the requested columns match it.
    """

    table_name = models.Submission.__tablename__

    def __init__(self, engine):
        self.engine = engine
        self.SessionLocal = make_session_factory(engine)

    @classmethod
    def from_url(cls, database_url: str) -> "SqlStore":
        return cls(make_engine(database_url))

    def open(self) -> None:
        try:
            with self.engine.connect():
                pass
        except SQLAlchemyError as e:
            raise StoreUnavailable("open", str(e)) from e

    def first_table(self) -> Optional[str]:
        try:
            inspector = inspect(self.engine)
            exists = self.table_name in inspector.get_table_names()
        except SQLAlchemyError as e:
            raise StoreUnavailable("inspect tables", str(e)) from e
        return self.table_name if exists else None

    def create_table(self, title: str) -> str:
        # The SQL table name is fixed by the model; the sheet title only applies to Sheets
        try:
            Base.metadata.create_all(bind=self.engine, tables=[models.Submission.__table__])
        except SQLAlchemyError as e:
            raise WriteFailed("create table", str(e)) from e
        logger.info(f"Created table '{self.table_name}'")
        return self.table_name

    def row_count(self, table: str) -> int:
        try:
            with self.SessionLocal() as db:
                data_rows = db.scalar(select(func.count()).select_from(models.Submission))
        except SQLAlchemyError as e:
            raise ReadFailed("count rows", str(e)) from e
        # Header is implicit in the schema; only count it once data exists
        return data_rows + 1 if data_rows else 0

    def set_header_row(self, table: str, columns: List[str]) -> None:
        unknown = [column for column in columns if column not in models.COLUMN_MAP]
        if unknown:
            raise WriteFailed("write header row", f"columns not in schema: {unknown}")

    def append_row(self, table: str, values: List[str]) -> None:
        fields = {attr: value for attr, value in zip(models.COLUMN_MAP.values(), values)}
        try:
            with self.SessionLocal() as db:
                db.add(models.Submission(**fields))
                db.commit()
        except SQLAlchemyError as e:
            raise WriteFailed("append row", str(e)) from e

    def list_rows(self, table: str) -> List[Dict[str, str]]:
        try:
            with self.SessionLocal() as db:
                rows = db.scalars(select(models.Submission).order_by(models.Submission.id)).all()
        except SQLAlchemyError as e:
            raise ReadFailed("list rows", str(e)) from e
        return [
            {column: getattr(row, attr) for column, attr in models.COLUMN_MAP.items()}
            for row in rows
        ]
