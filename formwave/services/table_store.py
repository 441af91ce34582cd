"""Table-oriented access to the form tables.

Services talk to the database through ``TableStore`` the way a client talks to
a hosted table API: one request per call, equality filters, an optional
``not in`` filter on delete, and rows returned as plain dicts. Each call
commits on its own, so a sequence of calls is not atomic.
"""
import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import Table, delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from formwave.models.form_model import Answer, Form, Question, Submission
from formwave.models.user_model import Profile
from formwave.utils.logger_utils import log_database_operation

logger = logging.getLogger(__name__)

# Returned when a single-row select matches nothing
NOT_FOUND_CODE = "PGRST116"
STORE_ERROR_CODE = "STORE_ERROR"

TABLES: Dict[str, Table] = {
    "forms": Form.__table__,
    "questions": Question.__table__,
    "submissions": Submission.__table__,
    "answers": Answer.__table__,
    "profiles": Profile.__table__,
}


class StoreError(Exception):
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")

    @property
    def is_not_found(self) -> bool:
        return self.code == NOT_FOUND_CODE


def _table(name: str) -> Table:
    try:
        return TABLES[name]
    except KeyError:
        raise StoreError(STORE_ERROR_CODE, f"Unknown table {name}")


def _where(table: Table, statement, eq: Optional[Dict[str, Any]]):
    for column, value in (eq or {}).items():
        statement = statement.where(table.c[column] == value)
    return statement


class TableStore:
    def __init__(self, db: Session):
        self.db = db

    def select(
        self,
        table_name: str,
        eq: Optional[Dict[str, Any]] = None,
        in_: Optional[Tuple[str, Sequence[Any]]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        single: bool = False,
    ):
        table = _table(table_name)
        statement = _where(table, select(table), eq)
        if in_ is not None:
            column, values = in_
            statement = statement.where(table.c[column].in_(list(values)))
        if order_by is not None:
            ordering = table.c[order_by]
            statement = statement.order_by(ordering.desc() if descending else ordering.asc())

        log_database_operation("SELECT", table_name, {"eq": eq, "single": single})
        try:
            rows = [dict(row) for row in self.db.execute(statement).mappings().all()]
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(STORE_ERROR_CODE, str(e)) from e

        if single:
            if len(rows) != 1:
                raise StoreError(NOT_FOUND_CODE, f"Expected one row from {table_name}, found {len(rows)}")
            return rows[0]
        return rows

    def insert(self, table_name: str, rows: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        table = _table(table_name)
        prepared = []
        for row in rows:
            row = dict(row)
            if "id" in table.c and not row.get("id"):
                row["id"] = str(uuid.uuid4())
            prepared.append(row)
        if not prepared:
            return []

        log_database_operation("INSERT", table_name, {"rows": len(prepared)})
        try:
            self.db.execute(insert(table), prepared)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(STORE_ERROR_CODE, str(e)) from e

        # Read back so server defaults (timestamps) are included
        return self.select(table_name, in_=("id", [row["id"] for row in prepared]))

    def update(self, table_name: str, values: Dict[str, Any], eq: Dict[str, Any]) -> int:
        table = _table(table_name)
        statement = _where(table, update(table), eq).values(**values)

        log_database_operation("UPDATE", table_name, {"eq": eq})
        try:
            result = self.db.execute(statement)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(STORE_ERROR_CODE, str(e)) from e
        return result.rowcount

    def delete(
        self,
        table_name: str,
        eq: Dict[str, Any],
        not_in: Optional[Tuple[str, Sequence[Any]]] = None,
    ) -> int:
        table = _table(table_name)
        statement = _where(table, delete(table), eq)
        if not_in is not None:
            column, values = not_in
            statement = statement.where(table.c[column].not_in(list(values)))

        log_database_operation("DELETE", table_name, {"eq": eq, "not_in": not_in})
        try:
            result = self.db.execute(statement)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(STORE_ERROR_CODE, str(e)) from e
        return result.rowcount
