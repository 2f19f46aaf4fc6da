"""Domain store: table-addressed record access over the SQLAlchemy models."""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from jobwise.errors import ConstraintViolation, NotFound, UpstreamFailure, ValidationError
from jobwise.models import TABLES, db

logger = logging.getLogger(__name__)


def _row(obj: Any) -> dict[str, Any]:
    return {col.name: getattr(obj, col.name) for col in obj.__table__.columns}


class DomainStore:
    """
    Record-level persistence keyed by table name. Records are plain dicts
    carrying the store's own column names; mapping them to domain objects is
    the caller's job.
    """

    def __init__(self, database=db) -> None:
        self._db = database

    def _model(self, table: str):
        try:
            return TABLES[table]
        except KeyError:
            raise ValidationError(f"Unknown table: {table!r}") from None

    def _check_columns(self, model, fields) -> None:
        columns = set(model.__table__.columns.keys())
        unknown = sorted(set(fields) - columns)
        if unknown:
            raise ValidationError(
                f"Unknown column(s) for {model.__tablename__}: {', '.join(unknown)}"
            )

    def _commit(self, table: str) -> None:
        session = self._db.session
        try:
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            raise ConstraintViolation(f"{table}: {exc.orig}") from exc
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Store write on %s failed: %s", table, exc)
            raise UpstreamFailure(f"{table}: {exc}") from exc

    def _load(self, model, record_id: int):
        try:
            return self._db.session.get(model, record_id)
        except SQLAlchemyError as exc:
            self._db.session.rollback()
            raise UpstreamFailure(f"{model.__tablename__}: {exc}") from exc

    # --- writes ---
    def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        """Insert ``record`` and return it with its generated ``id``."""
        model = self._model(table)
        self._check_columns(model, record)
        obj = model(**record)
        self._db.session.add(obj)
        self._commit(table)
        return _row(obj)

    def update(self, table: str, record_id: int, patch: dict[str, Any]) -> dict[str, Any]:
        model = self._model(table)
        self._check_columns(model, patch)
        obj = self._load(model, record_id)
        if obj is None:
            raise NotFound(f"{table} {record_id} not found")
        for key, value in patch.items():
            setattr(obj, key, value)
        self._commit(table)
        return _row(obj)

    def delete(self, table: str, record_id: int) -> None:
        model = self._model(table)
        obj = self._load(model, record_id)
        if obj is None:
            raise NotFound(f"{table} {record_id} not found")
        self._db.session.delete(obj)
        self._commit(table)

    # --- reads ---
    def get(self, table: str, record_id: int) -> dict[str, Any] | None:
        obj = self._load(self._model(table), record_id)
        return _row(obj) if obj is not None else None

    def select_all(self, table: str) -> list[dict[str, Any]]:
        return self.select_where(table)

    def select_where(self, table: str, **criteria: Any) -> list[dict[str, Any]]:
        """Rows whose columns equal every keyword given, in id order."""
        model = self._model(table)
        self._check_columns(model, criteria)
        try:
            rows = model.query.filter_by(**criteria).order_by(model.id).all()
        except SQLAlchemyError as exc:
            self._db.session.rollback()
            raise UpstreamFailure(f"{table}: {exc}") from exc
        return [_row(r) for r in rows]
