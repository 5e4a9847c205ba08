from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from guardquote.models import user  # noqa: F401
from guardquote.models.quote import Quote
from guardquote.repositories.base import storage_guard


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class QuoteRepository:
    """Quote rows, one short transaction per call."""

    def __init__(self, db: Session):
        self.db = db

    def insert(self, values: dict[str, Any]) -> int:
        now = _utcnow()
        quote = Quote(**values, created_at=now, updated_at=now)
        with storage_guard(self.db, "insert quote"):
            self.db.add(quote)
            self.db.commit()
        return quote.id

    def get_by_id(self, quote_id: int) -> Quote | None:
        # always a fresh SELECT: conditional writes and deletes bypass the identity map
        stmt = select(Quote).where(Quote.id == quote_id).execution_options(populate_existing=True)
        with storage_guard(self.db, "load quote"):
            return self.db.scalars(stmt).first()

    def list_by_owner(self, owner_id: int, newest_first: bool = False) -> list[Quote]:
        order = (Quote.created_at.desc(), Quote.id.desc()) if newest_first else (Quote.created_at.asc(), Quote.id.asc())
        stmt = select(Quote).where(Quote.user_id == owner_id).order_by(*order)
        with storage_guard(self.db, "list quotes"):
            return list(self.db.scalars(stmt).all())

    def update_by_id(self, quote_id: int, values: dict[str, Any], expected_status: str | None = None) -> int:
        """Single UPDATE statement; with ``expected_status`` it only applies while
        the stored status still matches. Returns the affected row count."""
        stmt = update(Quote).where(Quote.id == quote_id)
        if expected_status is not None:
            stmt = stmt.where(Quote.status == expected_status)
        stmt = stmt.values(**values, updated_at=_utcnow()).execution_options(synchronize_session=False)
        with storage_guard(self.db, "update quote"):
            result = self.db.execute(stmt)
            self.db.commit()
        return result.rowcount

    def delete_by_id(self, quote_id: int, owner_id: int | None = None) -> int:
        stmt = delete(Quote).where(Quote.id == quote_id)
        if owner_id is not None:
            stmt = stmt.where(Quote.user_id == owner_id)
        with storage_guard(self.db, "delete quote"):
            result = self.db.execute(stmt.execution_options(synchronize_session="fetch"))
            self.db.commit()
        return result.rowcount
