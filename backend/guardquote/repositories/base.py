import logging
from contextlib import contextmanager

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.orm import Session

from guardquote.core.errors import StorageUnavailable

logger = logging.getLogger(__name__)


@contextmanager
def storage_guard(db: Session, action: str):
    """Turn connectivity failures into StorageUnavailable. No retries here."""
    try:
        yield
    except (OperationalError, InterfaceError) as exc:
        db.rollback()
        logger.error("[storage] %s failed: %s", action, exc)
        raise StorageUnavailable("Storage is unavailable, try again later") from exc
