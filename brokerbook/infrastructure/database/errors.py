"""Translation of driver / SQLAlchemy failures into domain errors."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from brokerbook.domain.exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Re-raise any SQLAlchemy error inside the block as StorageUnavailableError."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Database error while trying to %s: %s", action, exc)
        raise StorageUnavailableError(action, type(exc).__name__) from exc
