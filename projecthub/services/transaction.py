# projecthub/services/transaction.py
"""
All-or-nothing execution of multi-record writes.

Every service mutation runs inside ``atomic``: the block's writes commit
together, or the session is rolled back and nothing is persisted.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from projecthub.errors import TransactionFailed

logger = logging.getLogger(__name__)


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """Commit on success; roll back on any exception.

    Storage-layer failures surface as ``TransactionFailed`` and are never
    retried. Domain errors raised inside the block propagate unchanged after
    the rollback.
    """
    try:
        yield db
        db.flush()
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Transaction rolled back after storage error: {exc}")
        raise TransactionFailed() from exc
    except Exception:
        db.rollback()
        raise
