import functools
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rota_engine.core.exceptions import BusinessRuleError, DatastoreUnavailableError
from rota_engine.core.schemas import EngineResult
from rota_engine.services.notification import ChangeFeed


def engine_operation(func):
    """
    Wrap a service method so it returns an EngineResult.
    Business rejections become EngineResult.fail(); datastore faults roll the
    session back and surface as DatastoreUnavailableError.
    """
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return EngineResult.ok(func(self, *args, **kwargs))
        except BusinessRuleError as exc:
            self._logger.info(
                f"{func.__name__} rejected: {exc.error_code}",
                extra={"code": exc.error_code, "details": exc.details}
            )
            return EngineResult.from_error(exc)
        except SQLAlchemyError as exc:
            self.db.rollback()
            self._logger.error(f"{func.__name__} failed against the datastore: {exc}", exc_info=True)
            raise DatastoreUnavailableError() from exc
    return wrapper


class BaseService:
    """Holds the request-scoped session and change feed shared by engine services."""

    def __init__(self, db: Session, feed: Optional[ChangeFeed] = None):
        self.db = db
        self.feed = feed or ChangeFeed()
        self._logger = logging.getLogger(self.__class__.__module__)

    def _commit(self, *records):
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        for record in records:
            self.db.refresh(record)

    def _notify(self, table: str, action: str, company_id: int, record_id: Optional[int] = None):
        self.feed.notify(table, action, company_id, record_id)
