"""
SQLAlchemy-backed table store.

Every collection lives in the shared ``table_records`` table; a record is one
row keyed by (collection, key) with the item itself in a JSON column.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..core.errors import StorageError
from ..models.table_record import TableRecord
from .table_store import TableStore, matches

logger = logging.getLogger(__name__)


class SqlTableStore(TableStore):
    """Table store on top of a SQLAlchemy session factory."""

    def __init__(self, key_schema: Mapping[str, str], session_factory):
        super().__init__(key_schema)
        self._session_factory = session_factory

    def get(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        self.key_attribute(collection)
        db = self._session_factory()
        try:
            row = db.query(TableRecord).filter(
                TableRecord.collection == collection,
                TableRecord.key == key,
            ).first()
            return dict(row.data) if row is not None else None
        except SQLAlchemyError as e:
            logger.error("SQL get failed for %s: %s", collection, e)
            raise StorageError(f"failed to read from '{collection}'") from e
        finally:
            db.close()

    def put(self, collection: str, record: Mapping[str, Any]) -> None:
        key = self.record_key(collection, record)
        db = self._session_factory()
        try:
            row = db.query(TableRecord).filter(
                TableRecord.collection == collection,
                TableRecord.key == key,
            ).first()
            if row is None:
                db.add(TableRecord(collection=collection, key=key, data=dict(record)))
            else:
                row.data = dict(record)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("SQL put failed for %s: %s", collection, e)
            raise StorageError(f"failed to write to '{collection}'") from e
        finally:
            db.close()

    def scan(self, collection: str, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        self.key_attribute(collection)
        db = self._session_factory()
        try:
            rows = (
                db.query(TableRecord)
                .filter(TableRecord.collection == collection)
                .order_by(TableRecord.id)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error("SQL scan failed for %s: %s", collection, e)
            raise StorageError(f"failed to scan '{collection}'") from e
        finally:
            db.close()
        # Filter applied after the read, like a DynamoDB scan filter expression
        return [dict(row.data) for row in rows if matches(row.data, filters)]
