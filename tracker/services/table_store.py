"""
Storage collaborator abstraction.

A table store holds named collections of dict records, each addressed by a
key attribute declared per collection. The device registry and location log
only ever use get/put/scan, so any key-value or table backend can sit behind
this interface:

- InMemoryTableStore: process-local, used for tests and local runs
- SqlTableStore (sql_store.py): SQLAlchemy, one generic record table
- DynamoTableStore (dynamo_store.py): one DynamoDB table per collection

All operations are synchronous and raise StorageError on backend failure.
"""
import copy
import logging
import threading
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Any, Dict, List, Mapping, Optional

from ..core.errors import StorageError

logger = logging.getLogger(__name__)


class TableStore(ABC):
    """Abstract base class for storage collaborators"""

    def __init__(self, key_schema: Mapping[str, str]):
        """
        Args:
            key_schema: collection name -> key attribute of its records
        """
        self.key_schema = dict(key_schema)

    def key_attribute(self, collection: str) -> str:
        try:
            return self.key_schema[collection]
        except KeyError:
            raise StorageError(f"unknown collection '{collection}'")

    def record_key(self, collection: str, record: Mapping[str, Any]) -> str:
        """Extract the key of ``record``, which must carry its key attribute."""
        attribute = self.key_attribute(collection)
        key = record.get(attribute)
        if not isinstance(key, str) or not key:
            raise StorageError(f"record for '{collection}' is missing key attribute '{attribute}'")
        return key

    @abstractmethod
    def get(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        """Fetch one record by key, or None if absent."""

    @abstractmethod
    def put(self, collection: str, record: Mapping[str, Any]) -> None:
        """Insert (or replace) the record stored under its key."""

    @abstractmethod
    def scan(self, collection: str, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        """All records whose attributes equal every value in ``filters``."""


def matches(record: Mapping[str, Any], filters: Optional[Mapping[str, Any]]) -> bool:
    if not filters:
        return True
    return all(attr in record and record[attr] == value for attr, value in filters.items())


class InMemoryTableStore(TableStore):
    """Table store kept in process memory. Scans return insertion order."""

    def __init__(self, key_schema: Mapping[str, str]):
        super().__init__(key_schema)
        self._collections: Dict[str, "OrderedDict[str, Dict[str, Any]]"] = {
            name: OrderedDict() for name in self.key_schema
        }
        self._lock = threading.RLock()

    def get(self, collection, key):
        self.key_attribute(collection)
        with self._lock:
            record = self._collections[collection].get(key)
            return copy.deepcopy(record) if record is not None else None

    def put(self, collection, record):
        key = self.record_key(collection, record)
        with self._lock:
            self._collections[collection][key] = copy.deepcopy(dict(record))

    def scan(self, collection, filters=None):
        self.key_attribute(collection)
        with self._lock:
            return [
                copy.deepcopy(record)
                for record in self._collections[collection].values()
                if matches(record, filters)
            ]

    def count(self, collection: str) -> int:
        with self._lock:
            return len(self._collections[collection])


def build_table_store(config=None) -> TableStore:
    """Create the table store selected by STORAGE_BACKEND."""
    from ..core.config import settings

    config = config or settings
    backend = config.STORAGE_BACKEND

    if backend == "memory":
        logger.info("Using in-memory table store")
        return InMemoryTableStore(config.key_schema)

    if backend == "sql":
        from sqlalchemy.orm import sessionmaker
        from .sql_store import SqlTableStore
        from ..db import get_engine, get_session_local, init_db, make_engine

        if config is settings:
            engine = get_engine()
            session_factory = get_session_local()
        else:
            engine = make_engine(config.DATABASE_URL)
            session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        init_db(engine)
        logger.info("Using SQL table store")
        return SqlTableStore(config.key_schema, session_factory)

    if backend == "dynamodb":
        from .dynamo_store import DynamoTableStore

        logger.info("Using DynamoDB table store (region: %s)", config.AWS_REGION)
        return DynamoTableStore(
            config.key_schema,
            region=config.AWS_REGION,
            endpoint_url=config.DYNAMODB_ENDPOINT_URL or None,
        )

    raise ValueError(f"Unsupported STORAGE_BACKEND: {backend}")
