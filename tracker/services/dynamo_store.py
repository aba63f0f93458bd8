"""
DynamoDB-backed table store.

Each collection is a DynamoDB table whose partition key is the collection's
key attribute (``deviceID`` for the device registry, ``readingID`` for the
location log). The boto3 resource is created on first use.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError

from ..core.errors import StorageError
from .table_store import TableStore

logger = logging.getLogger(__name__)


def to_dynamo(value: Any) -> Any:
    """DynamoDB rejects Python floats; numbers travel as Decimal."""
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: to_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_dynamo(v) for v in value]
    return value


def from_dynamo(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: from_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [from_dynamo(v) for v in value]
    return value


class DynamoTableStore(TableStore):
    """Table store on top of boto3's DynamoDB resource."""

    def __init__(
        self,
        key_schema: Mapping[str, str],
        region: str = "us-east-1",
        endpoint_url: Optional[str] = None,
        resource=None,
    ):
        super().__init__(key_schema)
        self.region = region
        self.endpoint_url = endpoint_url
        self._resource = resource
        self._tables: Dict[str, Any] = {}

    def _get_resource(self):
        """Lazy-load boto3 resource"""
        if self._resource is None:
            kwargs = {"region_name": self.region}
            if self.endpoint_url:
                kwargs["endpoint_url"] = self.endpoint_url
            self._resource = boto3.resource("dynamodb", **kwargs)
        return self._resource

    def _table(self, collection: str):
        self.key_attribute(collection)
        if collection not in self._tables:
            self._tables[collection] = self._get_resource().Table(collection)
        return self._tables[collection]

    def get(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        table = self._table(collection)
        try:
            response = table.get_item(Key={self.key_attribute(collection): key})
        except (BotoCoreError, ClientError) as e:
            logger.error("DynamoDB get_item failed for table %s: %s", collection, e)
            raise StorageError(f"failed to read from '{collection}'") from e
        item = response.get("Item")
        return from_dynamo(item) if item is not None else None

    def put(self, collection: str, record: Mapping[str, Any]) -> None:
        self.record_key(collection, record)
        table = self._table(collection)
        try:
            table.put_item(Item=to_dynamo(dict(record)))
        except (BotoCoreError, ClientError) as e:
            logger.error("DynamoDB put_item failed for table %s: %s", collection, e)
            raise StorageError(f"failed to write to '{collection}'") from e

    def scan(self, collection: str, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        table = self._table(collection)
        scan_kwargs: Dict[str, Any] = {}
        if filters:
            condition = None
            for attr, value in filters.items():
                clause = Attr(attr).eq(to_dynamo(value))
                condition = clause if condition is None else condition & clause
            scan_kwargs["FilterExpression"] = condition

        items: List[Dict[str, Any]] = []
        try:
            while True:
                response = table.scan(**scan_kwargs)
                items.extend(from_dynamo(item) for item in response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                scan_kwargs["ExclusiveStartKey"] = last_key
        except (BotoCoreError, ClientError) as e:
            logger.error("DynamoDB scan failed for table %s: %s", collection, e)
            raise StorageError(f"failed to scan '{collection}'") from e
        return items
