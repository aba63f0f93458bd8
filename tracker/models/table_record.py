"""
Generic record row backing the SQL table store.

Each row is one item of a named collection (device registry or location log),
addressed by its key attribute. The autoincrement id preserves insertion order
for scans.
"""
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, JSON, UniqueConstraint, Index
from ..db import Base


class TableRecord(Base):
    __tablename__ = "table_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    collection = Column(String(128), nullable=False)
    key = Column(String(255), nullable=False)

    # Full item, key attribute included
    data = Column(JSON, nullable=False)

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)

    __table_args__ = (
        UniqueConstraint("collection", "key", name="uq_table_record_collection_key"),
        Index("idx_table_record_collection", "collection"),
    )
