"""
Blob Store

Opaque string-keyed storage for the serialized dataset. One row per key,
overwritten wholesale on every write. Backed by SQLAlchemy so the same
code runs on local SQLite or a hosted Postgres.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, MetaData, String, Table, Text, create_engine, delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from config.settings import DATABASE_URL

logger = logging.getLogger(__name__)

metadata = MetaData()

kv_blobs = Table(
    "kv_blobs",
    metadata,
    Column("key", String(255), primary_key=True),
    Column("value", Text, nullable=False),
    Column("updated_at", DateTime(timezone=True)),
)


def make_engine(database_url: str = DATABASE_URL) -> Engine:
    """Create an engine; in-memory SQLite shares one connection across sessions."""
    if database_url.startswith("sqlite") and ":memory:" in database_url:
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(database_url)


class BlobStore:
    """
    Key-value blob storage.

    Usage:
        store = BlobStore("sqlite:///:memory:")
        store.put("eduplan_data_v4", payload)
        payload = store.get("eduplan_data_v4")
    """

    def __init__(self, database_url: str = DATABASE_URL, engine: Engine | None = None) -> None:
        self.engine = engine or make_engine(database_url)
        metadata.create_all(self.engine)

    def get(self, key: str) -> str | None:
        with self.engine.connect() as conn:
            row = conn.execute(select(kv_blobs.c.value).where(kv_blobs.c.key == key)).fetchone()
        return row[0] if row else None

    def put(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc)
        with self.engine.begin() as conn:
            exists = conn.execute(select(kv_blobs.c.key).where(kv_blobs.c.key == key)).fetchone()
            if exists:
                conn.execute(
                    kv_blobs.update()
                    .where(kv_blobs.c.key == key)
                    .values(value=value, updated_at=now)
                )
            else:
                conn.execute(kv_blobs.insert().values(key=key, value=value, updated_at=now))
        logger.debug(f"Persisted blob {key} ({len(value)} chars)")

    def delete(self, key: str) -> None:
        with self.engine.begin() as conn:
            conn.execute(delete(kv_blobs).where(kv_blobs.c.key == key))
