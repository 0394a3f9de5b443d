"""
Embedded local database.

The whole SQLite database lives in memory and is persisted as one base64
encoded image in a durable key-value slot. On first use the image is
loaded back; when there is none, the schema is created, seeded from the
fixtures and saved right away.
"""

import os
import base64
import logging
import sqlite3
import threading
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool
from dotenv import load_dotenv

from utils.errors import DatabaseInitError
from utils.local_storage import FileKeyValueStore

load_dotenv()

logger = logging.getLogger("local_db")

LOCAL_STORAGE_DIR = os.getenv("LOCAL_STORAGE_DIR", ".unistay")
LOCAL_DB_STORAGE_KEY = os.getenv("LOCAL_DB_STORAGE_KEY", "unistay_sqlite_db")


class Base(DeclarativeBase):
    pass


class LocalDatabase:
    """Once-initialized handle on the embedded database.

    ``get_engine`` opens the database at most once per handle. A failed
    start is remembered and raised again to every later caller until
    ``reset`` is called.
    """

    def __init__(self, storage, storage_key: str = LOCAL_DB_STORAGE_KEY):
        self.storage = storage
        self.storage_key = storage_key
        self._lock = threading.Lock()
        self._connection: sqlite3.Connection | None = None
        self._engine: Engine | None = None
        self._sessionmaker = None
        self._error: Exception | None = None

    @property
    def initialized(self) -> bool:
        return self._engine is not None

    def get_engine(self) -> Engine:
        if self._engine is not None:
            return self._engine
        with self._lock:
            if self._error is not None:
                raise DatabaseInitError(f"Database initialization failed: {self._error}") from self._error
            if self._engine is None:
                try:
                    self._open()
                except Exception as e:
                    logger.error("Database initialization failed: %s", e)
                    self._error = e
                    raise DatabaseInitError(f"Database initialization failed: {e}") from e
        return self._engine

    def _open(self) -> None:
        from models.models_local import seed_database

        saved = self.storage.get(self.storage_key)
        connection = sqlite3.connect(":memory:", check_same_thread=False)
        try:
            if saved:
                connection.deserialize(base64.b64decode(saved, validate=True))
            engine = create_engine("sqlite://", creator=lambda: connection, poolclass=StaticPool)
            maker = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
            # also adds tables introduced after the image was saved
            Base.metadata.create_all(bind=engine)
            if saved:
                logger.info("Loaded local database image from '%s'", self.storage_key)
            else:
                db = maker()
                try:
                    seed_database(db)
                    db.commit()
                except Exception:
                    db.rollback()
                    raise
                finally:
                    db.close()
                self._write_image(connection)
                logger.info("Created and seeded new local database")
        except Exception:
            connection.close()
            raise
        self._connection = connection
        self._sessionmaker = maker
        self._engine = engine

    def _write_image(self, connection: sqlite3.Connection) -> None:
        encoded = base64.b64encode(connection.serialize()).decode("ascii")
        self.storage.set(self.storage_key, encoded)

    def export(self) -> bytes:
        self.get_engine()
        return self._connection.serialize()

    def save(self) -> None:
        """Overwrite the stored image with the current database."""
        self.get_engine()
        self._write_image(self._connection)

    @contextmanager
    def session(self):
        self.get_engine()
        db = self._sessionmaker()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def reset(self) -> None:
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
            if self._connection is not None:
                self._connection.close()
            self._connection = None
            self._engine = None
            self._sessionmaker = None
            self._error = None


_local_database: LocalDatabase | None = None


def get_local_database() -> LocalDatabase:
    global _local_database
    if _local_database is None:
        _local_database = LocalDatabase(FileKeyValueStore(LOCAL_STORAGE_DIR))
    return _local_database
