"""
Chat history stores: append-only records with a full-scan read.
The SQLite store is durable; the in-memory store serves development and tests.
"""

import sqlite3
import threading
from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple

from .db import get_db, init_db, health_check
from .errors import PersistenceFailure, EmbeddingCodecError
from ..util.logging import logger
from ..vector.codec import serialize, deserialize
from ..vector.similarity import rank
from ..vector.types import InteractionRecord


class IChatHistoryStore(ABC):
    """Abstract interface for chat history persistence."""

    @abstractmethod
    def append(self, record: InteractionRecord) -> InteractionRecord:
        """Store a new record and return it with its assigned id."""
        pass

    @abstractmethod
    def scan_all(self) -> Sequence[InteractionRecord]:
        """Return every stored record in insertion order."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Number of stored records."""
        pass

    def healthy(self) -> bool:
        return True

    @property
    def name(self) -> str:
        return self.__class__.__name__


class SQLiteChatHistoryStore(IChatHistoryStore):
    """Chat history persisted to the chat_history table."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        try:
            init_db(db_path)
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Cannot initialize chat history at {db_path}: {e}", stage="init") from e

    def _row_to_record(self, row: Tuple) -> InteractionRecord:
        record_id, prompt, response, embedding_text = row
        return InteractionRecord(
            id=record_id,
            prompt=prompt,
            response=response,
            embedding=deserialize(embedding_text)
        )

    def append(self, record: InteractionRecord) -> InteractionRecord:
        """Insert a record; the returned copy carries the row id."""
        try:
            embedding_text = serialize(record.embedding)
        except EmbeddingCodecError as e:
            logger.log_store_operation("append", self.name, {"error": e.detail}, status="failed")
            raise PersistenceFailure(f"Cannot store embedding: {e.detail}", stage="append") from e

        try:
            with get_db(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "INSERT INTO chat_history (prompt, response, embedding) VALUES (?, ?, ?)",
                    (record.prompt, record.response, embedding_text)
                )
                conn.commit()
                record_id = cursor.lastrowid
        except sqlite3.Error as e:
            logger.log_store_operation("append", self.name, {"error": str(e)}, status="failed")
            raise PersistenceFailure(f"Failed to save chat history: {e}", stage="append") from e

        logger.log_store_operation("append", self.name, {"record_id": record_id, "dimension": record.dimension})
        return record.with_id(record_id)

    def scan_all(self) -> List[InteractionRecord]:
        """Read the whole table in insertion order."""
        try:
            with get_db(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT id, prompt, response, embedding FROM chat_history ORDER BY id")
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            logger.log_store_operation("scan", self.name, {"error": str(e)}, status="failed")
            raise PersistenceFailure(f"Failed to read chat history: {e}", stage="scan") from e

        try:
            records = [self._row_to_record(row) for row in rows]
        except EmbeddingCodecError as e:
            raise PersistenceFailure(f"Corrupt embedding in chat history: {e.detail}", stage="scan") from e

        logger.log_store_operation("scan", self.name, {"records": len(records)})
        return records

    def count(self) -> int:
        try:
            with get_db(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT COUNT(*) FROM chat_history")
                return cursor.fetchone()[0]
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Failed to count chat history: {e}", stage="count") from e

    def healthy(self) -> bool:
        return health_check(self.db_path)


class InMemoryChatHistoryStore(IChatHistoryStore):
    """Thread-safe in-memory chat history."""

    def __init__(self):
        self._records: List[InteractionRecord] = []
        self._next_id = 1
        self._lock = threading.Lock()

    def append(self, record: InteractionRecord) -> InteractionRecord:
        with self._lock:
            stored = record.with_id(self._next_id)
            self._next_id += 1
            self._records.append(stored)

        logger.log_store_operation("append", self.name, {"record_id": stored.id, "dimension": stored.dimension})
        return stored

    def scan_all(self) -> Tuple[InteractionRecord, ...]:
        # Snapshot; appends made after this call are not visible in it
        with self._lock:
            return tuple(self._records)

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def clear(self) -> None:
        """Remove all records (administrative/test use)."""
        with self._lock:
            self._records.clear()


def find_nearest_neighbors(store: IChatHistoryStore, query_embedding: Sequence[float], k: int) -> List[InteractionRecord]:
    """
    Find the k stored interactions most similar to the query embedding.

    Reads every record and ranks them by cosine similarity in memory.
    """
    return rank(query_embedding, store.scan_all(), k)
