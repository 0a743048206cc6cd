"""Keyed collection storage and the audit EventStore.

`KeyedStore` is the persistence primitive: ordered collections of JSON-able
dicts addressed by a string key, with get / set / capped append. Two backends:

- InMemoryKeyedStore: process-local, guarded by a lock.
- SQLAlchemyKeyedStore: rows in `collection_items`; each append and its FIFO
  eviction commit in one transaction.

`EventStore` sits on top of a backend and owns the `audit.entries` collection.
"""

import copy
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from charmlens.database.models import CollectionItemDB
from charmlens.engine.clock import utc_now
from charmlens.models.audit_entry import AuditEntry, AuditEntryInput
from charmlens.models.constants import AUDIT_COLLECTION_KEY, AUDIT_RETENTION_CAP

logger = logging.getLogger(__name__)

Item = Dict[str, Any]


class KeyedStore(ABC):
    """Ordered collections of items keyed by a string."""

    @abstractmethod
    def get(self, key: str) -> List[Item]:
        """Return the collection's items in storage order (oldest first)."""

    @abstractmethod
    def set(self, key: str, items: List[Item]) -> None:
        """Replace the whole collection."""

    @abstractmethod
    def append(self, key: str, item: Item, capacity: Optional[int] = None) -> None:
        """Append an item, then drop the oldest items beyond `capacity`."""


class InMemoryKeyedStore(KeyedStore):
    """Process-local backend. Items are deep-copied in and out."""

    def __init__(self):
        self._collections: Dict[str, List[Item]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> List[Item]:
        with self._lock:
            return copy.deepcopy(self._collections.get(key, []))

    def set(self, key: str, items: List[Item]) -> None:
        with self._lock:
            self._collections[key] = copy.deepcopy(list(items))

    def append(self, key: str, item: Item, capacity: Optional[int] = None) -> None:
        with self._lock:
            items = self._collections.setdefault(key, [])
            items.append(copy.deepcopy(item))
            if capacity is not None and len(items) > capacity:
                del items[: len(items) - capacity]


class SQLAlchemyKeyedStore(KeyedStore):
    """Backend over the `collection_items` table."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> List[Item]:
        rows = (
            self.db.query(CollectionItemDB)
            .filter(CollectionItemDB.collection_key == key)
            .order_by(CollectionItemDB.seq)
            .all()
        )
        return [row.payload for row in rows]

    def set(self, key: str, items: List[Item]) -> None:
        try:
            self.db.query(CollectionItemDB).filter(
                CollectionItemDB.collection_key == key
            ).delete(synchronize_session=False)
            for item in items:
                self.db.add(_to_row(key, item))
            self.db.commit()
            logger.debug(f"Replaced collection {key} with {len(items)} items")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to replace collection {key}: {type(e).__name__}: {str(e)}")
            raise

    def append(self, key: str, item: Item, capacity: Optional[int] = None) -> None:
        try:
            self.db.add(_to_row(key, item))
            self.db.flush()
            if capacity is not None:
                self._evict_oldest(key, capacity)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to append to collection {key}: {type(e).__name__}: {str(e)}")
            raise

    def _evict_oldest(self, key: str, capacity: int) -> None:
        count = (
            self.db.query(func.count(CollectionItemDB.seq))
            .filter(CollectionItemDB.collection_key == key)
            .scalar()
        )
        overflow = count - capacity
        if overflow <= 0:
            return
        oldest = [
            row[0]
            for row in self.db.query(CollectionItemDB.seq)
            .filter(CollectionItemDB.collection_key == key)
            .order_by(CollectionItemDB.seq)
            .limit(overflow)
            .all()
        ]
        self.db.query(CollectionItemDB).filter(
            CollectionItemDB.seq.in_(oldest)
        ).delete(synchronize_session=False)
        logger.debug(f"Evicted {len(oldest)} oldest items from collection {key}")


def _to_row(key: str, item: Item) -> CollectionItemDB:
    return CollectionItemDB(collection_key=key, item_id=item.get("id"), payload=item)


class EventStore:
    """Append-only, capped audit log over a KeyedStore.

    `append` never raises; persistence errors are logged and dropped.
    """

    def __init__(
        self,
        backend: KeyedStore,
        capacity: int = AUDIT_RETENTION_CAP,
        key: str = AUDIT_COLLECTION_KEY,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.backend = backend
        self._capacity = capacity
        self.key = key
        self.clock = clock

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, entry_input: AuditEntryInput) -> None:
        """Stamp the entry with an id and timestamp and persist it."""
        try:
            entry = AuditEntry(
                **entry_input.model_dump(),
                id=str(uuid.uuid4()),
                timestamp=self.clock(),
            )
            self.backend.append(self.key, entry.model_dump(mode="json"), self._capacity)
            logger.debug(f"Recorded audit entry {entry.id}: {entry.action_kind} by {entry.actor_id}")
        except Exception as e:
            logger.error(f"Failed to record audit entry: {type(e).__name__}: {str(e)}")

    def list(self) -> List[AuditEntry]:
        """All retained entries in storage order (oldest first)."""
        return [AuditEntry.model_validate(item) for item in self.backend.get(self.key)]
