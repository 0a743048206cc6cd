"""Repository for per-user analysis history."""

import logging
from typing import List, Optional

from charmlens.database.store import KeyedStore
from charmlens.models.analysis import AnalysisHistoryRecord, HistoryRecordPatch
from charmlens.models.constants import HISTORY_CAP_PER_USER, HISTORY_COLLECTION_PREFIX

logger = logging.getLogger(__name__)


class AnalysisHistoryRepository:
    """Repository for AnalysisHistoryRecord collections (one per user, capped)."""

    def __init__(self, backend: KeyedStore, capacity: int = HISTORY_CAP_PER_USER):
        self.backend = backend
        self.capacity = capacity

    def _key(self, user_id: str) -> str:
        return f"{HISTORY_COLLECTION_PREFIX}{user_id}"

    def add(self, record: AnalysisHistoryRecord) -> AnalysisHistoryRecord:
        """Append a record to its owner's history, evicting the oldest beyond capacity."""
        self.backend.append(self._key(record.user_id), record.model_dump(mode="json"), self.capacity)
        logger.debug(f"Added history record {record.id} for user {record.user_id}")
        return record

    def get_all(self, user_id: str) -> List[AnalysisHistoryRecord]:
        """Get all records for a user in storage order (oldest first)."""
        return [AnalysisHistoryRecord.model_validate(item) for item in self.backend.get(self._key(user_id))]

    def get(self, user_id: str, record_id: str) -> Optional[AnalysisHistoryRecord]:
        """Get one record by ID for a specific user."""
        for record in self.get_all(user_id):
            if record.id == record_id:
                return record
        return None

    def update(self, user_id: str, record_id: str, patch: HistoryRecordPatch) -> Optional[AnalysisHistoryRecord]:
        """Apply rating / feedback / bookmark changes.

        Returns:
            The updated record, or None if the user has no such record
        """
        records = self.get_all(user_id)
        changes = patch.model_dump(exclude_unset=True)

        for index, record in enumerate(records):
            if record.id != record_id:
                continue
            updated = AnalysisHistoryRecord.model_validate({**record.model_dump(), **changes})
            records[index] = updated
            self.backend.set(self._key(user_id), [r.model_dump(mode="json") for r in records])
            logger.debug(f"Updated history record {record_id} for user {user_id}: {sorted(changes)}")
            return updated

        return None

    def delete(self, user_id: str, record_id: str) -> bool:
        """Delete one record. Returns False if the user has no such record."""
        records = self.get_all(user_id)
        remaining = [record for record in records if record.id != record_id]
        if len(remaining) == len(records):
            return False

        self.backend.set(self._key(user_id), [r.model_dump(mode="json") for r in remaining])
        logger.debug(f"Deleted history record {record_id} for user {user_id}")
        return True
