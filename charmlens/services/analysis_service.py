"""Generated-copy analysis service for charmlens.

Classifies and scores AI output, keeps each user's analysis history and builds
the per-user analytics summary.
"""

import logging
import uuid
from datetime import datetime, tzinfo
from typing import Callable, List, Optional, Sequence, Union

from pydantic import BaseModel

from charmlens.database.history_repository import AnalysisHistoryRepository
from charmlens.engine.classifier import classify_points
from charmlens.engine.clock import utc_now
from charmlens.engine.emotion import analyze_points
from charmlens.engine.tagging import extract_tags
from charmlens.engine.user_analytics import summarize_history
from charmlens.models.analysis import (
    AnalysisHistoryRecord,
    CharmCategoryAnalysis,
    GeneratedOutput,
    GeneratedPoint,
    HistoryRecordPatch,
)
from charmlens.models.constants import ANALYTICS_TIMEZONE
from charmlens.models.emotion import EmotionAnalysis
from charmlens.models.user_analytics import UserAnalyticsSummary

logger = logging.getLogger(__name__)


class ClassificationResult(BaseModel):
    categorization: List[CharmCategoryAnalysis]
    emotion: EmotionAnalysis


class AnalysisService:
    """Analysis history and user analytics for one persistence backend."""

    def __init__(
        self,
        history_repository: AnalysisHistoryRepository,
        tz: Union[str, tzinfo] = ANALYTICS_TIMEZONE,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.history_repository = history_repository
        self.tz = tz
        self.clock = clock

    def classify_and_score(self, points: Sequence[GeneratedPoint]) -> ClassificationResult:
        """Categorize points and compute their emotion analysis."""
        points = list(points or [])
        return ClassificationResult(
            categorization=classify_points(points),
            emotion=analyze_points(points),
        )

    def record_analysis(
        self,
        user_id: str,
        user_input: str,
        output: GeneratedOutput,
        session_duration_seconds: float,
    ) -> AnalysisHistoryRecord:
        """Build a history record for a completed generation and store it.

        The record is returned even if it could not be persisted; storage
        failures are logged only.
        """
        record = AnalysisHistoryRecord(
            id=str(uuid.uuid4()),
            user_id=user_id,
            timestamp=self.clock(),
            user_input=user_input,
            generated_output=output,
            categorization=classify_points(output.points),
            session_duration_seconds=max(0.0, session_duration_seconds),
            tags=extract_tags(user_input),
        )
        try:
            self.history_repository.add(record)
        except Exception as e:
            logger.error(f"Failed to save history record {record.id} for user {user_id}: {type(e).__name__}")
        return record

    def list_history(self, user_id: str) -> List[AnalysisHistoryRecord]:
        """User's history, newest first. Empty list if it can't be read."""
        try:
            records = self.history_repository.get_all(user_id)
        except Exception as e:
            logger.warning(f"Failed to load history for user {user_id}: {type(e).__name__}: {str(e)}")
            return []
        return sorted(records, key=lambda record: record.timestamp, reverse=True)

    def get_history_record(self, user_id: str, record_id: str) -> Optional[AnalysisHistoryRecord]:
        return self.history_repository.get(user_id, record_id)

    def get_user_analytics(
        self,
        user_id: str,
        now: Optional[datetime] = None,
        tz: Optional[Union[str, tzinfo]] = None,
    ) -> UserAnalyticsSummary:
        """Summarize a user's history. Empty summary if it can't be read."""
        now = now or self.clock()
        tz = tz or self.tz
        try:
            history = self.history_repository.get_all(user_id)
        except Exception as e:
            logger.warning(f"Failed to load history for user {user_id}: {type(e).__name__}: {str(e)}")
            history = []
        return summarize_history(history, now=now, tz=tz)

    def update_history_record(
        self, user_id: str, record_id: str, patch: HistoryRecordPatch
    ) -> Optional[AnalysisHistoryRecord]:
        """Owner-only rating / feedback / bookmark update. None if not found."""
        return self.history_repository.update(user_id, record_id, patch)

    def delete_history_record(self, user_id: str, record_id: str) -> bool:
        """Owner-only delete. False if not found."""
        return self.history_repository.delete(user_id, record_id)
