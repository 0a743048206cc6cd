"""Data models for charmlens."""

from charmlens.models.actor import Actor
from charmlens.models.audit_entry import (
    AuditActionKind,
    AuditSeverity,
    AuditEntryInput,
    AuditEntry,
    AuditFilter,
    AuditStats,
    ActionCount,
    ActorCount,
    SecurityAlertRule,
)
from charmlens.models.analysis import (
    GeneratedPoint,
    GeneratedOutput,
    CharmCategory,
    CharmCategoryId,
    CHARM_CATEGORIES,
    StrengthTier,
    CharmCategoryAnalysis,
    AnalysisHistoryRecord,
    HistoryRecordPatch,
)
from charmlens.models.emotion import EmotionLabel, EmotionScore, EmotionAnalysis, EmotionInsight, InsightType
from charmlens.models.user_analytics import (
    UserAnalyticsSummary,
    IndustryAnalysis,
    UsagePattern,
    ImprovementSuggestion,
    SuggestionImpact,
)

__all__ = [
    "Actor",
    "AuditActionKind",
    "AuditSeverity",
    "AuditEntryInput",
    "AuditEntry",
    "AuditFilter",
    "AuditStats",
    "ActionCount",
    "ActorCount",
    "SecurityAlertRule",
    "GeneratedPoint",
    "GeneratedOutput",
    "CharmCategory",
    "CharmCategoryId",
    "CHARM_CATEGORIES",
    "StrengthTier",
    "CharmCategoryAnalysis",
    "AnalysisHistoryRecord",
    "HistoryRecordPatch",
    "EmotionLabel",
    "EmotionScore",
    "EmotionAnalysis",
    "EmotionInsight",
    "InsightType",
    "UserAnalyticsSummary",
    "IndustryAnalysis",
    "UsagePattern",
    "ImprovementSuggestion",
    "SuggestionImpact",
]
