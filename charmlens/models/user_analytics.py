"""User analytics summary models for charmlens."""

from datetime import datetime
from enum import Enum
from typing import List
from pydantic import BaseModel, Field

from charmlens.models.analysis import CharmCategory


class SuggestionImpact(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class IndustryAnalysis(BaseModel):
    industry: str
    count: int
    percentage: float
    average_rating: float = Field(0.0, description="Mean rating over rated records only (0 if none)")


class UsagePattern(BaseModel):
    pattern: str
    frequency: int = Field(0, description="Number of records in the bucket")
    effectiveness: float = Field(0.0, description="Percentage of bucketed records rated 4 or higher")


class ImprovementSuggestion(BaseModel):
    category: CharmCategory
    current_usage: float = Field(..., description="Percentage of records using the category")
    recommended_usage: int
    suggestion: str
    impact: SuggestionImpact

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class UserAnalyticsSummary(BaseModel):
    """Dashboard summary of one user's history. Recomputed per request."""

    total_analyses: int = 0
    total_generated_points: int = 0
    average_session_duration: float = 0.0
    favorite_categories: List[CharmCategory] = Field(default_factory=list)
    industry_breakdown: List[IndustryAnalysis] = Field(default_factory=list)
    usage_patterns: List[UsagePattern] = Field(default_factory=list)
    improvement_suggestions: List[ImprovementSuggestion] = Field(default_factory=list)
    streak_days: int = 0
    last_analysis_date: datetime
