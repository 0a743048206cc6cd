"""Emotion (sentiment) models for charmlens."""

from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class EmotionLabel(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class InsightType(str, Enum):
    HIGHLIGHT = "highlight"
    WARNING = "warning"
    IMPROVEMENT = "improvement"


class EmotionScore(BaseModel):
    """Positive/negative/neutral distribution over a set of points.

    The three percentages sum to 100 within integer rounding (+/- 1).
    """

    positive_pct: int = Field(0, ge=0, le=100)
    negative_pct: int = Field(0, ge=0, le=100)
    neutral_pct: int = Field(100, ge=0, le=100)
    confidence: int = Field(50, ge=0, le=100)
    dominant: EmotionLabel = EmotionLabel.NEUTRAL

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class EmotionAnalysis(BaseModel):
    overall: EmotionScore
    by_category: Dict[str, EmotionScore] = Field(default_factory=dict)
    suggestions: List[str] = Field(default_factory=list, max_length=5)


class EmotionInsight(BaseModel):
    """Dashboard insight derived from an emotion analysis."""

    type: InsightType
    message: str
    confidence: int
    category: Optional[str] = None

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
