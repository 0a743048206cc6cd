"""Generated-copy analysis models for charmlens.

A generation produces a list of talking points. Each point is classified into
one of six fixed charm categories and the result is kept as a per-user
analysis history record.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple
from pydantic import BaseModel, Field


class GeneratedPoint(BaseModel):
    """One AI-generated talking point."""
    title: str = Field("", description="Short headline")
    description: str = Field("", description="Body text")

    @property
    def text(self) -> str:
        return f"{self.title} {self.description}"


class GeneratedOutput(BaseModel):
    """Output of the AI generation collaborator."""
    points: List[GeneratedPoint] = Field(default_factory=list)
    summary: Optional[str] = None


class CharmCategoryId(str, Enum):
    """Charm category identifiers (closed set)."""
    PRODUCT = "product"
    PEOPLE = "people"
    PROCESS = "process"
    PLATFORM = "platform"
    PARTNERSHIP = "partnership"
    POTENTIAL = "potential"


class StrengthTier(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class CharmCategory(BaseModel):
    """A taxonomy label for generated talking points."""

    id: CharmCategoryId
    name: str
    description: str
    color: str = Field(..., description="Visual hint for dashboards (hex color)")
    icon: str = Field(..., description="Visual hint for dashboards")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        frozen = True


CHARM_CATEGORIES: Tuple[CharmCategory, ...] = (
    CharmCategory(
        id=CharmCategoryId.PRODUCT,
        name="Product & Service",
        description="Appeal of the products and services offered",
        color="#3B82F6",
        icon="rocket",
    ),
    CharmCategory(
        id=CharmCategoryId.PEOPLE,
        name="People & Team",
        description="Capability and appeal of employees and teams",
        color="#10B981",
        icon="people",
    ),
    CharmCategory(
        id=CharmCategoryId.PROCESS,
        name="Process & Systems",
        description="Efficiency of workflows and internal systems",
        color="#F59E0B",
        icon="gear",
    ),
    CharmCategory(
        id=CharmCategoryId.PLATFORM,
        name="Platform & Technology",
        description="Appeal of the technology base and infrastructure",
        color="#8B5CF6",
        icon="laptop",
    ),
    CharmCategory(
        id=CharmCategoryId.PARTNERSHIP,
        name="Partnership",
        description="Value of alliances and cooperative relationships",
        color="#EF4444",
        icon="handshake",
    ),
    CharmCategory(
        id=CharmCategoryId.POTENTIAL,
        name="Potential & Future",
        description="Growth prospects and future possibilities",
        color="#EC4899",
        icon="star",
    ),
)

DEFAULT_CHARM_CATEGORY = CHARM_CATEGORIES[0]


def get_charm_category(category_id: str) -> CharmCategory:
    """Look up a charm category by id.

    Raises:
        KeyError: If the id is not one of the fixed categories
    """
    for category in CHARM_CATEGORIES:
        if category.id == category_id:
            return category
    raise KeyError(category_id)


class CharmCategoryAnalysis(BaseModel):
    """Points of one generation that fell into a single category."""

    category: CharmCategory
    matched_points: List[GeneratedPoint] = Field(default_factory=list)
    percentage_of_total: float = Field(..., ge=0.0, le=100.0)
    strength_tier: StrengthTier

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class AnalysisHistoryRecord(BaseModel):
    """A completed generation kept in the owning user's history."""

    id: str = Field(..., description="Unique history record identifier")
    user_id: str = Field(..., description="Owner of the record")
    timestamp: datetime = Field(..., description="When the generation completed (UTC)")
    user_input: str = Field(..., description="The fact the user submitted")
    generated_output: GeneratedOutput
    categorization: List[CharmCategoryAnalysis] = Field(default_factory=list)
    session_duration_seconds: float = Field(0.0, ge=0.0)
    user_rating: Optional[int] = Field(None, ge=1, le=5, description="Owner's rating (1-5)")
    user_feedback: Optional[str] = None
    tags: List[str] = Field(default_factory=list, description="Industry / company-size tags")
    bookmarked: bool = False


class HistoryRecordPatch(BaseModel):
    """Owner-editable fields of a history record. Unset fields are left alone."""

    user_rating: Optional[int] = Field(None, ge=1, le=5)
    user_feedback: Optional[str] = None
    bookmarked: Optional[bool] = None
