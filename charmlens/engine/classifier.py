"""Charm category classification for generated talking points.

Each point's title and description are lower-cased and run through an ordered
keyword table; the first matching rule decides the category. Points that match
nothing go to the default category (Product & Service).
"""

import re
from collections import OrderedDict
from typing import Dict, List, Sequence

from charmlens.models.analysis import (
    CHARM_CATEGORIES,
    DEFAULT_CHARM_CATEGORY,
    CharmCategoryAnalysis,
    CharmCategoryId,
    GeneratedPoint,
    StrengthTier,
)
from charmlens.models.enum_utils import enum_to_value
from charmlens.models.constants import STRENGTH_HIGH_MIN_PCT, STRENGTH_MEDIUM_MIN_PCT
from charmlens.engine.rules import KeywordRule, first_match


def _keywords(category: CharmCategoryId, *patterns) -> List[KeywordRule]:
    return [KeywordRule(pattern=pattern, target=category) for pattern in patterns]


# Ordered: earlier rows win when a point mentions several categories.
CLASSIFICATION_RULES: List[KeywordRule] = [
    *_keywords(
        CharmCategoryId.PRODUCT,
        "service", re.compile(r"\bproducts?\b"), "offering",
        "サービス", "商品", "プロダクト",
    ),
    *_keywords(
        CharmCategoryId.PEOPLE,
        "team", "talent", "employee", "staff", "expertise",
        "チーム", "人材", "従業員", "専門性",
    ),
    *_keywords(
        CharmCategoryId.PROCESS,
        "process", "efficien", "workflow", "mechanism", "system",
        "プロセス", "効率", "仕組み", "システム",
    ),
    *_keywords(
        CharmCategoryId.PLATFORM,
        "technolog", "platform", "infrastructure", re.compile(r"\bai\b"),
        "技術", "プラットフォーム", "インフラ",
    ),
    *_keywords(
        CharmCategoryId.PARTNERSHIP,
        "partner", "alliance", "cooperat", "collaborat",
        "パートナー", "提携", "協力", "連携",
    ),
    *_keywords(
        CharmCategoryId.POTENTIAL,
        "growth", "future", "potential", "possibilit",
        "成長", "将来", "可能性", "未来",
    ),
]


def categorize_point(point: GeneratedPoint, rules: Sequence[KeywordRule] = CLASSIFICATION_RULES) -> str:
    """Return the category id for a single point."""
    text = point.text.lower()
    return first_match(text, rules, default=DEFAULT_CHARM_CATEGORY.id)


def classify_points(
    points: Sequence[GeneratedPoint],
    rules: Sequence[KeywordRule] = CLASSIFICATION_RULES,
) -> List[CharmCategoryAnalysis]:
    """Group points by charm category.

    Args:
        points: Generated points (may be empty)
        rules: Ordered keyword table

    Returns:
        One analysis per category with at least one matched point, in the fixed
        category order. Percentages of the returned entries sum to 100.
        Empty input yields an empty list.
    """
    if not points:
        return []

    grouped: Dict[str, List[GeneratedPoint]] = OrderedDict(
        (enum_to_value(category.id), []) for category in CHARM_CATEGORIES
    )
    for point in points:
        grouped[enum_to_value(categorize_point(point, rules))].append(point)

    total = len(points)
    results: List[CharmCategoryAnalysis] = []
    for category in CHARM_CATEGORIES:
        matched = grouped[enum_to_value(category.id)]
        if not matched:
            continue
        percentage = len(matched) / total * 100
        results.append(
            CharmCategoryAnalysis(
                category=category,
                matched_points=matched,
                percentage_of_total=percentage,
                strength_tier=strength_tier(percentage),
            )
        )
    return results


def strength_tier(percentage: float) -> StrengthTier:
    """Bucket a category's share of points into high / medium / low."""
    if percentage >= STRENGTH_HIGH_MIN_PCT:
        return StrengthTier.HIGH
    if percentage >= STRENGTH_MEDIUM_MIN_PCT:
        return StrengthTier.MEDIUM
    return StrengthTier.LOW
