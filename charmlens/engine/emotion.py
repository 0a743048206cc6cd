"""Keyword-based emotion scoring for generated talking points.

Scoring per point:
1. Lower-case the point text and run it through EMOTION_RULES. Each positive or
   negative keyword present adds its weight (2) to its bucket; context keywords
   ("improvement", "response", ...) add 1 to the positive bucket.
2. Convert the point's buckets to percentages of that point's total signal. A
   point with no signal counts as 100% neutral.
3. Average the per-point percentages over all points and round half up.

No rule feeds the neutral bucket, so a point with any signal reports 0% neutral.
"""

import math
import re
from typing import Dict, List, Sequence

from charmlens.models.analysis import GeneratedPoint
from charmlens.models.emotion import (
    EmotionAnalysis,
    EmotionInsight,
    EmotionLabel,
    EmotionScore,
    InsightType,
)
from charmlens.models.constants import (
    KEYWORD_WEIGHT,
    CONTEXT_BOOST_WEIGHT,
    CONFIDENCE_PER_POINT,
    MIN_CONFIDENCE,
    MAX_CONFIDENCE,
    MAX_EMOTION_SUGGESTIONS,
)
from charmlens.engine.rules import KeywordRule, WeightedKeywordRule, accumulate, all_matches


POSITIVE_KEYWORDS = [
    "excellent", "outstanding", "wonderful", "attractive", "strength", "advantage",
    "benefit", "value", "success", "growth", "development", "innovat", "creative",
    "efficient", "effective", "reliab", "safety", "quality", "service", "support",
    "flexib", "adaptab", "sustainab", "eco-friendly",
    "優れている", "素晴らしい", "魅力的", "強み", "特徴", "利点", "価値", "成功",
    "成長", "発展", "革新", "創造的", "効率的", "効果的", "信頼性", "安全性",
    "品質", "サービス", "サポート", "柔軟性", "適応性", "持続性", "環境配慮",
]

NEGATIVE_KEYWORDS = [
    "problem", "issue", "challenge", "weakness", "shortage", "lack", "drawback",
    "risk", "concern", "anxiety", "difficult", "complex", "costly", "time-consuming",
    "hassle", "limitation", "constraint",
    "問題", "課題", "弱み", "不足", "欠点", "リスク", "懸念", "不安",
    "困難", "複雑", "高コスト", "時間がかかる", "手間", "制限", "制約",
]

# Each group boosts the positive bucket once, however many of its words occur.
CONTEXT_BOOSTS = [
    re.compile(r"improv|enhanc|strengthen|改善|向上|強化"),
    re.compile(r"respon|countermeasure|solution|solv|対応|対策|解決"),
]

EMOTION_RULES: List[WeightedKeywordRule] = (
    [WeightedKeywordRule(keyword, KEYWORD_WEIGHT, EmotionLabel.POSITIVE) for keyword in POSITIVE_KEYWORDS]
    + [WeightedKeywordRule(keyword, KEYWORD_WEIGHT, EmotionLabel.NEGATIVE) for keyword in NEGATIVE_KEYWORDS]
    + [WeightedKeywordRule(pattern, CONTEXT_BOOST_WEIGHT, EmotionLabel.POSITIVE) for pattern in CONTEXT_BOOSTS]
)

CATEGORY_TECHNOLOGY = "technology"
CATEGORY_CULTURE = "culture"
CATEGORY_BENEFITS = "benefits"
CATEGORY_GROWTH = "growth"
CATEGORY_ENVIRONMENT = "environment"
CATEGORY_OTHER = "other"

# Per-category subsets. English words match on word boundaries so "other"
# does not fire on "another" and "culture" does not fire on "agriculture".
EMOTION_CATEGORY_RULES: List[KeywordRule] = [
    KeywordRule(re.compile(r"\btechnolog(y|ies|ical)\b|技術"), CATEGORY_TECHNOLOGY),
    KeywordRule(re.compile(r"\bcultures?\b|文化"), CATEGORY_CULTURE),
    KeywordRule(re.compile(r"\bbenefits?\b|福利厚生"), CATEGORY_BENEFITS),
    KeywordRule(re.compile(r"\bgrowth\b|成長"), CATEGORY_GROWTH),
    KeywordRule(re.compile(r"\benvironments?\b|環境"), CATEGORY_ENVIRONMENT),
    KeywordRule(re.compile(r"\bother\b|その他"), CATEGORY_OTHER),
]

_BUCKETS = (EmotionLabel.POSITIVE, EmotionLabel.NEGATIVE, EmotionLabel.NEUTRAL)


def score_points(points: Sequence[GeneratedPoint], rules: Sequence[WeightedKeywordRule] = EMOTION_RULES) -> EmotionScore:
    """Compute the emotion distribution of a set of points.

    Args:
        points: Points to score. Empty input is 100% neutral with confidence 50.
        rules: Weighted keyword table

    Returns:
        EmotionScore with integer percentages
    """
    if not points:
        return EmotionScore(
            positive_pct=0,
            negative_pct=0,
            neutral_pct=100,
            confidence=MIN_CONFIDENCE,
            dominant=EmotionLabel.NEUTRAL,
        )

    sums = {bucket: 0.0 for bucket in _BUCKETS}
    for point in points:
        totals = accumulate(point.text.lower(), rules, buckets=_BUCKETS)
        signal = sum(totals.values())
        if signal > 0:
            for bucket in _BUCKETS:
                sums[bucket] += totals[bucket] / signal * 100
        else:
            sums[EmotionLabel.NEUTRAL] += 100

    count = len(points)
    positive = round_half_up(sums[EmotionLabel.POSITIVE] / count)
    negative = round_half_up(sums[EmotionLabel.NEGATIVE] / count)
    neutral = round_half_up(sums[EmotionLabel.NEUTRAL] / count)

    return EmotionScore(
        positive_pct=positive,
        negative_pct=negative,
        neutral_pct=neutral,
        confidence=min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, count * CONFIDENCE_PER_POINT)),
        dominant=_dominant(positive, negative, neutral),
    )


def analyze_points(
    points: Sequence[GeneratedPoint],
    category_rules: Sequence[KeywordRule] = EMOTION_CATEGORY_RULES,
) -> EmotionAnalysis:
    """Score points overall and per category, and derive suggestions.

    A point belongs to every category whose rule matches its lower-cased text.
    Categories with no matching points are left out of `by_category`, which
    follows table order.
    """
    overall = score_points(points)

    subsets: Dict[str, List[GeneratedPoint]] = {}
    for point in points:
        for category in all_matches(point.text.lower(), category_rules):
            subsets.setdefault(category, []).append(point)

    by_category: Dict[str, EmotionScore] = {}
    for rule in category_rules:
        if rule.target in subsets and rule.target not in by_category:
            by_category[rule.target] = score_points(subsets[rule.target])

    return EmotionAnalysis(
        overall=overall,
        by_category=by_category,
        suggestions=generate_suggestions(overall, by_category),
    )


def generate_suggestions(overall: EmotionScore, by_category: Dict[str, EmotionScore]) -> List[str]:
    """Threshold-based writing suggestions (at most five)."""
    suggestions: List[str] = []

    if overall.negative_pct > 50:
        suggestions.append(
            "Negative elements dominate: state the challenges clearly and present concrete countermeasures"
        )
    if overall.positive_pct < 30:
        suggestions.append("Emphasize positive elements and put the company's strengths up front")
    if overall.neutral_pct > 60:
        suggestions.append("The emotional impact is weak: consider more concrete and compelling wording")

    for category, score in by_category.items():
        if score.negative_pct > 60:
            suggestions.append(f"The {category} area needs work: consider concrete countermeasures")
        if score.positive_pct > 70:
            suggestions.append(f"{category.capitalize()} is a strength: consider promoting it more actively")

    return suggestions[:MAX_EMOTION_SUGGESTIONS]


def generate_insights(analysis: EmotionAnalysis) -> List[EmotionInsight]:
    """Dashboard highlights and warnings for an emotion analysis."""
    insights: List[EmotionInsight] = []
    overall = analysis.overall

    if overall.positive_pct > 70:
        insights.append(EmotionInsight(
            type=InsightType.HIGHLIGHT,
            message="The content leaves a very positive impression",
            confidence=overall.confidence,
        ))
    if overall.negative_pct > 60:
        insights.append(EmotionInsight(
            type=InsightType.WARNING,
            message="Negative elements dominate and need attention",
            confidence=overall.confidence,
        ))
    if overall.confidence < 70:
        insights.append(EmotionInsight(
            type=InsightType.IMPROVEMENT,
            message="Add more detail to raise the confidence of the analysis",
            confidence=overall.confidence,
        ))

    for category, score in analysis.by_category.items():
        if score.positive_pct > 80:
            insights.append(EmotionInsight(
                type=InsightType.HIGHLIGHT,
                message=f"The {category} area is rated very highly",
                confidence=score.confidence,
                category=category,
            ))
        if score.negative_pct > 70:
            insights.append(EmotionInsight(
                type=InsightType.WARNING,
                message=f"The {category} area urgently needs improvement",
                confidence=score.confidence,
                category=category,
            ))

    return insights


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives (1.5 -> 2, 2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def _dominant(positive: int, negative: int, neutral: int) -> EmotionLabel:
    if positive > negative and positive > neutral:
        return EmotionLabel.POSITIVE
    if negative > positive and negative > neutral:
        return EmotionLabel.NEGATIVE
    return EmotionLabel.NEUTRAL
