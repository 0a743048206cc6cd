"""Longitudinal user analytics for charmlens.

Folds a user's analysis history into a dashboard summary: totals, favorite
charm categories, per-tag breakdown, time-of-day usage patterns, improvement
suggestions and the current daily streak.

"now" and the timezone are explicit parameters. Day boundaries (streaks) and
hours (usage patterns) are evaluated in that timezone.
"""

from datetime import date, datetime, timedelta, tzinfo
from typing import Dict, List, Optional, Sequence, Set, Union

from charmlens.models.analysis import CHARM_CATEGORIES, AnalysisHistoryRecord, CharmCategory, get_charm_category
from charmlens.models.enum_utils import enum_to_value
from charmlens.models.user_analytics import (
    ImprovementSuggestion,
    IndustryAnalysis,
    SuggestionImpact,
    UsagePattern,
    UserAnalyticsSummary,
)
from charmlens.models.constants import (
    FAVORITE_CATEGORIES_LIMIT,
    EFFECTIVE_RATING_MIN,
    STREAK_MAX_DAYS,
)
from charmlens.engine.clock import ensure_utc, resolve_timezone, utc_now


PATTERN_MORNING = "morning"
PATTERN_AFTERNOON = "afternoon"
PATTERN_EVENING = "evening"
PATTERN_WEEKEND = "weekend"

# (name, start hour inclusive, end hour exclusive); hours 0-6 fall in no bucket
TIME_OF_DAY_BUCKETS = [
    (PATTERN_MORNING, 6, 12),
    (PATTERN_AFTERNOON, 12, 18),
    (PATTERN_EVENING, 18, 24),
]

# (usage below this percent, impact, recommended usage percent), checked in order
IMPROVEMENT_THRESHOLDS = [
    (10, SuggestionImpact.HIGH, 15),
    (20, SuggestionImpact.MEDIUM, 25),
]

_IMPACT_ORDER = {
    SuggestionImpact.HIGH.value: 3,
    SuggestionImpact.MEDIUM.value: 2,
    SuggestionImpact.LOW.value: 1,
}


def summarize_history(
    history: Sequence[AnalysisHistoryRecord],
    now: Optional[datetime] = None,
    tz: Optional[Union[str, tzinfo]] = None,
) -> UserAnalyticsSummary:
    """Build the analytics summary for one user's history.

    Args:
        history: The user's records (any order)
        now: Reference time for the streak (defaults to current UTC time)
        tz: Timezone name or tzinfo for day/hour boundaries (defaults to UTC)

    Returns:
        UserAnalyticsSummary. Empty history gives an all-zero summary whose
        last_analysis_date is `now`.
    """
    now = ensure_utc(now) if now else utc_now()
    zone = resolve_timezone(tz)

    if not history:
        return UserAnalyticsSummary(last_analysis_date=now)

    total = len(history)
    point_counts = category_point_counts(history)
    record_counts = category_record_counts(history)

    return UserAnalyticsSummary(
        total_analyses=total,
        total_generated_points=sum(len(record.generated_output.points) for record in history),
        average_session_duration=sum(record.session_duration_seconds for record in history) / total,
        favorite_categories=favorite_categories(point_counts),
        industry_breakdown=industry_breakdown(history),
        usage_patterns=usage_patterns(history, zone),
        improvement_suggestions=improvement_suggestions(record_counts, total),
        streak_days=streak_days(history, now, zone),
        last_analysis_date=max(ensure_utc(record.timestamp) for record in history),
    )


def category_point_counts(history: Sequence[AnalysisHistoryRecord]) -> Dict[str, int]:
    """Total matched points per category id across all records."""
    counts = {enum_to_value(category.id): 0 for category in CHARM_CATEGORIES}
    for record in history:
        for analysis in record.categorization:
            category_id = enum_to_value(analysis.category.id)
            counts[category_id] = counts.get(category_id, 0) + len(analysis.matched_points)
    return counts


def category_record_counts(history: Sequence[AnalysisHistoryRecord]) -> Dict[str, int]:
    """Number of records using each category id (at least one matched point)."""
    counts = {enum_to_value(category.id): 0 for category in CHARM_CATEGORIES}
    for record in history:
        used = {
            enum_to_value(analysis.category.id)
            for analysis in record.categorization
            if analysis.matched_points
        }
        for category_id in used:
            counts[category_id] = counts.get(category_id, 0) + 1
    return counts


def favorite_categories(point_counts: Dict[str, int]) -> List[CharmCategory]:
    """Top categories by matched-point count; ties keep the fixed category order."""
    ranked_ids = sorted(
        (enum_to_value(category.id) for category in CHARM_CATEGORIES),
        key=lambda category_id: point_counts.get(category_id, 0),
        reverse=True,
    )
    return [get_charm_category(category_id) for category_id in ranked_ids[:FAVORITE_CATEGORIES_LIMIT]]


def industry_breakdown(history: Sequence[AnalysisHistoryRecord]) -> List[IndustryAnalysis]:
    """Per-tag count, share of all records and average rating (rated records only)."""
    total = len(history)
    counts: Dict[str, int] = {}
    ratings: Dict[str, List[int]] = {}

    for record in history:
        for tag in record.tags:
            counts[tag] = counts.get(tag, 0) + 1
            ratings.setdefault(tag, [])
            if record.user_rating is not None:
                ratings[tag].append(record.user_rating)

    return [
        IndustryAnalysis(
            industry=tag,
            count=count,
            percentage=count / total * 100,
            average_rating=sum(ratings[tag]) / len(ratings[tag]) if ratings[tag] else 0.0,
        )
        for tag, count in counts.items()
    ]


def usage_patterns(history: Sequence[AnalysisHistoryRecord], zone: tzinfo) -> List[UsagePattern]:
    """Frequency and effectiveness for morning / afternoon / evening / weekend.

    Effectiveness is the percentage of a bucket's records rated 4 or higher.
    """
    frequency = {name: 0 for name, _, _ in TIME_OF_DAY_BUCKETS}
    frequency[PATTERN_WEEKEND] = 0
    effective = dict.fromkeys(frequency, 0)

    for record in history:
        local = ensure_utc(record.timestamp).astimezone(zone)
        is_effective = record.user_rating is not None and record.user_rating >= EFFECTIVE_RATING_MIN

        buckets = [name for name, start, end in TIME_OF_DAY_BUCKETS if start <= local.hour < end]
        # weekday(): Monday=0 ... Saturday=5, Sunday=6
        if local.weekday() >= 5:
            buckets.append(PATTERN_WEEKEND)

        for name in buckets:
            frequency[name] += 1
            if is_effective:
                effective[name] += 1

    return [
        UsagePattern(
            pattern=name,
            frequency=frequency[name],
            effectiveness=effective[name] / frequency[name] * 100 if frequency[name] else 0.0,
        )
        for name in frequency
    ]


def improvement_suggestions(record_counts: Dict[str, int], total_records: int) -> List[ImprovementSuggestion]:
    """Suggest under-used categories, highest impact first."""
    suggestions: List[ImprovementSuggestion] = []
    if total_records <= 0:
        return suggestions

    for category in CHARM_CATEGORIES:
        usage = record_counts.get(enum_to_value(category.id), 0) / total_records * 100
        for limit, impact, recommended in IMPROVEMENT_THRESHOLDS:
            if usage < limit:
                suggestions.append(
                    ImprovementSuggestion(
                        category=category,
                        current_usage=usage,
                        recommended_usage=recommended,
                        suggestion=_suggestion_text(category, impact),
                        impact=impact,
                    )
                )
                break

    return sorted(suggestions, key=lambda s: _IMPACT_ORDER[enum_to_value(s.impact)], reverse=True)


def streak_days(history: Sequence[AnalysisHistoryRecord], now: datetime, zone: tzinfo) -> int:
    """Consecutive local days, ending today, with at least one record."""
    active_days: Set[date] = {ensure_utc(record.timestamp).astimezone(zone).date() for record in history}
    day = ensure_utc(now).astimezone(zone).date()

    streak = 0
    for _ in range(STREAK_MAX_DAYS):
        if day not in active_days:
            break
        streak += 1
        day -= timedelta(days=1)
    return streak


def _suggestion_text(category: CharmCategory, impact: SuggestionImpact) -> str:
    if impact == SuggestionImpact.HIGH:
        return f"Try analyzing the {category.name} angle more actively"
    return f"Dig deeper into the {category.name} angle"
