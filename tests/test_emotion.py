"""Tests for keyword-based emotion scoring."""

import pytest

from charmlens.engine.emotion import (
    analyze_points,
    generate_insights,
    generate_suggestions,
    round_half_up,
    score_points,
)
from charmlens.models.analysis import GeneratedPoint
from charmlens.models.emotion import EmotionLabel, EmotionScore, InsightType


def _point(title: str, description: str = "") -> GeneratedPoint:
    return GeneratedPoint(title=title, description=description)


class TestScorePoints:
    """Test score_points()."""

    def test_empty_input_is_neutral(self):
        score = score_points([])
        assert score.positive_pct == 0
        assert score.negative_pct == 0
        assert score.neutral_pct == 100
        assert score.confidence == 50
        assert score.dominant == EmotionLabel.NEUTRAL.value

    def test_no_keywords_is_fully_neutral(self):
        score = score_points([_point("Office in Tokyo")])
        assert (score.positive_pct, score.negative_pct, score.neutral_pct) == (0, 0, 100)
        assert score.dominant == "neutral"

    def test_positive_only(self):
        score = score_points([_point("Excellent quality service")])
        assert (score.positive_pct, score.negative_pct, score.neutral_pct) == (100, 0, 0)
        assert score.dominant == "positive"

    def test_japanese_keywords(self):
        score = score_points([_point("人材不足という課題")])
        assert score.negative_pct == 100
        assert score.dominant == "negative"

    def test_context_boost_adds_to_positive(self):
        """'solv' adds 1 to positive against 2 for 'shortage'."""
        score = score_points([_point("Solving the staffing shortage")])
        assert (score.positive_pct, score.negative_pct, score.neutral_pct) == (33, 67, 0)
        assert score.dominant == "negative"

    def test_tie_between_positive_and_negative_is_neutral(self):
        score = score_points([_point("Strong growth despite risk")])
        assert score.positive_pct == 50
        assert score.negative_pct == 50
        assert score.dominant == "neutral"

    def test_percentages_averaged_over_points(self):
        score = score_points([_point("Excellent quality"), _point("Office in Tokyo")])
        assert (score.positive_pct, score.negative_pct, score.neutral_pct) == (50, 0, 50)

    def test_rounding_keeps_total_near_100(self):
        points = [_point("Excellent quality"), _point("Office in Tokyo"), _point("Open floor plan")]
        score = score_points(points)
        assert (score.positive_pct, score.neutral_pct) == (33, 67)
        assert 99 <= score.positive_pct + score.negative_pct + score.neutral_pct <= 101

    def test_repeated_keyword_counts_once(self):
        once = score_points([_point("risk", "excellent")])
        repeated = score_points([_point("risk risk risk", "excellent")])
        assert once == repeated

    @pytest.mark.parametrize("count,expected", [(1, 50), (5, 50), (6, 60), (10, 100), (15, 100)])
    def test_confidence_scales_with_point_count(self, count, expected):
        score = score_points([_point("Office in Tokyo")] * count)
        assert score.confidence == expected


class TestRoundHalfUp:

    @pytest.mark.parametrize("value,expected", [(0.5, 1), (2.5, 3), (1.49, 1), (66.67, 67), (33.33, 33)])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected


class TestAnalyzePoints:
    """Test analyze_points() per-category breakdown and suggestions."""

    def test_by_category_groups_matching_points(self):
        points = [
            _point("Cutting-edge technology", "with excellent support"),
            _point("Office in Tokyo"),
        ]

        analysis = analyze_points(points)
        assert list(analysis.by_category) == ["technology"]
        assert analysis.by_category["technology"].positive_pct == 100

    def test_japanese_points_get_categories(self):
        points = [
            _point("最先端の技術", "革新的な技術で成長を支える"),
            _point("働きやすい環境"),
        ]

        analysis = analyze_points(points)
        assert list(analysis.by_category) == ["technology", "growth", "environment"]
        assert analysis.by_category["technology"].positive_pct == 100
        assert analysis.by_category["growth"].positive_pct == 100
        assert analysis.by_category["environment"].neutral_pct == 100

    @pytest.mark.parametrize("title", [
        "Another great benefit",
        "Working together with mothers",
        "Leaders in agriculture",
    ])
    def test_english_categories_match_whole_words(self, title):
        analysis = analyze_points([_point(title)])
        assert "other" not in analysis.by_category
        assert "culture" not in analysis.by_category

    def test_english_categories_accept_plurals(self):
        analysis = analyze_points([_point("Benefits and new technologies")])
        assert list(analysis.by_category) == ["technology", "benefits"]

    def test_category_order_follows_table(self):
        analysis = analyze_points([_point("Growth culture"), _point("Modern technology")])
        assert list(analysis.by_category) == ["technology", "culture", "growth"]

    def test_neutral_content_gets_suggestions(self):
        analysis = analyze_points([_point("Office in Tokyo")])
        assert len(analysis.suggestions) == 2
        assert any("positive" in s for s in analysis.suggestions)
        assert any("emotional impact" in s for s in analysis.suggestions)

    def test_suggestions_capped_at_five(self):
        overall = EmotionScore(positive_pct=0, negative_pct=100, neutral_pct=0, confidence=50, dominant="negative")
        by_category = {
            label: EmotionScore(positive_pct=0, negative_pct=100, neutral_pct=0, confidence=50, dominant="negative")
            for label in ["technology", "culture", "benefits", "growth"]
        }

        assert len(generate_suggestions(overall, by_category)) == 5


class TestGenerateInsights:
    """Test generate_insights()."""

    def test_positive_content_highlights(self):
        analysis = analyze_points([_point("Cutting-edge technology", "with excellent support")])
        insights = generate_insights(analysis)

        types = [i.type for i in insights]
        assert types == [InsightType.HIGHLIGHT.value, InsightType.IMPROVEMENT.value, InsightType.HIGHLIGHT.value]
        assert insights[-1].category == "technology"

    def test_negative_content_warns(self):
        analysis = analyze_points([_point("Serious problem", "and high risk")] * 7)
        insights = generate_insights(analysis)

        assert [i.type for i in insights] == ["warning"]
        assert insights[0].confidence == 70
