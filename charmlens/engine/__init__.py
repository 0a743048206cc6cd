"""Analytics and audit engine for charmlens."""

from charmlens.engine.query import query_entries, sort_newest_first
from charmlens.engine.stats import summarize_entries
from charmlens.engine.alerts import detect_alerts, DEFAULT_ALERT_RULES
from charmlens.engine.export import to_csv, to_json, parse_csv, ExportError, CSV_COLUMNS
from charmlens.engine.classifier import classify_points, categorize_point, CLASSIFICATION_RULES
from charmlens.engine.emotion import score_points, analyze_points, generate_insights, EMOTION_RULES
from charmlens.engine.tagging import extract_tags
from charmlens.engine.user_analytics import summarize_history

__all__ = [
    "query_entries",
    "sort_newest_first",
    "summarize_entries",
    "detect_alerts",
    "DEFAULT_ALERT_RULES",
    "to_csv",
    "to_json",
    "parse_csv",
    "ExportError",
    "CSV_COLUMNS",
    "classify_points",
    "categorize_point",
    "CLASSIFICATION_RULES",
    "score_points",
    "analyze_points",
    "generate_insights",
    "EMOTION_RULES",
    "extract_tags",
    "summarize_history",
]
