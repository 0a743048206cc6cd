"""Constants for charmlens.

This module centralizes all magic numbers and default values used throughout the application.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# Retention
AUDIT_RETENTION_CAP = int(os.getenv("AUDIT_RETENTION_CAP", "1000"))
HISTORY_CAP_PER_USER = int(os.getenv("HISTORY_CAP_PER_USER", "100"))

# Persisted collection keys
AUDIT_COLLECTION_KEY = "audit.entries"
HISTORY_COLLECTION_PREFIX = "history."

# Timezone used for streaks and usage patterns when the caller gives none
ANALYTICS_TIMEZONE = os.getenv("ANALYTICS_TIMEZONE", "UTC")

# Audit stats
TOP_ACTIONS_LIMIT = 5
TOP_ACTORS_LIMIT = 5
RECENT_ACTIVITY_LIMIT = 10
UNKNOWN_ACTOR_EMAIL = "Unknown"
SYSTEM_ACTOR_ID = "system"

# Classification strength tiers (percent of a generation's points)
STRENGTH_HIGH_MIN_PCT = 30
STRENGTH_MEDIUM_MIN_PCT = 15

# Emotion scoring
KEYWORD_WEIGHT = 2
CONTEXT_BOOST_WEIGHT = 1
CONFIDENCE_PER_POINT = 10
MIN_CONFIDENCE = 50
MAX_CONFIDENCE = 100
MAX_EMOTION_SUGGESTIONS = 5

# User analytics
FAVORITE_CATEGORIES_LIMIT = 3
EFFECTIVE_RATING_MIN = 4
STREAK_MAX_DAYS = 365
