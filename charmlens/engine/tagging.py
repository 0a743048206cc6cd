"""Industry and company-size tags extracted from the user's input fact."""

import re
from typing import List, Sequence

from charmlens.engine.rules import KeywordRule, all_matches


def _tag(tag: str, *patterns) -> List[KeywordRule]:
    return [KeywordRule(pattern=pattern, target=tag) for pattern in patterns]


TAG_RULES: List[KeywordRule] = [
    # Industry
    *_tag("Startup", "startup", "start-up", "スタートアップ"),
    *_tag("HR", re.compile(r"\bhr\b"), "human resources", "人事"),
    *_tag("IT & Technology", re.compile(r"\bit\b"), "software", "技術"),
    *_tag("Manufacturing", "manufactur", "factory", "製造", "工場"),
    *_tag("Finance", "financ", "bank", "金融", "銀行"),
    *_tag("Healthcare", "healthcare", "medical", "hospital", "医療", "病院"),
    # Company size
    *_tag("Enterprise", "enterprise", "large company", "大企業", "大手"),
    *_tag("SMB", re.compile(r"\bsmb\b"), "small business", "mid-sized", "中小企業", "中堅"),
    *_tag("Venture", "venture", "emerging company", "ベンチャー", "新興"),
]


def extract_tags(user_input: str, rules: Sequence[KeywordRule] = TAG_RULES) -> List[str]:
    """Return the distinct tags whose keywords occur in `user_input`, in table order."""
    if not user_input:
        return []
    return all_matches(user_input.lower(), rules)
