"""Generic keyword rule matching.

Classification, sentiment scoring and tagging are all small rule engines. The
rules are plain data (ordered tables); the two functions here are the only
matching logic.

- `first_match` walks an ordered table of KeywordRule and returns the target of
  the first rule whose pattern occurs in the text.
- `accumulate` sums the weight of every WeightedKeywordRule whose pattern
  occurs in the text into that rule's bucket. A pattern contributes its weight
  once per text, however many times it occurs.
"""

import re
from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, Optional, Sequence, TypeVar, Union

T = TypeVar("T")

Pattern = Union[str, re.Pattern]


@dataclass(frozen=True)
class KeywordRule:
    """Route text containing `pattern` to `target`."""
    pattern: Pattern
    target: Hashable


@dataclass(frozen=True)
class WeightedKeywordRule:
    """Add `weight` to `bucket` when text contains `pattern`."""
    pattern: Pattern
    weight: float
    bucket: Hashable


def matches(pattern: Pattern, text: str) -> bool:
    """Substring test for plain strings, regex search for compiled patterns."""
    if isinstance(pattern, str):
        return pattern in text
    return pattern.search(text) is not None


def first_match(text: str, rules: Sequence[KeywordRule], default: Optional[T] = None):
    """Return the target of the first matching rule, or `default`."""
    for rule in rules:
        if matches(rule.pattern, text):
            return rule.target
    return default


def all_matches(text: str, rules: Iterable[KeywordRule]) -> list:
    """Return the distinct targets of every matching rule, in table order."""
    targets = []
    for rule in rules:
        if rule.target not in targets and matches(rule.pattern, text):
            targets.append(rule.target)
    return targets


def accumulate(text: str, rules: Iterable[WeightedKeywordRule], buckets: Iterable[Hashable] = ()) -> Dict[Hashable, float]:
    """Sum rule weights per bucket. Buckets named in `buckets` start at zero."""
    totals: Dict[Hashable, float] = {bucket: 0.0 for bucket in buckets}
    for rule in rules:
        if matches(rule.pattern, text):
            totals[rule.bucket] = totals.get(rule.bucket, 0.0) + rule.weight
    return totals
