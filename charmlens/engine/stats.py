"""Audit statistics aggregation for charmlens."""

from collections import Counter
from typing import Dict, List, Sequence

from charmlens.models.audit_entry import AuditEntry, AuditStats, ActionCount, ActorCount
from charmlens.models.enum_utils import enum_to_value
from charmlens.models.constants import (
    TOP_ACTIONS_LIMIT,
    TOP_ACTORS_LIMIT,
    RECENT_ACTIVITY_LIMIT,
    UNKNOWN_ACTOR_EMAIL,
)
from charmlens.engine.query import sort_newest_first


def summarize_entries(entries: Sequence[AuditEntry]) -> AuditStats:
    """Compute summary statistics over a set of audit entries.

    Entries are ranked newest first before counting, so frequency ties in the
    top lists keep the order in which each action kind / actor is first seen
    in that ranking.

    Args:
        entries: Entries to summarize (any order)

    Returns:
        AuditStats; all-zero for an empty input
    """
    ranked = sort_newest_first(entries)

    total_count = len(ranked)
    success_count = sum(1 for entry in ranked if entry.success)

    # Counter preserves first-seen order, and sorted() is stable
    action_counts = Counter(entry.action_kind for entry in ranked)
    top_actions = [
        ActionCount(action_kind=enum_to_value(action_kind), count=count)
        for action_kind, count in sorted(action_counts.items(), key=lambda item: item[1], reverse=True)
    ][:TOP_ACTIONS_LIMIT]

    actor_counts = Counter(entry.actor_id for entry in ranked)
    emails = _latest_emails(ranked)
    top_actors = [
        ActorCount(actor_id=actor_id, email=emails.get(actor_id, UNKNOWN_ACTOR_EMAIL), action_count=count)
        for actor_id, count in sorted(actor_counts.items(), key=lambda item: item[1], reverse=True)
    ][:TOP_ACTORS_LIMIT]

    return AuditStats(
        total_count=total_count,
        success_count=success_count,
        error_count=total_count - success_count,
        distinct_actor_count=len(actor_counts),
        top_actions=top_actions,
        top_actors=top_actors,
        recent_activity=ranked[:RECENT_ACTIVITY_LIMIT],
    )


def _latest_emails(ranked: List[AuditEntry]) -> Dict[str, str]:
    """Most recently seen non-empty email per actor (`ranked` is newest first)."""
    emails: Dict[str, str] = {}
    for entry in ranked:
        if entry.actor_email and entry.actor_id not in emails:
            emails[entry.actor_id] = entry.actor_email
    return emails
