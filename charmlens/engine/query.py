"""Audit log query logic for charmlens.

Filters audit entries with AND-combined predicates and orders them newest first.
"""

from typing import List, Optional, Sequence
from charmlens.models.audit_entry import AuditEntry, AuditFilter
from charmlens.engine.clock import ensure_utc


def query_entries(entries: Sequence[AuditEntry], audit_filter: Optional[AuditFilter] = None) -> List[AuditEntry]:
    """Filter entries and sort them by timestamp, newest first.

    Unset filter fields place no constraint. Date bounds are inclusive and the
    search text is matched case-insensitively against the description.
    Entries with equal timestamps are ordered later-inserted first.

    Args:
        entries: Entries in storage (insertion) order
        audit_filter: Optional filter

    Returns:
        A new list; `entries` is not modified
    """
    audit_filter = audit_filter or AuditFilter()
    return sort_newest_first([entry for entry in entries if _matches(entry, audit_filter)])


def sort_newest_first(entries: Sequence[AuditEntry]) -> List[AuditEntry]:
    """Sort entries by timestamp descending (ties: later-inserted first)."""
    return [entry for _, entry in sorted(enumerate(entries), key=_recency_key, reverse=True)]


def _recency_key(indexed: tuple) -> tuple:
    index, entry = indexed
    return (ensure_utc(entry.timestamp), index)


def _matches(entry: AuditEntry, audit_filter: AuditFilter) -> bool:
    timestamp = ensure_utc(entry.timestamp)

    if audit_filter.start_date is not None and timestamp < ensure_utc(audit_filter.start_date):
        return False
    if audit_filter.end_date is not None and timestamp > ensure_utc(audit_filter.end_date):
        return False
    if audit_filter.actor_id and entry.actor_id != audit_filter.actor_id:
        return False
    if audit_filter.action_kind and entry.action_kind != audit_filter.action_kind:
        return False
    if audit_filter.severity and entry.severity != audit_filter.severity:
        return False
    if audit_filter.success is not None and entry.success != audit_filter.success:
        return False
    if audit_filter.search_text and audit_filter.search_text.lower() not in entry.description.lower():
        return False

    return True
