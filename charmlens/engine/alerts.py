"""Security alert detection for charmlens.

Rules are data (SecurityAlertRule); the detector is one loop over them. A rule
fires when the number of matching entries inside its sliding window reaches the
threshold, and produces one synthetic `security.alert` entry.
"""

import uuid
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from charmlens.models.audit_entry import (
    AuditActionKind,
    AuditEntry,
    AuditSeverity,
    SecurityAlertRule,
)
from charmlens.models.constants import SYSTEM_ACTOR_ID
from charmlens.engine.clock import ensure_utc, utc_now


FAILED_LOGIN_RULE = SecurityAlertRule(
    id="failed-logins",
    name="Repeated login failures",
    description="Failed logins within a short window",
    action_kind=AuditActionKind.USER_LOGIN,
    threshold=5,
    window_minutes=30,
    severity=AuditSeverity.HIGH,
    failures_only=True,
)

BULK_DELETION_RULE = SecurityAlertRule(
    id="bulk-user-deletion",
    name="Bulk user deletion",
    description="Many user accounts deleted by administrators within a short window",
    action_kind=AuditActionKind.ADMIN_USER_DELETED,
    threshold=10,
    window_minutes=60,
    severity=AuditSeverity.CRITICAL,
    failures_only=False,
)

DEFAULT_ALERT_RULES: List[SecurityAlertRule] = [FAILED_LOGIN_RULE, BULK_DELETION_RULE]


def detect_alerts(
    entries: Sequence[AuditEntry],
    rules: Sequence[SecurityAlertRule] = DEFAULT_ALERT_RULES,
    now: Optional[datetime] = None,
) -> List[AuditEntry]:
    """Evaluate every enabled rule against `entries`.

    An entry counts toward a rule when its action kind matches, it failed (for
    failure-style rules) and `now - window < timestamp <= now`.

    Args:
        entries: Entries to scan (any order)
        rules: Alert rules to evaluate
        now: Evaluation time (defaults to the current UTC time)

    Returns:
        One synthetic alert entry per violated rule, in rule order
    """
    now = ensure_utc(now) if now else utc_now()
    alerts: List[AuditEntry] = []

    for rule in rules:
        if not rule.enabled:
            continue
        count = count_rule_matches(entries, rule, now)
        if count >= rule.threshold:
            alerts.append(_build_alert(rule, count, now))

    return alerts


def count_rule_matches(entries: Sequence[AuditEntry], rule: SecurityAlertRule, now: datetime) -> int:
    """Count entries inside the rule's window that the rule applies to."""
    window_start = now - timedelta(minutes=rule.window_minutes)
    count = 0
    for entry in entries:
        if entry.action_kind != rule.action_kind:
            continue
        if rule.failures_only and entry.success:
            continue
        timestamp = ensure_utc(entry.timestamp)
        if window_start < timestamp <= now:
            count += 1
    return count


def _build_alert(rule: SecurityAlertRule, count: int, now: datetime) -> AuditEntry:
    return AuditEntry(
        id=str(uuid.uuid4()),
        timestamp=now,
        actor_id=SYSTEM_ACTOR_ID,
        action_kind=AuditActionKind.SECURITY_ALERT,
        description=f"{rule.name}: {count} events in the last {rule.window_minutes} minutes",
        metadata={
            "rule_id": rule.id,
            "count": count,
            "threshold": rule.threshold,
            "window_minutes": rule.window_minutes,
            "action_kind": rule.action_kind,
        },
        severity=rule.severity,
        success=True,
    )
