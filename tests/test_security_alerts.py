"""Tests for security alert detection (sliding-window threshold rules)."""

from datetime import timedelta

from charmlens.engine.alerts import (
    BULK_DELETION_RULE,
    DEFAULT_ALERT_RULES,
    FAILED_LOGIN_RULE,
    count_rule_matches,
    detect_alerts,
)
from charmlens.models.audit_entry import AuditActionKind, AuditSeverity, SecurityAlertRule


def _failed_logins(make_entry, now, count, spacing_minutes=1):
    return [
        make_entry(
            timestamp=now - timedelta(minutes=i * spacing_minutes),
            action_kind=AuditActionKind.USER_LOGIN,
            success=False,
            description="User login failed",
        )
        for i in range(count)
    ]


class TestFailedLoginRule:
    """Test the repeated-login-failure rule (5 in 30 minutes)."""

    def test_four_failures_raise_nothing(self, make_entry, fixed_now):
        alerts = detect_alerts(_failed_logins(make_entry, fixed_now, 4), now=fixed_now)
        assert alerts == []

    def test_five_failures_raise_one_alert(self, make_entry, fixed_now):
        alerts = detect_alerts(_failed_logins(make_entry, fixed_now, 5), now=fixed_now)

        assert len(alerts) == 1
        alert = alerts[0]
        assert alert.action_kind == AuditActionKind.SECURITY_ALERT.value
        assert alert.severity == AuditSeverity.HIGH.value
        assert alert.actor_id == "system"
        assert alert.timestamp == fixed_now
        assert alert.metadata["rule_id"] == FAILED_LOGIN_RULE.id
        assert alert.metadata["count"] == 5
        assert alert.metadata["threshold"] == 5
        assert alert.metadata["window_minutes"] == 30

    def test_successful_logins_do_not_count(self, make_entry, fixed_now):
        entries = _failed_logins(make_entry, fixed_now, 4) + [make_entry(timestamp=fixed_now, success=True)]
        assert detect_alerts(entries, now=fixed_now) == []

    def test_window_excludes_its_start_and_includes_now(self, make_entry, fixed_now):
        """An entry exactly `window` old is outside; one at `now` is inside."""
        at_now = make_entry(timestamp=fixed_now, success=False)
        at_window_start = make_entry(timestamp=fixed_now - timedelta(minutes=30), success=False)
        in_future = make_entry(timestamp=fixed_now + timedelta(seconds=1), success=False)

        count = count_rule_matches([at_now, at_window_start, in_future], FAILED_LOGIN_RULE, fixed_now)
        assert count == 1

    def test_failures_spread_beyond_window_raise_nothing(self, make_entry, fixed_now):
        # 5 failures, 10 minutes apart: only 3 fall inside the last 30 minutes
        entries = _failed_logins(make_entry, fixed_now, 5, spacing_minutes=10)
        assert detect_alerts(entries, now=fixed_now) == []


class TestBulkDeletionRule:
    """Test the bulk-user-deletion rule (10 in 60 minutes)."""

    def test_ten_deletions_raise_critical_alert(self, make_entry, fixed_now):
        entries = [
            make_entry(
                timestamp=fixed_now - timedelta(minutes=i * 5),
                action_kind=AuditActionKind.ADMIN_USER_DELETED,
                actor_id="admin-1",
            )
            for i in range(10)
        ]

        alerts = detect_alerts(entries, now=fixed_now)
        assert len(alerts) == 1
        assert alerts[0].severity == AuditSeverity.CRITICAL.value
        assert alerts[0].metadata["rule_id"] == BULK_DELETION_RULE.id

    def test_nine_deletions_raise_nothing(self, make_entry, fixed_now):
        entries = [
            make_entry(timestamp=fixed_now, action_kind=AuditActionKind.ADMIN_USER_DELETED)
            for _ in range(9)
        ]
        assert detect_alerts(entries, now=fixed_now) == []


class TestRuleEvaluation:
    """Test generic rule handling."""

    def test_alerts_come_in_rule_order(self, make_entry, fixed_now):
        entries = _failed_logins(make_entry, fixed_now, 5) + [
            make_entry(timestamp=fixed_now, action_kind=AuditActionKind.ADMIN_USER_DELETED)
            for _ in range(10)
        ]

        alerts = detect_alerts(entries, DEFAULT_ALERT_RULES, now=fixed_now)
        assert [a.metadata["rule_id"] for a in alerts] == [FAILED_LOGIN_RULE.id, BULK_DELETION_RULE.id]

    def test_disabled_rule_is_skipped(self, make_entry, fixed_now):
        disabled = FAILED_LOGIN_RULE.model_copy(update={"enabled": False})
        alerts = detect_alerts(_failed_logins(make_entry, fixed_now, 5), [disabled], now=fixed_now)
        assert alerts == []

    def test_custom_rule(self, make_entry, fixed_now):
        rule = SecurityAlertRule(
            id="settings-churn",
            name="Settings churn",
            action_kind=AuditActionKind.ADMIN_SETTINGS_CHANGED,
            threshold=2,
            window_minutes=5,
            severity=AuditSeverity.MEDIUM,
        )
        entries = [
            make_entry(timestamp=fixed_now - timedelta(minutes=1), action_kind=AuditActionKind.ADMIN_SETTINGS_CHANGED),
            make_entry(timestamp=fixed_now - timedelta(minutes=2), action_kind=AuditActionKind.ADMIN_SETTINGS_CHANGED),
        ]

        alerts = detect_alerts(entries, [rule], now=fixed_now)
        assert len(alerts) == 1
        assert "Settings churn" in alerts[0].description
