"""Audit log service for charmlens.

Recording is fire-and-forget; reads degrade to empty results; exports fail
loudly with ExportError.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from charmlens.database.store import EventStore
from charmlens.engine.alerts import DEFAULT_ALERT_RULES, detect_alerts
from charmlens.engine.export import ExportError, to_csv, to_json
from charmlens.engine.query import query_entries
from charmlens.engine.stats import summarize_entries
from charmlens.models.audit_entry import (
    AuditActionKind,
    AuditEntry,
    AuditEntryInput,
    AuditFilter,
    AuditSeverity,
    AuditStats,
    SecurityAlertRule,
)

logger = logging.getLogger(__name__)


class ExportFormat(str, Enum):
    CSV = "csv"
    JSON = "json"


class AuditService:
    """Records audit events and answers dashboard queries over them."""

    def __init__(self, event_store: EventStore, alert_rules: Sequence[SecurityAlertRule] = DEFAULT_ALERT_RULES):
        self.event_store = event_store
        self.alert_rules = list(alert_rules)

    def record_event(
        self,
        action_kind: AuditActionKind,
        description: str,
        severity: AuditSeverity,
        success: bool,
        metadata: Optional[Dict[str, Any]],
        actor_id: str,
        actor_email: Optional[str] = None,
        **details: Any,
    ) -> None:
        """Record one audit event. Never raises.

        Extra keyword arguments map onto optional AuditEntryInput fields
        (target_id, target_kind, error_message, ip_address, user_agent, ...).
        """
        try:
            entry_input = AuditEntryInput(
                actor_id=actor_id,
                actor_email=actor_email,
                action_kind=action_kind,
                description=description,
                severity=severity,
                success=success,
                metadata=metadata or {},
                **details,
            )
        except Exception as e:
            logger.error(f"Discarded invalid audit event {action_kind}: {type(e).__name__}: {str(e)}")
            return
        self.event_store.append(entry_input)

    def query_events(self, audit_filter: Optional[AuditFilter] = None) -> List[AuditEntry]:
        """Filtered entries, newest first. Empty list if the store can't be read."""
        try:
            return query_entries(self.event_store.list(), audit_filter)
        except Exception as e:
            logger.warning(f"Failed to query audit entries: {type(e).__name__}: {str(e)}")
            return []

    def get_stats(self) -> AuditStats:
        """Statistics over all retained entries. Zero-valued on failure."""
        try:
            return summarize_entries(self.event_store.list())
        except Exception as e:
            logger.warning(f"Failed to compute audit stats: {type(e).__name__}: {str(e)}")
            return AuditStats()

    def get_alerts(self, now: Optional[datetime] = None) -> List[AuditEntry]:
        """Alerts raised by the configured rules at `now`. Empty list on failure."""
        try:
            return detect_alerts(self.event_store.list(), self.alert_rules, now)
        except Exception as e:
            logger.warning(f"Failed to evaluate security alerts: {type(e).__name__}: {str(e)}")
            return []

    def export_events(self, export_format: str, audit_filter: Optional[AuditFilter] = None) -> str:
        """Export filtered entries as CSV or JSON.

        Raises:
            ExportError: If the format is unsupported or the export could not be built
        """
        try:
            entries = query_entries(self.event_store.list(), audit_filter)
            if export_format == ExportFormat.JSON:
                return to_json(entries)
            if export_format == ExportFormat.CSV:
                return to_csv(entries)
        except Exception as e:
            logger.error(f"Audit export failed: {type(e).__name__}: {str(e)}")
            raise ExportError() from e
        logger.error(f"Audit export failed: unsupported format {export_format!r}")
        raise ExportError()

    # Preset recorders for common domain actions

    def record_login(self, actor_id: str, actor_email: str, success: bool,
                     ip_address: Optional[str] = None, user_agent: Optional[str] = None,
                     error_message: Optional[str] = None) -> None:
        self.record_event(
            AuditActionKind.USER_LOGIN,
            "User login succeeded" if success else "User login failed",
            AuditSeverity.LOW if success else AuditSeverity.MEDIUM,
            success,
            {"ip_address": ip_address, "user_agent": user_agent},
            actor_id,
            actor_email,
            ip_address=ip_address,
            user_agent=user_agent,
            error_message=error_message,
        )

    def record_logout(self, actor_id: str, actor_email: str, ip_address: Optional[str] = None) -> None:
        self.record_event(
            AuditActionKind.USER_LOGOUT,
            "User logout",
            AuditSeverity.LOW,
            True,
            {"ip_address": ip_address},
            actor_id,
            actor_email,
            ip_address=ip_address,
        )

    def record_admin_user_created(self, admin_id: str, admin_email: str, new_user_email: str) -> None:
        self.record_event(
            AuditActionKind.ADMIN_USER_CREATED,
            f"Administrator created user account: {new_user_email}",
            AuditSeverity.MEDIUM,
            True,
            {"new_user_email": new_user_email},
            admin_id,
            admin_email,
            target_kind="user",
        )

    def record_admin_user_deleted(self, admin_id: str, admin_email: str, deleted_user_email: str) -> None:
        self.record_event(
            AuditActionKind.ADMIN_USER_DELETED,
            f"Administrator deleted user account: {deleted_user_email}",
            AuditSeverity.HIGH,
            True,
            {"deleted_user_email": deleted_user_email},
            admin_id,
            admin_email,
            target_kind="user",
        )

    def record_settings_changed(self, admin_id: str, admin_email: str, setting: str, value: Any) -> None:
        self.record_event(
            AuditActionKind.ADMIN_SETTINGS_CHANGED,
            f"Administrator changed setting: {setting}",
            AuditSeverity.HIGH,
            True,
            {"setting": setting, "value": value},
            admin_id,
            admin_email,
        )

    def record_system_error(self, actor_id: str, description: str, error_message: str,
                            actor_email: Optional[str] = None) -> None:
        self.record_event(
            AuditActionKind.SYSTEM_ERROR,
            description,
            AuditSeverity.HIGH,
            False,
            {},
            actor_id,
            actor_email,
            error_message=error_message,
        )
