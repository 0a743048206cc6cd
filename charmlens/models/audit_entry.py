"""Audit log data models for charmlens."""

from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field


class AuditActionKind(str, Enum):
    """Audit action taxonomy."""
    USER_LOGIN = "user.login"
    USER_LOGOUT = "user.logout"
    USER_ACCOUNT_CREATED = "user.account_created"
    USER_ACCOUNT_DELETED = "user.account_deleted"
    ADMIN_USER_CREATED = "admin.user_created"
    ADMIN_USER_DELETED = "admin.user_deleted"
    ADMIN_SETTINGS_CHANGED = "admin.settings_changed"
    SYSTEM_ERROR = "system.error"
    SECURITY_ALERT = "security.alert"
    PERFORMANCE_METRIC = "performance.metric"


class AuditSeverity(str, Enum):
    """Audit severity enumeration (ordinal: low < medium < high < critical)."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AuditEntryInput(BaseModel):
    """Everything the caller supplies when recording an audit entry."""

    actor_id: str = Field(..., description="ID of the actor who performed the action")
    actor_email: Optional[str] = Field(None, description="Actor email, for display")
    actor_display_name: Optional[str] = Field(None, description="Actor display name")
    action_kind: AuditActionKind = Field(..., description="Type of action")
    target_id: Optional[str] = Field(None, description="ID of the object acted upon")
    target_kind: Optional[str] = Field(None, description="Kind of the object acted upon (e.g. 'user')")
    description: str = Field(..., description="Human-readable description of the action")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Additional details")
    severity: AuditSeverity = Field(AuditSeverity.LOW, description="Urgency of the entry")
    success: bool = Field(True, description="Whether the action succeeded")
    error_message: Optional[str] = Field(None, description="Error message when the action failed")
    ip_address: Optional[str] = Field(None, description="Client IP address, when known")
    user_agent: Optional[str] = Field(None, description="Client user agent, when known")
    session_id: Optional[str] = Field(None, description="Session identifier, when known")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class AuditEntry(AuditEntryInput):
    """An appended audit entry. Immutable."""

    id: str = Field(..., description="Unique audit entry identifier")
    timestamp: datetime = Field(..., description="When the entry was recorded (UTC)")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        frozen = True


class AuditFilter(BaseModel):
    """Query filter. Every field is optional; set fields are AND-combined."""

    start_date: Optional[datetime] = Field(None, description="Inclusive lower bound on timestamp")
    end_date: Optional[datetime] = Field(None, description="Inclusive upper bound on timestamp")
    actor_id: Optional[str] = None
    action_kind: Optional[AuditActionKind] = None
    severity: Optional[AuditSeverity] = None
    success: Optional[bool] = None
    search_text: Optional[str] = Field(None, description="Case-insensitive substring of description")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class ActionCount(BaseModel):
    action_kind: str
    count: int


class ActorCount(BaseModel):
    actor_id: str
    email: str
    action_count: int


class AuditStats(BaseModel):
    """Summary statistics derived from a set of audit entries. Never persisted."""

    total_count: int = 0
    success_count: int = 0
    error_count: int = 0
    distinct_actor_count: int = 0
    top_actions: List[ActionCount] = Field(default_factory=list)
    top_actors: List[ActorCount] = Field(default_factory=list)
    recent_activity: List[AuditEntry] = Field(default_factory=list)


class SecurityAlertRule(BaseModel):
    """Threshold rule evaluated over a sliding time window."""

    id: str = Field(..., description="Stable rule identifier")
    name: str = Field(..., description="Short rule name")
    description: str = Field("", description="What the rule detects")
    action_kind: AuditActionKind = Field(..., description="Action kind the rule counts")
    threshold: int = Field(..., ge=1, description="Count at which the rule fires")
    window_minutes: int = Field(..., ge=1, description="Sliding window length in minutes")
    severity: AuditSeverity = Field(..., description="Severity of the emitted alert")
    failures_only: bool = Field(False, description="Count only failed entries (failure-style rule)")
    enabled: bool = True

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
