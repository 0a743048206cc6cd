"""FastAPI web application for charmlens."""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfoNotFoundError

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from charmlens.auth.dependencies import get_current_actor, get_current_admin
from charmlens.database.database import get_db, init_db
from charmlens.database.history_repository import AnalysisHistoryRepository
from charmlens.database.store import EventStore, SQLAlchemyKeyedStore
from charmlens.engine.clock import resolve_timezone
from charmlens.engine.emotion import generate_insights
from charmlens.engine.export import ExportError
from charmlens.integrations.openai_client import OpenAIClient
from charmlens.models.actor import Actor
from charmlens.models.analysis import (
    AnalysisHistoryRecord,
    CharmCategoryAnalysis,
    GeneratedOutput,
    GeneratedPoint,
    HistoryRecordPatch,
)
from charmlens.models.audit_entry import (
    AuditActionKind,
    AuditEntry,
    AuditFilter,
    AuditSeverity,
    AuditStats,
)
from charmlens.models.constants import ANALYTICS_TIMEZONE
from charmlens.models.emotion import EmotionAnalysis, EmotionInsight
from charmlens.models.user_analytics import UserAnalyticsSummary
from charmlens.services.analysis_service import AnalysisService
from charmlens.services.audit_service import AuditService, ExportFormat

logger = logging.getLogger(__name__)


def check_analytics_timezone() -> None:
    """Fail startup when ANALYTICS_TIMEZONE names no known zone."""
    try:
        resolve_timezone(ANALYTICS_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        logger.error(f"ANALYTICS_TIMEZONE is not a known timezone: {ANALYTICS_TIMEZONE!r}")
        raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    check_analytics_timezone()
    init_db()
    yield


app = FastAPI(
    title="charmlens API",
    description="Recruitment copy analytics: audit log, charm classification, emotion scoring and user analytics",
    version="0.1.0",
    lifespan=lifespan,
)


# Dependencies

def get_audit_service(db: Session = Depends(get_db)) -> AuditService:
    return AuditService(EventStore(SQLAlchemyKeyedStore(db)))


def get_analysis_service(db: Session = Depends(get_db)) -> AnalysisService:
    return AnalysisService(AnalysisHistoryRepository(SQLAlchemyKeyedStore(db)))


_openai_client: Optional[OpenAIClient] = None


def get_generation_client() -> OpenAIClient:
    """Get or create the OpenAI client instance."""
    global _openai_client
    if _openai_client is None:
        _openai_client = OpenAIClient()
    return _openai_client


def get_audit_filter(
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    actor_id: Optional[str] = None,
    action_kind: Optional[AuditActionKind] = None,
    severity: Optional[AuditSeverity] = None,
    success: Optional[bool] = None,
    search_text: Optional[str] = None,
) -> AuditFilter:
    """Build an AuditFilter from query parameters."""
    return AuditFilter(
        start_date=start_date,
        end_date=end_date,
        actor_id=actor_id,
        action_kind=action_kind,
        severity=severity,
        success=success,
        search_text=search_text,
    )


# Request / response models

class RecordEventRequest(BaseModel):
    """Request model for recording an audit event as the current actor."""
    action_kind: AuditActionKind
    description: str = Field(..., min_length=1)
    severity: AuditSeverity = AuditSeverity.LOW
    success: bool = True
    metadata: Dict[str, Any] = Field(default_factory=dict)
    target_id: Optional[str] = None
    target_kind: Optional[str] = None
    error_message: Optional[str] = None


class AuditEventsResponse(BaseModel):
    entries: List[AuditEntry]
    count: int


class AlertsResponse(BaseModel):
    alerts: List[AuditEntry]
    count: int


class ClassifyRequest(BaseModel):
    points: List[GeneratedPoint] = Field(default_factory=list)


class ClassifyResponse(BaseModel):
    categorization: List[CharmCategoryAnalysis]
    emotion: EmotionAnalysis
    insights: List[EmotionInsight]


class GenerateRequest(BaseModel):
    fact: str = Field(..., min_length=1, description="Company fact to turn into recruitment copy")
    session_duration_seconds: Optional[float] = Field(
        None, ge=0.0, description="Time the user spent on this analysis; defaults to generation time"
    )


class GenerateResponse(BaseModel):
    record: AnalysisHistoryRecord
    emotion: EmotionAnalysis
    insights: List[EmotionInsight]


class RecordAnalysisRequest(BaseModel):
    user_input: str
    output: GeneratedOutput
    session_duration_seconds: float = Field(0.0, ge=0.0)


class HistoryResponse(BaseModel):
    records: List[AnalysisHistoryRecord]
    count: int


# Reserved for the engine itself / administrators
SYSTEM_ONLY_ACTIONS = {AuditActionKind.SECURITY_ALERT.value}
ADMIN_ONLY_ACTIONS = {
    AuditActionKind.ADMIN_USER_CREATED.value,
    AuditActionKind.ADMIN_USER_DELETED.value,
    AuditActionKind.ADMIN_SETTINGS_CHANGED.value,
}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


# Audit log

@app.post("/audit/events", status_code=status.HTTP_202_ACCEPTED)
def record_event(
    request_body: RecordEventRequest,
    request: Request,
    actor: Actor = Depends(get_current_actor),
    audit_service: AuditService = Depends(get_audit_service),
):
    """Record an audit event attributed to the current actor (best effort)."""
    action_kind = request_body.action_kind.value
    if action_kind in SYSTEM_ONLY_ACTIONS:
        raise HTTPException(status_code=400, detail=f"{action_kind} events are generated by the system")
    if action_kind in ADMIN_ONLY_ACTIONS and not actor.is_admin:
        raise HTTPException(status_code=403, detail="Administrator access required")

    audit_service.record_event(
        request_body.action_kind,
        request_body.description,
        request_body.severity,
        request_body.success,
        request_body.metadata,
        actor.id,
        actor.email,
        actor_display_name=actor.display_name,
        target_id=request_body.target_id,
        target_kind=request_body.target_kind,
        error_message=request_body.error_message,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return {"status": "accepted"}


@app.get("/audit/events", response_model=AuditEventsResponse)
def list_events(
    audit_filter: AuditFilter = Depends(get_audit_filter),
    admin: Actor = Depends(get_current_admin),
    audit_service: AuditService = Depends(get_audit_service),
):
    """Query the audit log, newest first."""
    entries = audit_service.query_events(audit_filter)
    return AuditEventsResponse(entries=entries, count=len(entries))


@app.get("/audit/stats", response_model=AuditStats)
def audit_stats(
    admin: Actor = Depends(get_current_admin),
    audit_service: AuditService = Depends(get_audit_service),
):
    """Summary statistics over the retained audit log."""
    return audit_service.get_stats()


@app.get("/audit/alerts", response_model=AlertsResponse)
def audit_alerts(
    now: Optional[datetime] = None,
    admin: Actor = Depends(get_current_admin),
    audit_service: AuditService = Depends(get_audit_service),
):
    """Evaluate security alert rules (at `now`, default current time)."""
    alerts = audit_service.get_alerts(now)
    return AlertsResponse(alerts=alerts, count=len(alerts))


@app.get("/audit/export")
def export_events(
    export_format: ExportFormat = Query(ExportFormat.CSV, alias="format"),
    audit_filter: AuditFilter = Depends(get_audit_filter),
    admin: Actor = Depends(get_current_admin),
    audit_service: AuditService = Depends(get_audit_service),
):
    """Download the filtered audit log as CSV or JSON."""
    try:
        content = audit_service.export_events(export_format.value, audit_filter)
    except ExportError as e:
        raise HTTPException(status_code=500, detail=str(e))

    media_type = "text/csv" if export_format == ExportFormat.CSV else "application/json"
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="audit-log.{export_format.value}"'},
    )


# Analysis

@app.post("/analysis/classify", response_model=ClassifyResponse)
def classify(
    request_body: ClassifyRequest,
    actor: Actor = Depends(get_current_actor),
    analysis_service: AnalysisService = Depends(get_analysis_service),
):
    """Classify points into charm categories and score their emotion."""
    result = analysis_service.classify_and_score(request_body.points)
    return ClassifyResponse(
        categorization=result.categorization,
        emotion=result.emotion,
        insights=generate_insights(result.emotion),
    )


@app.post("/analysis/generate", response_model=GenerateResponse, status_code=status.HTTP_201_CREATED)
def generate(
    request_body: GenerateRequest,
    actor: Actor = Depends(get_current_actor),
    analysis_service: AnalysisService = Depends(get_analysis_service),
    audit_service: AuditService = Depends(get_audit_service),
    client: OpenAIClient = Depends(get_generation_client),
):
    """Generate attractiveness points for a fact, then analyze and record them."""
    started = time.monotonic()
    output = client.generate_points(request_body.fact)
    elapsed = time.monotonic() - started

    if output is None:
        audit_service.record_system_error(
            actor.id,
            "Attractiveness point generation failed",
            "generation returned no output",
            actor_email=actor.email,
        )
        raise HTTPException(status_code=502, detail="Generation failed")

    duration = request_body.session_duration_seconds
    record = analysis_service.record_analysis(
        actor.id,
        request_body.fact,
        output,
        duration if duration is not None else elapsed,
    )
    emotion = analysis_service.classify_and_score(output.points).emotion
    return GenerateResponse(record=record, emotion=emotion, insights=generate_insights(emotion))


# History

@app.post("/history", response_model=AnalysisHistoryRecord, status_code=status.HTTP_201_CREATED)
def create_history_record(
    request_body: RecordAnalysisRequest,
    actor: Actor = Depends(get_current_actor),
    analysis_service: AnalysisService = Depends(get_analysis_service),
):
    """Record a completed generation in the current user's history."""
    return analysis_service.record_analysis(
        actor.id,
        request_body.user_input,
        request_body.output,
        request_body.session_duration_seconds,
    )


@app.get("/history", response_model=HistoryResponse)
def list_history(
    actor: Actor = Depends(get_current_actor),
    analysis_service: AnalysisService = Depends(get_analysis_service),
):
    """List the current user's history, newest first."""
    records = analysis_service.list_history(actor.id)
    return HistoryResponse(records=records, count=len(records))


@app.get("/history/{record_id}", response_model=AnalysisHistoryRecord)
def get_history_record(
    record_id: str,
    actor: Actor = Depends(get_current_actor),
    analysis_service: AnalysisService = Depends(get_analysis_service),
):
    record = analysis_service.get_history_record(actor.id, record_id)
    if not record:
        raise HTTPException(status_code=404, detail=f"History record {record_id} not found")
    return record


@app.patch("/history/{record_id}", response_model=AnalysisHistoryRecord)
def update_history_record(
    record_id: str,
    patch: HistoryRecordPatch,
    actor: Actor = Depends(get_current_actor),
    analysis_service: AnalysisService = Depends(get_analysis_service),
):
    """Update rating, feedback or bookmark of one of the current user's records."""
    record = analysis_service.update_history_record(actor.id, record_id, patch)
    if not record:
        raise HTTPException(status_code=404, detail=f"History record {record_id} not found")
    return record


@app.delete("/history/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_history_record(
    record_id: str,
    actor: Actor = Depends(get_current_actor),
    analysis_service: AnalysisService = Depends(get_analysis_service),
):
    if not analysis_service.delete_history_record(actor.id, record_id):
        raise HTTPException(status_code=404, detail=f"History record {record_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.get("/analytics/me", response_model=UserAnalyticsSummary)
def my_analytics(
    tz: Optional[str] = Query(None, description="IANA timezone for streaks and usage patterns"),
    actor: Actor = Depends(get_current_actor),
    analysis_service: AnalysisService = Depends(get_analysis_service),
):
    """Analytics summary of the current user's history."""
    zone = None
    if tz is not None:
        try:
            zone = resolve_timezone(tz)
        except (ZoneInfoNotFoundError, ValueError):
            raise HTTPException(status_code=400, detail=f"Unknown timezone: {tz}")
    try:
        return analysis_service.get_user_analytics(actor.id, tz=zone)
    except ZoneInfoNotFoundError as e:
        logger.error(f"Invalid server analytics timezone {analysis_service.tz!r}: {type(e).__name__}: {str(e)}")
        raise HTTPException(status_code=500, detail="Analytics timezone is misconfigured")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
