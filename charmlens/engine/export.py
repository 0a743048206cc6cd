"""Audit log export (CSV / JSON) for charmlens."""

import csv
import io
import json
from typing import Dict, List, Sequence

from charmlens.models.audit_entry import AuditEntry
from charmlens.models.enum_utils import enum_to_value
from charmlens.engine.clock import ensure_utc


CSV_COLUMNS = [
    "id",
    "actorId",
    "actorEmail",
    "actionKind",
    "description",
    "severity",
    "timestamp",
    "success",
    "ipAddress",
]


class ExportError(Exception):
    """Raised when an export the caller asked for could not be produced."""

    def __init__(self, message: str = "Export failed"):
        super().__init__(message)


def to_json(entries: Sequence[AuditEntry]) -> str:
    """Serialize entries as a pretty-printed JSON array."""
    return json.dumps(
        [entry.model_dump(mode="json") for entry in entries],
        indent=2,
        ensure_ascii=False,
    )


def to_csv(entries: Sequence[AuditEntry]) -> str:
    """Serialize entries as CSV with a fixed header row.

    Fields containing commas, quotes or line breaks are quoted and embedded
    quotes doubled (RFC 4180), so `parse_csv` restores them exactly.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for entry in entries:
        writer.writerow(_csv_row(entry))
    return buffer.getvalue()


def parse_csv(text: str) -> List[Dict[str, str]]:
    """Parse CSV produced by `to_csv` into one dict per row, keyed by header."""
    return list(csv.DictReader(io.StringIO(text, newline="")))


def _csv_row(entry: AuditEntry) -> List[str]:
    return [
        entry.id,
        entry.actor_id,
        entry.actor_email or "",
        enum_to_value(entry.action_kind),
        entry.description,
        enum_to_value(entry.severity),
        ensure_utc(entry.timestamp).isoformat(),
        "true" if entry.success else "false",
        entry.ip_address or "",
    ]
