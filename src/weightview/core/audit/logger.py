"""Audit logger — access logging for readings controller commands.

Records every gated command (load, add, delete, permission request) in a
PHI-free audit trail:

* ``input_hash`` — SHA-256 of canonical JSON; raw weights never hit the log.
* ``permitted``  — whether the permission pre-check let the command run.
* ``status``     — 'success' or 'failure', with the fault class name.
"""

from __future__ import annotations

import hashlib
import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from weightview.core.storage.database import ReadingsDatabase

logger = logging.getLogger(__name__)


def _hash_input(data: Any) -> str:
    """SHA-256 hash of canonical JSON.

    Returns:
        Hex-encoded SHA-256 digest, or empty string if ``data`` is not
        JSON-serializable.
    """
    try:
        canonical = json.dumps(data, sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode()).hexdigest()
    except (TypeError, ValueError):
        return ""


@dataclass
class AuditEvent:
    """A single audit log entry."""

    action: str                          # 'command' | 'data_delete'
    command: str = ""
    input_hash: str = ""
    permitted: bool = False
    sample_id: str | None = None
    duration_ms: float | None = None
    status: str = "success"              # 'success' | 'failure'
    error_type: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class AuditLogger:
    """Records audit events to the ``audit_log`` SQLite table.

    All writes are committed immediately so no entry is lost on crash.

    Usage::

        audit = AuditLogger(readings_db)
        audit.log_command(
            "add_reading",
            {"value_kg": 72.4},
            permitted=True,
            duration_ms=3.1,
        )
    """

    def __init__(self, database: ReadingsDatabase) -> None:
        self._db = database

    # ---------------------------------------------------------------
    # Write
    # ---------------------------------------------------------------

    def log_event(self, event: AuditEvent) -> str:
        """Insert an audit event and return its UUID.

        A failing audit write is logged and reported as an empty ID; it
        never breaks the command being audited.
        """
        event_id = str(uuid.uuid4())
        now = datetime.now(timezone.utc).isoformat()

        metadata_json = (
            json.dumps(event.metadata, separators=(",", ":"))
            if event.metadata
            else None
        )

        try:
            conn = self._db.connection
            conn.execute(
                """INSERT INTO audit_log
                   (id, timestamp, action, command, input_hash, permitted,
                    sample_id, duration_ms, status, error_type, metadata_json)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    event_id,
                    now,
                    event.action,
                    event.command or None,
                    event.input_hash or None,
                    1 if event.permitted else 0,
                    event.sample_id,
                    event.duration_ms,
                    event.status,
                    event.error_type,
                    metadata_json,
                ),
            )
            conn.commit()
        except Exception:
            logger.exception("Failed to write audit event — event lost")
            return ""

        return event_id

    def log_command(
        self,
        command: str,
        command_input: Any = None,
        *,
        permitted: bool,
        duration_ms: float | None = None,
        status: str = "success",
        error_type: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """Convenience wrapper for logging a controller command.

        Args:
            command: Command name ('initial_load', 'add_reading', ...).
            command_input: Command arguments (hashed, never stored raw).
            permitted: Result of the permission pre-check.
            duration_ms: Command duration in milliseconds.
            status: 'success' or 'failure'.
            error_type: Exception class name on failure.
            metadata: Additional non-PHI metadata.
        """
        return self.log_event(AuditEvent(
            action="command",
            command=command,
            input_hash=_hash_input(command_input) if command_input else "",
            permitted=permitted,
            duration_ms=duration_ms,
            status=status,
            error_type=error_type,
            metadata=metadata or {},
        ))

    def log_data_delete(
        self,
        *,
        command: str = "",
        sample_id: str | None = None,
        count: int = 0,
    ) -> str:
        """Log a data deletion event."""
        return self.log_event(AuditEvent(
            action="data_delete",
            command=command,
            permitted=True,
            sample_id=sample_id,
            metadata={"records_deleted": count},
        ))

    # ---------------------------------------------------------------
    # Read
    # ---------------------------------------------------------------

    def get_events(
        self,
        *,
        action: str | None = None,
        command: str | None = None,
        since: str | None = None,
        limit: int = 50,
    ) -> list[dict[str, Any]]:
        """Query audit events with optional filters, newest first."""
        conditions: list[str] = []
        params: list[Any] = []

        if action:
            conditions.append("action = ?")
            params.append(action)
        if command:
            conditions.append("command = ?")
            params.append(command)
        if since:
            conditions.append("timestamp >= ?")
            params.append(since)

        where = (" WHERE " + " AND ".join(conditions)) if conditions else ""
        query = f"SELECT * FROM audit_log{where} ORDER BY timestamp DESC LIMIT ?"
        params.append(limit)

        rows = self._db.connection.execute(query, params).fetchall()
        return [dict(row) for row in rows]

    def count_events(self, *, since: str | None = None) -> int:
        """Count total audit events, optionally since a timestamp."""
        if since:
            row = self._db.connection.execute(
                "SELECT COUNT(*) FROM audit_log WHERE timestamp >= ?", (since,)
            ).fetchone()
        else:
            row = self._db.connection.execute(
                "SELECT COUNT(*) FROM audit_log"
            ).fetchone()
        return row[0]

    def count_failures(self, *, since: str | None = None) -> int:
        """Count commands that ended in a store fault."""
        query = "SELECT COUNT(*) FROM audit_log WHERE status = 'failure'"
        params: tuple[Any, ...] = ()
        if since:
            query += " AND timestamp >= ?"
            params = (since,)
        return self._db.connection.execute(query, params).fetchone()[0]
