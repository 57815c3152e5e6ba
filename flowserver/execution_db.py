"""SQLite storage for executions and their node event log."""

import sqlite3

from flowcore.models.execution import ExecutionRecord, NodeExecutionEvent
from flowserver.orchestrator_db import FLOW_DB_PATH


def _connect() -> sqlite3.Connection:
    FLOW_DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(FLOW_DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


def init_db() -> None:
    with _connect() as conn:
        conn.execute(
            """
            create table if not exists executions (
                execution_id text primary key,
                orchestrator_id text not null,
                version integer not null,
                status text not null,
                record_json text not null,
                started_at text not null
            )
            """
        )
        conn.execute(
            """
            create table if not exists execution_events (
                id integer primary key autoincrement,
                execution_id text not null,
                orchestrator_id text not null,
                event_json text not null,
                status text not null,
                timestamp text
            )
            """
        )
        conn.execute(
            "create index if not exists idx_executions_orchestrator_id on executions(orchestrator_id)"
        )
        conn.execute(
            "create index if not exists idx_execution_events_execution_id on execution_events(execution_id)"
        )
        conn.execute(
            "create index if not exists idx_execution_events_orchestrator_id on execution_events(orchestrator_id)"
        )
        conn.commit()


def upsert_execution(record: ExecutionRecord) -> None:
    with _connect() as conn:
        conn.execute(
            """
            insert into executions (
                execution_id, orchestrator_id, version, status, record_json, started_at
            )
            values (?, ?, ?, ?, ?, ?)
            on conflict(execution_id) do update set
                status = excluded.status,
                record_json = excluded.record_json
            """,
            (
                record.execution_id,
                record.orchestrator_id,
                record.version,
                record.status.value,
                record.model_dump_json(by_alias=True),
                record.started_at,
            ),
        )
        conn.commit()


def get_execution(execution_id: str) -> ExecutionRecord | None:
    with _connect() as conn:
        row = conn.execute(
            "select record_json from executions where execution_id = ?",
            (execution_id,),
        ).fetchone()
    if not row:
        return None
    return ExecutionRecord.model_validate_json(row["record_json"])


def list_executions(
    orchestrator_id: str | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[ExecutionRecord]:
    with _connect() as conn:
        if orchestrator_id:
            rows = conn.execute(
                """
                select record_json from executions
                where orchestrator_id = ?
                order by started_at desc
                limit ? offset ?
                """,
                (orchestrator_id, limit, offset),
            ).fetchall()
        else:
            rows = conn.execute(
                """
                select record_json from executions
                order by started_at desc
                limit ? offset ?
                """,
                (limit, offset),
            ).fetchall()
    return [ExecutionRecord.model_validate_json(row["record_json"]) for row in rows]


def insert_events(
    execution_id: str,
    orchestrator_id: str,
    events: list[NodeExecutionEvent],
) -> int:
    if not events:
        return 0
    rows = [
        (
            execution_id,
            orchestrator_id,
            event.model_dump_json(by_alias=True),
            event.status.value,
            event.timestamp,
        )
        for event in events
    ]
    with _connect() as conn:
        conn.executemany(
            """
            insert into execution_events (
                execution_id, orchestrator_id, event_json, status, timestamp
            )
            values (?, ?, ?, ?, ?)
            """,
            rows,
        )
        conn.commit()
    return len(rows)


def load_events(execution_id: str) -> list[NodeExecutionEvent]:
    """events of one execution, in arrival order."""
    with _connect() as conn:
        rows = conn.execute(
            "select event_json from execution_events where execution_id = ? order by id asc",
            (execution_id,),
        ).fetchall()
    return [NodeExecutionEvent.model_validate_json(row["event_json"]) for row in rows]


def load_orchestrator_events(orchestrator_id: str) -> list[NodeExecutionEvent]:
    """every event reported for any execution of an orchestrator."""
    with _connect() as conn:
        rows = conn.execute(
            "select event_json from execution_events where orchestrator_id = ? order by id asc",
            (orchestrator_id,),
        ).fetchall()
    return [NodeExecutionEvent.model_validate_json(row["event_json"]) for row in rows]


def delete_executions(orchestrator_id: str) -> None:
    with _connect() as conn:
        conn.execute(
            "delete from execution_events where orchestrator_id = ?",
            (orchestrator_id,),
        )
        conn.execute(
            "delete from executions where orchestrator_id = ?",
            (orchestrator_id,),
        )
        conn.commit()
