"""SQLite storage for orchestrators and their published versions."""

import os
import sqlite3
from pathlib import Path

from flowcore.models.orchestrator import Orchestrator, OrchestratorVersion


DEFAULT_DB_PATH = Path(__file__).parent / "data" / "flows.db"
FLOW_DB_PATH = Path(os.getenv("FLOW_DB_PATH", str(DEFAULT_DB_PATH)))


def _connect() -> sqlite3.Connection:
    FLOW_DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(FLOW_DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


def init_db() -> None:
    with _connect() as conn:
        conn.execute(
            """
            create table if not exists orchestrators (
                orchestrator_id text primary key,
                orchestrator_json text not null,
                name text not null,
                status text not null,
                created_at text not null,
                updated_at text not null
            )
            """
        )
        conn.execute(
            """
            create table if not exists orchestrator_versions (
                orchestrator_id text not null,
                version integer not null,
                version_json text not null,
                published_at text,
                created_at text not null,
                primary key (orchestrator_id, version)
            )
            """
        )
        conn.execute(
            """
            create index if not exists idx_orchestrator_versions_orchestrator_id
            on orchestrator_versions(orchestrator_id)
            """
        )
        conn.commit()


def upsert_orchestrator(orchestrator: Orchestrator) -> None:
    """insert or update an orchestrator."""
    with _connect() as conn:
        conn.execute(
            """
            insert into orchestrators (
                orchestrator_id, orchestrator_json, name, status, created_at, updated_at
            )
            values (?, ?, ?, ?, ?, ?)
            on conflict(orchestrator_id) do update set
                orchestrator_json = excluded.orchestrator_json,
                name = excluded.name,
                status = excluded.status,
                updated_at = excluded.updated_at
            """,
            (
                orchestrator.id,
                orchestrator.model_dump_json(by_alias=True),
                orchestrator.name,
                orchestrator.status.value,
                orchestrator.created_at,
                orchestrator.updated_at,
            ),
        )
        conn.commit()


def get_orchestrator(orchestrator_id: str) -> Orchestrator | None:
    with _connect() as conn:
        row = conn.execute(
            "select orchestrator_json from orchestrators where orchestrator_id = ?",
            (orchestrator_id,),
        ).fetchone()
    if not row:
        return None
    return Orchestrator.model_validate_json(row["orchestrator_json"])


def list_orchestrators(status: str | None = None) -> list[Orchestrator]:
    with _connect() as conn:
        if status:
            rows = conn.execute(
                """
                select orchestrator_json from orchestrators
                where status = ?
                order by updated_at desc
                """,
                (status,),
            ).fetchall()
        else:
            rows = conn.execute(
                "select orchestrator_json from orchestrators order by updated_at desc"
            ).fetchall()
    return [Orchestrator.model_validate_json(row["orchestrator_json"]) for row in rows]


def delete_orchestrator(orchestrator_id: str) -> None:
    """delete an orchestrator and all of its published versions."""
    with _connect() as conn:
        conn.execute(
            "delete from orchestrator_versions where orchestrator_id = ?",
            (orchestrator_id,),
        )
        conn.execute(
            "delete from orchestrators where orchestrator_id = ?",
            (orchestrator_id,),
        )
        conn.commit()


def insert_version(version: OrchestratorVersion) -> None:
    """store a published snapshot. versions are never updated in place."""
    with _connect() as conn:
        conn.execute(
            """
            insert into orchestrator_versions (
                orchestrator_id, version, version_json, published_at, created_at
            )
            values (?, ?, ?, ?, ?)
            """,
            (
                version.orchestrator_id,
                version.version,
                version.model_dump_json(by_alias=True),
                version.published_at,
                version.created_at,
            ),
        )
        conn.commit()


def list_versions(orchestrator_id: str) -> list[OrchestratorVersion]:
    with _connect() as conn:
        rows = conn.execute(
            """
            select version_json from orchestrator_versions
            where orchestrator_id = ?
            order by version asc
            """,
            (orchestrator_id,),
        ).fetchall()
    return [OrchestratorVersion.model_validate_json(row["version_json"]) for row in rows]


def get_latest_version(orchestrator_id: str) -> OrchestratorVersion | None:
    with _connect() as conn:
        row = conn.execute(
            """
            select version_json from orchestrator_versions
            where orchestrator_id = ?
            order by version desc
            limit 1
            """,
            (orchestrator_id,),
        ).fetchone()
    if not row:
        return None
    return OrchestratorVersion.model_validate_json(row["version_json"])


def next_version_number(orchestrator_id: str) -> int:
    """1 for the first publish, then one past the highest stored version."""
    with _connect() as conn:
        row = conn.execute(
            "select max(version) as latest from orchestrator_versions where orchestrator_id = ?",
            (orchestrator_id,),
        ).fetchone()
    return (row["latest"] or 0) + 1
