"""API routes for triggering orchestrators and reading their execution log.

The runtime that actually executes a chain lives outside this server. It
reports node events back through ``POST /executions/{id}/events``.
"""

import logging
from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ValidationError

from flowcore.analysis.execution_summary import summarize_executions
from flowcore.lifecycle import TriggerError, ensure_triggerable
from flowcore.models.execution import (
    ExecutionRecord,
    ExecutionStatus,
    NodeExecutionEvent,
)
from flowcore.utils.identifiers import generate_event_id, generate_execution_id, utc_timestamp
from flowserver.execution_db import (
    get_execution,
    insert_events,
    list_executions as db_list_executions,
    load_events,
    load_orchestrator_events,
    upsert_execution,
)
from flowserver.orchestrator_db import get_latest_version, get_orchestrator, upsert_orchestrator

logger = logging.getLogger(__name__)

router = APIRouter()

FINISHED_STATUSES = {ExecutionStatus.completed, ExecutionStatus.failed}


class TriggerRequest(BaseModel):
    """Request body for triggering a published orchestrator."""

    orchestrator_id: str
    payload: dict[str, Any] = {}


class EventIngestRequest(BaseModel):
    """Request body for reporting node events of one execution."""

    events: list[dict]
    status: ExecutionStatus | None = None


@router.post("/trigger")
def trigger(request: TriggerRequest) -> ExecutionRecord:
    """Record a pending execution against the latest published version."""
    orchestrator = get_orchestrator(request.orchestrator_id)
    if not orchestrator:
        raise HTTPException(
            status_code=404,
            detail=f"Orchestrator not found: {request.orchestrator_id}",
        )
    try:
        ensure_triggerable(orchestrator)
    except TriggerError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    version = get_latest_version(orchestrator.id)
    if version is None:
        raise HTTPException(
            status_code=409,
            detail=f"Orchestrator {orchestrator.id} has no published version",
        )

    record = ExecutionRecord(
        execution_id=generate_execution_id(),
        orchestrator_id=orchestrator.id,
        version=version.version,
        status=ExecutionStatus.pending,
        started_at=utc_timestamp(),
    )
    upsert_execution(record)
    logger.info(
        "triggered orchestrator %s v%d as execution %s",
        orchestrator.id,
        version.version,
        record.execution_id,
    )
    return record


@router.get("/executions")
def list_executions(
    orchestrator_id: str | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[ExecutionRecord]:
    """List executions, newest first."""
    return db_list_executions(orchestrator_id, limit=limit, offset=offset)


@router.get("/executions/{execution_id}")
def get_execution_endpoint(execution_id: str) -> ExecutionRecord:
    record = get_execution(execution_id)
    if not record:
        raise HTTPException(status_code=404, detail=f"Execution not found: {execution_id}")
    return record


@router.get("/executions/{execution_id}/events")
def get_events(execution_id: str) -> list[NodeExecutionEvent]:
    """Events of one execution, in the order they were reported."""
    if not get_execution(execution_id):
        raise HTTPException(status_code=404, detail=f"Execution not found: {execution_id}")
    return load_events(execution_id)


@router.post("/executions/{execution_id}/events")
def ingest_events(execution_id: str, request: EventIngestRequest) -> dict:
    """Append runtime events and refresh the orchestrator's health counters."""
    record = get_execution(execution_id)
    if not record:
        raise HTTPException(status_code=404, detail=f"Execution not found: {execution_id}")

    events: list[NodeExecutionEvent] = []
    for payload in request.events:
        payload = {"id": generate_event_id(), "timestamp": utc_timestamp(), **payload}
        reported = payload.get("executionId", payload.get("execution_id"))
        if reported is not None and reported != execution_id:
            raise HTTPException(
                status_code=400,
                detail="execution_id mismatch between path and event payload",
            )
        payload["executionId"] = execution_id
        payload.pop("execution_id", None)
        try:
            events.append(NodeExecutionEvent.model_validate(payload))
        except ValidationError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc

    inserted = insert_events(execution_id, record.orchestrator_id, events)

    if request.status is not None and request.status != record.status:
        update: dict[str, Any] = {"status": request.status}
        if request.status in FINISHED_STATUSES:
            update["finished_at"] = utc_timestamp()
        upsert_execution(record.model_copy(update=update))

    response = {"execution_id": execution_id, "inserted": inserted}
    orchestrator = get_orchestrator(record.orchestrator_id)
    if orchestrator is not None:
        summary = summarize_executions(load_orchestrator_events(orchestrator.id))
        upsert_orchestrator(orchestrator.model_copy(update={
            "execution_health": summary.execution_health,
            "error_count": summary.error_count,
            "last_execution": summary.last_execution,
        }))
        response["execution_health"] = summary.execution_health
        response["error_count"] = summary.error_count
    return response


@router.get("/orchestrators/{orchestrator_id}/executions/summary")
def get_execution_summary(orchestrator_id: str) -> dict:
    """Event counts and health over every execution of an orchestrator."""
    if not get_orchestrator(orchestrator_id):
        raise HTTPException(status_code=404, detail=f"Orchestrator not found: {orchestrator_id}")
    summary = summarize_executions(load_orchestrator_events(orchestrator_id))
    return asdict(summary)
