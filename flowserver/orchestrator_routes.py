"""API routes for orchestrator editing, validation and publishing."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from flowcore.compiler.chain_mapper import discarded_edges, orchestrator_to_chain, to_graph
from flowcore.compiler.labeler import apply_display_ids, compute_display_ids
from flowcore.compiler.validation import find_issues
from flowcore.lifecycle import (
    LifecycleError,
    PublishError,
    archive,
    ensure_editable,
    publish,
    unpublish,
)
from flowcore.models.action_chain import ActionChain
from flowcore.models.graph import WorkflowGraph
from flowcore.models.orchestrator import Orchestrator, OrchestratorStatus, OrchestratorVersion
from flowcore.models.reference import ReferenceCatalog
from flowcore.utils.identifiers import generate_orchestrator_id, utc_timestamp
from flowserver.catalog import get_catalog
from flowserver.execution_db import delete_executions
from flowserver.orchestrator_db import (
    delete_orchestrator as db_delete_orchestrator,
    get_orchestrator as db_get_orchestrator,
    insert_version,
    list_orchestrators as db_list_orchestrators,
    list_versions as db_list_versions,
    next_version_number,
    upsert_orchestrator,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class CreateOrchestratorRequest(WorkflowGraph):
    """request body for creating a draft orchestrator."""

    name: str
    description: str = ""


class SaveGraphRequest(WorkflowGraph):
    """request body for saving the canvas of a draft."""

    name: str | None = None
    description: str | None = None


class PublishResponse(BaseModel):
    orchestrator: Orchestrator
    version: OrchestratorVersion


def _require(orchestrator_id: str) -> Orchestrator:
    orchestrator = db_get_orchestrator(orchestrator_id)
    if not orchestrator:
        raise HTTPException(status_code=404, detail=f"Orchestrator not found: {orchestrator_id}")
    return orchestrator


def _require_editable(orchestrator_id: str) -> Orchestrator:
    orchestrator = _require(orchestrator_id)
    try:
        ensure_editable(orchestrator)
    except LifecycleError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return orchestrator


def _store_graph(orchestrator: Orchestrator, graph: WorkflowGraph, **fields) -> Orchestrator:
    """relabel and persist a new canvas for a draft."""
    updated = orchestrator.model_copy(update={
        "nodes": list(graph.nodes),
        "edges": list(graph.edges),
        "updated_at": utc_timestamp(),
        **{key: value for key, value in fields.items() if value is not None},
    })
    labeled = apply_display_ids(updated).graph
    upsert_orchestrator(labeled)
    return labeled


@router.get("/orchestrators")
def list_orchestrators(status: OrchestratorStatus | None = None) -> list[Orchestrator]:
    """list orchestrators, most recently updated first."""
    return db_list_orchestrators(status.value if status else None)


@router.post("/orchestrators")
def create_orchestrator(request: CreateOrchestratorRequest) -> Orchestrator:
    """create a new draft orchestrator."""
    now = utc_timestamp()
    orchestrator = Orchestrator(
        id=generate_orchestrator_id(),
        name=request.name,
        description=request.description,
        nodes=request.nodes,
        edges=request.edges,
        created_at=now,
        updated_at=now,
    )
    labeled = apply_display_ids(orchestrator).graph
    upsert_orchestrator(labeled)
    logger.info("created orchestrator %s (%s)", labeled.id, labeled.name)
    return labeled


@router.get("/orchestrators/{orchestrator_id}")
def get_orchestrator(orchestrator_id: str) -> Orchestrator:
    """get a specific orchestrator."""
    return _require(orchestrator_id)


@router.put("/orchestrators/{orchestrator_id}")
def save_orchestrator(orchestrator_id: str, request: SaveGraphRequest) -> Orchestrator:
    """replace the graph of a draft orchestrator.

    Display ids are recomputed on every save. Saving does not validate;
    call the validation endpoint for the advisory problem list.
    """
    orchestrator = _require_editable(orchestrator_id)
    return _store_graph(
        orchestrator,
        request,
        name=request.name,
        description=request.description,
    )


@router.delete("/orchestrators/{orchestrator_id}")
def delete_orchestrator(orchestrator_id: str) -> dict:
    """delete an orchestrator, its versions and its execution log."""
    _require(orchestrator_id)
    db_delete_orchestrator(orchestrator_id)
    delete_executions(orchestrator_id)
    logger.info("deleted orchestrator %s", orchestrator_id)
    return {"deleted": orchestrator_id}


@router.get("/orchestrators/{orchestrator_id}/validation")
def validate_orchestrator(
    orchestrator_id: str,
    catalog: ReferenceCatalog = Depends(get_catalog),
) -> dict:
    """advisory validation of the current graph."""
    issues = find_issues(_require(orchestrator_id), catalog)
    return {
        "errors": [issue.message for issue in issues],
        "issues": [issue.model_dump() for issue in issues],
        "can_publish": not issues,
    }


@router.get("/orchestrators/{orchestrator_id}/labels")
def get_labels(orchestrator_id: str) -> dict[str, str | None]:
    """display id per node id."""
    return compute_display_ids(_require(orchestrator_id))


@router.get("/orchestrators/{orchestrator_id}/chain")
def export_chain(orchestrator_id: str) -> dict:
    """the action chain for the current graph, plus the edges it cannot hold."""
    orchestrator = _require(orchestrator_id)
    chain = orchestrator_to_chain(orchestrator)
    return {
        "chain": chain.model_dump(mode="json", by_alias=True),
        "discarded_edges": [edge.id for edge in discarded_edges(orchestrator)],
    }


@router.put("/orchestrators/{orchestrator_id}/chain")
def import_chain(orchestrator_id: str, chain: ActionChain) -> Orchestrator:
    """replace the graph of a draft with one rebuilt from an action chain."""
    orchestrator = _require_editable(orchestrator_id)
    return _store_graph(orchestrator, to_graph(chain), name=chain.name or None)


@router.post("/orchestrators/{orchestrator_id}/publish")
def publish_orchestrator(
    orchestrator_id: str,
    catalog: ReferenceCatalog = Depends(get_catalog),
) -> PublishResponse:
    """snapshot the graph as the next version. refused while validation fails."""
    orchestrator = _require(orchestrator_id)
    version_number = next_version_number(orchestrator_id)
    try:
        published, version = publish(orchestrator, version_number, catalog)
    except PublishError as exc:
        if exc.errors:
            raise HTTPException(
                status_code=422,
                detail={"message": str(exc), "errors": exc.errors},
            ) from exc
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    insert_version(version)
    upsert_orchestrator(published)
    return PublishResponse(orchestrator=published, version=version)


@router.post("/orchestrators/{orchestrator_id}/unpublish")
def unpublish_orchestrator(orchestrator_id: str) -> Orchestrator:
    """return a published orchestrator to draft."""
    try:
        orchestrator = unpublish(_require(orchestrator_id))
    except LifecycleError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    upsert_orchestrator(orchestrator)
    return orchestrator


@router.post("/orchestrators/{orchestrator_id}/archive")
def archive_orchestrator(orchestrator_id: str) -> Orchestrator:
    try:
        orchestrator = archive(_require(orchestrator_id))
    except LifecycleError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    upsert_orchestrator(orchestrator)
    return orchestrator


@router.get("/orchestrators/{orchestrator_id}/versions")
def list_versions(orchestrator_id: str) -> list[OrchestratorVersion]:
    """published snapshots, oldest first."""
    _require(orchestrator_id)
    return db_list_versions(orchestrator_id)
