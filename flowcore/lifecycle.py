"""Orchestrator lifecycle: draft -> published -> (draft | archived).

Validation errors are advisory while editing; ``publish`` is the one place
where they block. The functions here return updated copies and never
touch storage. Snapshot persistence belongs to the caller.
"""

from __future__ import annotations

import logging

from flowcore.compiler.chain_mapper import orchestrator_to_chain
from flowcore.compiler.labeler import apply_display_ids
from flowcore.compiler.validation import validate
from flowcore.models.orchestrator import (
    Orchestrator,
    OrchestratorStatus,
    OrchestratorVersion,
)
from flowcore.models.reference import ReferenceCatalog
from flowcore.utils.identifiers import utc_timestamp

logger = logging.getLogger(__name__)


class LifecycleError(RuntimeError):
    """The orchestrator is in the wrong state for the requested transition."""


class PublishError(LifecycleError):
    """Publishing was refused; ``errors`` holds the validation problems."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class TriggerError(LifecycleError):
    """Only published orchestrators can be triggered."""


def ensure_editable(orchestrator: Orchestrator) -> None:
    if orchestrator.status != OrchestratorStatus.draft:
        raise LifecycleError(
            f"Orchestrator {orchestrator.id} is {orchestrator.status.value}; "
            "unpublish it before editing"
        )


def ensure_triggerable(orchestrator: Orchestrator) -> None:
    if orchestrator.status != OrchestratorStatus.published:
        raise TriggerError(
            f"Orchestrator {orchestrator.id} is {orchestrator.status.value}; "
            "only published orchestrators can be triggered"
        )


def publish(
    orchestrator: Orchestrator,
    version: int,
    catalog: ReferenceCatalog | None = None,
) -> tuple[Orchestrator, OrchestratorVersion]:
    """Snapshot the current graph as ``version`` and mark the orchestrator published.

    Raises:
        PublishError: if the orchestrator is archived or its graph has
            validation errors.
    """
    if orchestrator.status == OrchestratorStatus.archived:
        raise PublishError(f"Orchestrator {orchestrator.id} is archived")

    errors = validate(orchestrator, catalog)
    if errors:
        raise PublishError(
            f"Orchestrator {orchestrator.id} has {len(errors)} validation error(s)",
            errors,
        )

    labeled = apply_display_ids(orchestrator).graph
    frozen_graph = labeled.snapshot()
    now = utc_timestamp()
    snapshot = OrchestratorVersion(
        orchestrator_id=orchestrator.id,
        version=version,
        nodes=frozen_graph.nodes,
        edges=frozen_graph.edges,
        chain=orchestrator_to_chain(labeled),
        published_at=now,
        created_at=now,
    )
    published = labeled.model_copy(update={
        "status": OrchestratorStatus.published,
        "published_version": version,
        "updated_at": now,
    })
    logger.info("published orchestrator %s as version %d", orchestrator.id, version)
    return published, snapshot


def unpublish(orchestrator: Orchestrator) -> Orchestrator:
    """Return a published orchestrator to draft so it can be edited again."""
    if orchestrator.status != OrchestratorStatus.published:
        raise LifecycleError(f"Orchestrator {orchestrator.id} is not published")
    logger.info("unpublished orchestrator %s", orchestrator.id)
    return orchestrator.model_copy(update={
        "status": OrchestratorStatus.draft,
        "updated_at": utc_timestamp(),
    })


def archive(orchestrator: Orchestrator) -> Orchestrator:
    if orchestrator.status == OrchestratorStatus.archived:
        raise LifecycleError(f"Orchestrator {orchestrator.id} is already archived")
    logger.info("archived orchestrator %s", orchestrator.id)
    return orchestrator.model_copy(update={
        "status": OrchestratorStatus.archived,
        "updated_at": utc_timestamp(),
    })
