"""Reference catalog of external journeys that start-flow nodes can launch."""

import json
import logging
import os
from pathlib import Path

from fastapi import Request

from flowcore.models.reference import ExternalJourney, ReferenceCatalog

logger = logging.getLogger(__name__)

# optional JSON file: a list of journeys or {"journeys": [...]}
JOURNEY_CATALOG_PATH = os.getenv("JOURNEY_CATALOG_PATH")

DEFAULT_JOURNEYS = (
    ExternalJourney(id="pre-clt", name="CLT Pre-boarding", steps=12, estimated_days=5),
    ExternalJourney(id="pre-pj", name="PJ Pre-boarding", steps=8, estimated_days=3),
    ExternalJourney(id="pre-intern", name="Intern Pre-boarding", steps=6, estimated_days=2),
    ExternalJourney(id="onb-org", name="Organizational Onboarding", steps=15, estimated_days=7),
    ExternalJourney(id="onb-tech", name="Technology Onboarding", steps=20, estimated_days=14),
    ExternalJourney(id="onb-sales", name="Sales Onboarding", steps=18, estimated_days=10),
    ExternalJourney(id="onb-cs", name="CS Onboarding", steps=15, estimated_days=8),
)


def load_catalog(path: Path | str | None = JOURNEY_CATALOG_PATH) -> ReferenceCatalog:
    """Load the journey catalog from ``path``, or the built-in journeys."""
    if not path:
        return ReferenceCatalog(journeys=DEFAULT_JOURNEYS)

    with open(path) as f:
        data = json.load(f)
    if isinstance(data, list):
        data = {"journeys": data}
    catalog = ReferenceCatalog.model_validate(data)
    logger.info("loaded %d journeys from %s", len(catalog.journeys), path)
    return catalog


def get_catalog(request: Request) -> ReferenceCatalog:
    """FastAPI dependency: the catalog loaded at startup."""
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        catalog = load_catalog()
        request.app.state.catalog = catalog
    return catalog
