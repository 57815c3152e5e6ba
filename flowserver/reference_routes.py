"""API routes for read-only reference data."""

from fastapi import APIRouter, Depends

from flowcore.models.reference import ExternalJourney, ReferenceCatalog
from flowserver.catalog import get_catalog

router = APIRouter()


@router.get("/journeys")
def list_journeys(catalog: ReferenceCatalog = Depends(get_catalog)) -> list[ExternalJourney]:
    """journeys a start-flow node can target."""
    return list(catalog.journeys)
