"""FastAPI application for editing, publishing and monitoring orchestrators."""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dotenv import load_dotenv
load_dotenv()  # load environment variables from .env file

from flowserver.catalog import load_catalog
from flowserver.db import init_all
from flowserver.execution_routes import router as execution_router
from flowserver.orchestrator_db import FLOW_DB_PATH
from flowserver.orchestrator_routes import router as orchestrator_router
from flowserver.reference_routes import router as reference_router

# CORS origins - configurable via environment variable
# Use comma-separated values for multiple origins, or "*" for all (development only)
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")
FLOW_LOG_LEVEL = os.getenv("FLOW_LOG_LEVEL", "INFO").upper()

logging.basicConfig(
    level=FLOW_LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database tables and reference data on startup."""
    init_all()
    app.state.catalog = load_catalog()
    logger.info("flow database at %s", FLOW_DB_PATH)
    yield


app = FastAPI(
    title="PeopleOps Flow API",
    description="API server for orchestrator graphs, publishing and execution logs",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# include routes
app.include_router(orchestrator_router, prefix="/api")
app.include_router(execution_router, prefix="/api")
app.include_router(reference_router, prefix="/api")


@app.get("/")
def root():
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": "0.1.0",
        "flow_db": str(FLOW_DB_PATH),
        "endpoints": {
            "orchestrators": "/api/orchestrators",
            "trigger": "/api/trigger",
            "executions": "/api/executions",
            "journeys": "/api/journeys",
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
