"""FastAPI application factory."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

# Load .env file from project root (must be before other imports)
load_dotenv()
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from uplanner.api.routes import airspaces, fas, flight_plans, folders  # noqa: E402
from uplanner.services.clients.fas_client import FasClient  # noqa: E402
from uplanner.services.clients.geoawareness_client import GeoawarenessClient  # noqa: E402
from uplanner.services.clients.volume_client import VolumeClient  # noqa: E402
from uplanner.services.loading_set import OperationLoadingSet  # noqa: E402

logger = logging.getLogger(__name__)


def init_state(app: FastAPI) -> None:
    """Create the process-wide loading set, snapshot caches and HTTP clients."""
    app.state.loading_set = OperationLoadingSet()
    app.state.snapshot_caches = {}
    app.state.fas_client = FasClient()
    app.state.volume_client = VolumeClient()
    app.state.geoawareness_client = GeoawarenessClient()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize Firebase Admin and the collaborator clients on startup."""
    # Initialize Firebase Admin SDK (uses ADC on Cloud Run)
    try:
        import firebase_admin
        firebase_admin.initialize_app()
        logger.info("Firebase Admin SDK initialized")
    except ValueError:
        # Already initialized
        logger.info("Firebase Admin SDK already initialized")
    except Exception as exc:
        logger.warning("Firebase Admin SDK init failed: %s", exc)

    init_state(app)
    yield

    for name in ("fas_client", "volume_client", "geoawareness_client"):
        await getattr(app.state, name).aclose()


app = FastAPI(
    title="uplanner API",
    description="Flight plan workflow and FAS authorization",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.environ.get("CORS_ORIGINS", "http://localhost:3000").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(flight_plans.router, prefix="/api")
app.include_router(folders.router, prefix="/api")
app.include_router(airspaces.router, prefix="/api")
app.include_router(fas.router, prefix="/api")


@app.get("/api/health")
async def health():
    loading: OperationLoadingSet | None = getattr(app.state, "loading_set", None)
    result = {"status": "ok"}
    if loading is not None:
        result["in_flight"] = {
            kind: len(ids) for kind, ids in loading.snapshot().items()
        }
    return result
