"""FastAPI dependency injection wiring."""

from __future__ import annotations

from fastapi import Depends, Request

from uplanner.api.auth import OperatorClaims, verify_firebase_token
from uplanner.persistence.plan_store import FirestorePlanStore
from uplanner.services.authorization import AuthorizationOrchestrator
from uplanner.services.clients.fas_client import FasClient
from uplanner.services.clients.geoawareness_client import GeoawarenessClient
from uplanner.services.clients.volume_client import VolumeClient
from uplanner.services.controller import WorkflowController
from uplanner.services.fas_callback import FasCallbackService
from uplanner.services.geoawareness import GeoawarenessDispatcher
from uplanner.services.loading_set import OperationLoadingSet
from uplanner.services.snapshots import PlanSnapshotCache


# ------------------------------------------------------------------
# Current user
# ------------------------------------------------------------------


def get_current_user(
    claims: OperatorClaims = Depends(verify_firebase_token),
) -> str:
    """Return the authenticated user ID."""
    return claims.uid


# ------------------------------------------------------------------
# Process-wide state and HTTP clients (singletons from app.state)
# ------------------------------------------------------------------


def get_loading_set(request: Request) -> OperationLoadingSet:
    return request.app.state.loading_set


def get_fas_client(request: Request) -> FasClient:
    return request.app.state.fas_client


def get_volume_client(request: Request) -> VolumeClient:
    return request.app.state.volume_client


def get_geoawareness_client(request: Request) -> GeoawarenessClient:
    return request.app.state.geoawareness_client


def get_snapshot_cache(
    request: Request,
    user_id: str = Depends(get_current_user),
) -> PlanSnapshotCache:
    caches: dict[str, PlanSnapshotCache] = request.app.state.snapshot_caches
    return caches.setdefault(user_id, PlanSnapshotCache())


# ------------------------------------------------------------------
# Per-request services (stateless, new instance per request is fine)
# ------------------------------------------------------------------


def get_plan_store(user_id: str = Depends(get_current_user)) -> FirestorePlanStore:
    return FirestorePlanStore(user_id)


def get_orchestrator(
    store: FirestorePlanStore = Depends(get_plan_store),
    loading: OperationLoadingSet = Depends(get_loading_set),
    fas: FasClient = Depends(get_fas_client),
    volumes: VolumeClient = Depends(get_volume_client),
    cache: PlanSnapshotCache = Depends(get_snapshot_cache),
) -> AuthorizationOrchestrator:
    return AuthorizationOrchestrator(store, loading, fas, volumes, cache=cache)


def get_dispatcher(
    store: FirestorePlanStore = Depends(get_plan_store),
    loading: OperationLoadingSet = Depends(get_loading_set),
    client: GeoawarenessClient = Depends(get_geoawareness_client),
    cache: PlanSnapshotCache = Depends(get_snapshot_cache),
) -> GeoawarenessDispatcher:
    return GeoawarenessDispatcher(store, loading, client, cache=cache)


def get_controller(
    store: FirestorePlanStore = Depends(get_plan_store),
    loading: OperationLoadingSet = Depends(get_loading_set),
    orchestrator: AuthorizationOrchestrator = Depends(get_orchestrator),
    dispatcher: GeoawarenessDispatcher = Depends(get_dispatcher),
    cache: PlanSnapshotCache = Depends(get_snapshot_cache),
) -> WorkflowController:
    return WorkflowController(store, loading, orchestrator, dispatcher, cache=cache)


def get_fas_callback_service() -> FasCallbackService:
    return FasCallbackService()
