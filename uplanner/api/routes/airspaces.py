"""U-space listing for the geoawareness selection prompt."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from uplanner.api.deps import get_dispatcher
from uplanner.api.outcomes import outcome_response
from uplanner.services.geoawareness import GeoawarenessDispatcher

router = APIRouter(prefix="/airspaces", tags=["airspaces"])


@router.get("")
async def list_airspaces(
    dispatcher: GeoawarenessDispatcher = Depends(get_dispatcher),
) -> list[dict]:
    return outcome_response(await dispatcher.list_airspaces())["data"]
