"""Flight plan CRUD and workflow action endpoints.

Gated actions (process, reset, authorize) take ``confirm`` as a query
flag. Without it they answer with the gate decision and change nothing.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field

from uplanner.api.deps import get_controller, get_loading_set, get_plan_store
from uplanner.api.outcomes import outcome_response
from uplanner.contracts.enums import ProcessingStatus
from uplanner.persistence.plan_store import FirestorePlanStore
from uplanner.services.controller import WorkflowController
from uplanner.services.loading_set import OperationLoadingSet

router = APIRouter(prefix="/flight-plans", tags=["flight-plans"])


class FlightPlanUpload(BaseModel):
    name: str = Field(..., min_length=1)
    file_content: str | None = None
    folder_id: str | None = None


class FlightPlanUpdate(BaseModel):
    """Rename and/or move. Send ``folder_id: null`` to move to the root."""

    name: str | None = Field(default=None, min_length=1)
    folder_id: str | None = None


class ScheduleUpdate(BaseModel):
    scheduled_at: datetime


class GeoawarenessRequest(BaseModel):
    airspace_context: str | None = None


@router.get("")
async def list_flight_plans(
    folder_id: str | None = None,
    processing_status: ProcessingStatus | None = None,
    store: FirestorePlanStore = Depends(get_plan_store),
) -> list[dict]:
    if processing_status is not None:
        plans = await store.list_plans_by_status(processing_status)
    else:
        plans = await store.list_plans()
    if folder_id is not None:
        plans = [p for p in plans if p.folder_id == folder_id]
    return [p.to_firestore() for p in plans]


@router.post("", status_code=201)
async def upload_flight_plan(
    payload: FlightPlanUpload,
    controller: WorkflowController = Depends(get_controller),
) -> dict:
    outcome = await controller.upload_plan(
        payload.name, file_content=payload.file_content, folder_id=payload.folder_id
    )
    outcome_response(outcome)
    return outcome.plan.to_firestore()


@router.get("/loading")
async def loading_state(
    loading: OperationLoadingSet = Depends(get_loading_set),
) -> dict[str, list[str]]:
    """Identifiers with a request in flight, per operation kind."""
    return loading.snapshot()


@router.get("/{plan_id}")
async def get_flight_plan(
    plan_id: str,
    store: FirestorePlanStore = Depends(get_plan_store),
) -> dict:
    plan = await store.get_plan(plan_id)
    if plan is None:
        raise HTTPException(status_code=404, detail="Flight plan not found")
    return plan.to_firestore()


@router.patch("/{plan_id}")
async def update_flight_plan(
    plan_id: str,
    payload: FlightPlanUpdate,
    controller: WorkflowController = Depends(get_controller),
) -> dict:
    outcome = None
    if payload.name is not None:
        outcome = await controller.rename_plan(plan_id, payload.name)
        outcome_response(outcome)
    if "folder_id" in payload.model_fields_set:
        outcome = await controller.move_plan(plan_id, payload.folder_id)
        outcome_response(outcome)
    if outcome is None:
        raise HTTPException(status_code=400, detail="Nothing to update")
    return outcome.plan.to_firestore()


@router.delete("/{plan_id}", status_code=204, response_class=Response)
async def delete_flight_plan(
    plan_id: str,
    controller: WorkflowController = Depends(get_controller),
) -> Response:
    outcome_response(await controller.delete_plan(plan_id))
    return Response(status_code=204)


# ------------------------------------------------------------------
# Workflow
# ------------------------------------------------------------------


@router.get("/{plan_id}/workflow")
async def get_workflow_state(
    plan_id: str,
    controller: WorkflowController = Depends(get_controller),
) -> dict:
    return outcome_response(await controller.workflow_state(plan_id))


@router.put("/{plan_id}/schedule")
async def set_schedule(
    plan_id: str,
    payload: ScheduleUpdate,
    controller: WorkflowController = Depends(get_controller),
) -> dict:
    return outcome_response(await controller.set_schedule(plan_id, payload.scheduled_at))


@router.post("/{plan_id}/process")
async def process_flight_plan(
    plan_id: str,
    confirm: bool = False,
    controller: WorkflowController = Depends(get_controller),
) -> dict:
    return outcome_response(await controller.process(plan_id, confirmed=confirm))


@router.post("/{plan_id}/reset")
async def reset_flight_plan(
    plan_id: str,
    confirm: bool = False,
    controller: WorkflowController = Depends(get_controller),
) -> dict:
    return outcome_response(await controller.reset(plan_id, confirmed=confirm))


@router.post("/{plan_id}/authorize")
async def authorize_flight_plan(
    plan_id: str,
    confirm: bool = False,
    randomize: bool | None = None,
    controller: WorkflowController = Depends(get_controller),
) -> dict:
    return outcome_response(
        await controller.authorize(plan_id, confirmed=confirm, randomize=randomize)
    )


@router.put("/{plan_id}/uplan")
async def update_uplan(
    plan_id: str,
    document: dict[str, Any],
    controller: WorkflowController = Depends(get_controller),
) -> dict:
    return outcome_response(
        await controller.update_authorization_document(plan_id, document)
    )


@router.post("/{plan_id}/geoawareness")
async def check_geoawareness(
    plan_id: str,
    payload: GeoawarenessRequest | None = None,
    controller: WorkflowController = Depends(get_controller),
) -> dict:
    context = payload.airspace_context if payload is not None else None
    return outcome_response(await controller.check_geoawareness(plan_id, context))


@router.get("/{plan_id}/trajectory")
async def download_trajectory(
    plan_id: str,
    controller: WorkflowController = Depends(get_controller),
) -> Response:
    outcome = await controller.download_trajectory(plan_id)
    outcome_response(outcome)
    return Response(
        content=outcome.data.csv,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{plan_id}.csv"'},
    )
