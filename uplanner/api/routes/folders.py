"""Folder CRUD endpoints. Deleting a folder deletes its flight plans."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field

from uplanner.api.deps import get_controller, get_plan_store
from uplanner.api.outcomes import outcome_response
from uplanner.persistence.plan_store import FirestorePlanStore
from uplanner.services.controller import WorkflowController

router = APIRouter(prefix="/folders", tags=["folders"])


class FolderPayload(BaseModel):
    name: str = Field(..., min_length=1)


@router.get("")
async def list_folders(
    store: FirestorePlanStore = Depends(get_plan_store),
) -> list[dict]:
    return [f.to_firestore() for f in await store.list_folders()]


@router.post("", status_code=201)
async def create_folder(
    payload: FolderPayload,
    controller: WorkflowController = Depends(get_controller),
) -> dict:
    outcome = await controller.create_folder(payload.name)
    outcome_response(outcome)
    return outcome.data.to_firestore()


@router.get("/{folder_id}")
async def get_folder(
    folder_id: str,
    store: FirestorePlanStore = Depends(get_plan_store),
) -> dict:
    folder = await store.get_folder(folder_id)
    if folder is None:
        raise HTTPException(status_code=404, detail="Folder not found")
    return folder.to_firestore()


@router.patch("/{folder_id}")
async def rename_folder(
    folder_id: str,
    payload: FolderPayload,
    controller: WorkflowController = Depends(get_controller),
) -> dict:
    outcome = await controller.rename_folder(folder_id, payload.name)
    outcome_response(outcome)
    return outcome.data.to_firestore()


@router.delete("/{folder_id}", status_code=204, response_class=Response)
async def delete_folder(
    folder_id: str,
    controller: WorkflowController = Depends(get_controller),
) -> Response:
    outcome_response(await controller.delete_folder(folder_id))
    return Response(status_code=204)
