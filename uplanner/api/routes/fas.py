"""FAS callback endpoint.

Called by the Flight Authorization Service itself, so it carries no user
token: the submission reference identifies the plan.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from uplanner.api.deps import get_fas_callback_service
from uplanner.persistence.errors import DocumentNotFoundError
from uplanner.services.errors import InvalidCallbackError
from uplanner.services.fas_callback import FasCallbackService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/fas", tags=["fas"])


class FasCallback(BaseModel):
    state: str | None = None
    message: Any = None


@router.put("/{external_response_number}")
async def fas_callback(
    external_response_number: str,
    payload: FasCallback,
    service: FasCallbackService = Depends(get_fas_callback_service),
) -> dict:
    if not payload.state:
        raise HTTPException(status_code=400, detail="state is required")
    try:
        plan = await service.apply(external_response_number, payload.state, payload.message)
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Unknown FAS reference") from exc
    except InvalidCallbackError as exc:
        logger.warning("FAS callback %s rejected: %s", external_response_number, exc)
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return {
        "id": plan.id,
        "authorization_status": plan.authorization_status,
        "authorization_message": plan.authorization_message,
    }
