"""Operator authentication with Firebase ID tokens.

Every user-facing route runs as one operator, identified by the ``uid`` of
the verified token. Plans and folders are stored under that uid. The FAS
callback route is the exception: FAS carries no operator token.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from fastapi import Header, HTTPException
from firebase_admin import auth as firebase_auth

logger = logging.getLogger(__name__)

DEV_OPERATOR_ID = os.getenv("UPLANNER_DEV_OPERATOR", "dev-operator")


@dataclass
class OperatorClaims:
    uid: str
    email: str | None = None
    name: str | None = None
    email_verified: bool = False


def _auth_disabled() -> bool:
    return os.environ.get("UPLANNER_AUTH_DISABLED") == "1"


def _bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing authorization header")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="Invalid authorization header")
    return token.strip()


async def verify_firebase_token(
    authorization: str | None = Header(None, description="Bearer <Firebase ID token>"),
) -> OperatorClaims:
    """Resolve the operator behind the request.

    With ``UPLANNER_AUTH_DISABLED=1`` every request runs as
    ``UPLANNER_DEV_OPERATOR`` and no token is checked. An expired or
    invalid token is a 401; failing to fetch Google's signing
    certificates is a 503 so that clients retry instead of logging out.
    """
    if _auth_disabled():
        return OperatorClaims(uid=DEV_OPERATOR_ID, name="Dev Operator", email_verified=True)

    token = _bearer_token(authorization)
    try:
        decoded = firebase_auth.verify_id_token(token)
    except firebase_auth.ExpiredIdTokenError as exc:
        raise HTTPException(status_code=401, detail="Token expired") from exc
    except firebase_auth.CertificateFetchError as exc:
        logger.warning("Could not fetch Firebase signing certificates: %s", exc)
        raise HTTPException(
            status_code=503, detail="Authentication temporarily unavailable"
        ) from exc
    except (firebase_auth.InvalidIdTokenError, ValueError) as exc:
        raise HTTPException(status_code=401, detail=f"Invalid token: {exc}") from exc

    return OperatorClaims(
        uid=decoded["uid"],
        email=decoded.get("email"),
        name=decoded.get("name"),
        email_verified=bool(decoded.get("email_verified", False)),
    )
