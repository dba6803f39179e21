"""Share link classification and resolution endpoints."""

from __future__ import annotations

from typing import Any, cast

import structlog
from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from teraplay.domain.entities.share import ResolvedDescriptor
from teraplay.domain.exceptions import (
    ResolutionExhaustedError,
    ShareLinkRejectedError,
    user_message,
)
from teraplay.infrastructure.common.formatting import format_file_size
from teraplay.infrastructure.share import classify_share_url, extract_share_identifier
from teraplay.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["resolve"])


class ResolveRequest(BaseModel):
    url: str = Field(..., description="Terabox share link (scheme optional).")


def present_descriptor(descriptor: ResolvedDescriptor) -> dict[str, Any]:
    return {
        "url": descriptor.url,
        "title": descriptor.title,
        "size": descriptor.size,
        "size_label": format_file_size(descriptor.size),
        "is_external": descriptor.is_external,
        "thumbnail": descriptor.thumbnail,
        "strategy": descriptor.strategy,
    }


@router.get("/classify")
async def classify(
    url: str = Query(..., description="Candidate share link."),
) -> dict[str, Any]:
    """Report whether *url* is accepted and which variant it maps to.

    Pure inspection: no network calls are made.
    """
    result = classify_share_url(url)
    identifier = (
        extract_share_identifier(result.normalized_url) if result.accepted else None
    )
    return {
        "accepted": result.accepted,
        "normalized_url": result.normalized_url,
        "variant": result.variant.value if result.variant else None,
        "identifier": identifier,
    }


@router.post("/resolve")
async def resolve(body: ResolveRequest, request: Request) -> Any:
    """Resolve a share link to a streamable descriptor.

    Raises:
        HTTPException(422): The link is not a supported share link.

    Returns 502 with the per-strategy attempts when every strategy failed.
    """
    state = cast(AppState, request.app.state)

    try:
        descriptor = await state.resolve_share_uc.execute(body.url)
    except ShareLinkRejectedError as exc:
        log.info("resolve_rejected", url=body.url[:120])
        raise HTTPException(status_code=422, detail=user_message(exc)) from exc
    except ResolutionExhaustedError as exc:
        return JSONResponse(
            status_code=502,
            content={
                "detail": user_message(exc),
                "identifier": exc.identifier,
                "attempts": [
                    {
                        "strategy": f.strategy,
                        "kind": f.kind.value,
                        "reason": f.reason,
                        "status_code": f.status_code,
                    }
                    for f in exc.attempts
                ],
            },
        )

    return present_descriptor(descriptor)
