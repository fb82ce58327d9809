"""Spotlight Route - share-card image for a claim (PNG by default, SVG on request)."""

import asyncio
from typing import Literal

from fastapi import APIRouter, Depends, Query, Response

from octopus.api.dependencies import get_chain, get_spotlight_renderer
from octopus.core.errors import ResourceNotFoundError
from octopus.infrastructure.chain_client import ChainClient
from octopus.services.spotlight import SpotlightRenderer

router = APIRouter(prefix="/api/v1", tags=["spotlight"])


@router.get("/spotlight")
async def spotlight(
    claim_id: int = Query(...),
    format: Literal["png", "svg"] = Query("png"),
    chain: ChainClient = Depends(get_chain),
    renderer: SpotlightRenderer = Depends(get_spotlight_renderer),
):
    claim = await chain.claim(claim_id)
    if claim is None:
        raise ResourceNotFoundError("Claim", str(claim_id))
    community = await chain.community(claim.community_id)
    arguments = await chain.claim_arguments(claim_id)

    svg = renderer.render_svg(
        claim, community.name if community else claim.community_id, len(arguments),
    )
    if format == "svg":
        return Response(content=svg, media_type="image/svg+xml")
    # cairo rasterising is CPU-bound; keep it off the event loop
    png = await asyncio.to_thread(renderer.render_png, svg)
    return Response(content=png, media_type="image/png")
