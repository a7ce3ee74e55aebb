"""Brand generation endpoints, including share-link replay."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from .deps import get_orchestrator
from ..core import BrandOrchestrator
from ..models.schemas import GenerationRun
from ..utils.errors import ValidationError
from ..utils.logger import get_logger
from ..utils.share import build_share_url

logger = get_logger(__name__)

router = APIRouter()


class MissionRequest(BaseModel):
    mission: str


class ShareLinkResponse(BaseModel):
    url: str


async def _run(orchestrator: BrandOrchestrator, mission: str, source: str) -> GenerationRun:
    logger.info("Generation requested", extra={"source": source})
    try:
        return await orchestrator.run(mission)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("", response_model=GenerationRun)
async def generate(
    body: MissionRequest,
    orchestrator: BrandOrchestrator = Depends(get_orchestrator),
):
    """Run the full pipeline for a typed mission."""
    return await _run(orchestrator, body.mission, "form")


@router.get("/shared", response_model=GenerationRun, name="generate_shared")
async def generate_shared(
    mission: Optional[str] = None,
    orchestrator: BrandOrchestrator = Depends(get_orchestrator),
):
    """Replay a shared link; behaves exactly like a typed mission."""
    return await _run(orchestrator, mission or "", "share_link")


@router.post("/share-link", response_model=ShareLinkResponse)
async def share_link(body: MissionRequest, request: Request):
    """Build the link that replays `mission`."""
    if not body.mission.strip():
        raise HTTPException(status_code=422, detail="Please enter your company mission.")

    base_url = request.app.state.public_base_url or str(request.url_for("generate_shared"))
    return ShareLinkResponse(url=build_share_url(base_url, body.mission))
