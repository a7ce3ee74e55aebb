"""Download endpoints serving brand assets as files."""

from typing import List

from fastapi import APIRouter, Response
from pydantic import BaseModel

from ..models.schemas import ColorInfo, FontPair, GenerationRun
from ..utils import export

router = APIRouter()


class BrandVoiceBody(BaseModel):
    content: str


class SocialPostsBody(BaseModel):
    posts: List[str]


def _download(file: export.ExportFile) -> Response:
    return Response(
        content=file.content,
        media_type=file.media_type,
        headers={"Content-Disposition": f'attachment; filename="{file.filename}"'},
    )


@router.post("/palette")
async def export_palette(palette: List[ColorInfo]):
    return _download(export.export_palette(palette))


@router.post("/fonts")
async def export_fonts(fonts: FontPair):
    return _download(export.export_fonts(fonts))


@router.post("/brand-voice")
async def export_brand_voice(body: BrandVoiceBody):
    return _download(export.export_brand_voice(body.content))


@router.post("/social-posts")
async def export_social_posts(body: SocialPostsBody):
    return _download(export.export_social_posts(body.posts))


@router.post("/images")
async def export_images(run: GenerationRun):
    """Download links for every image in a run."""
    return export.collect_image_downloads(run)
