"""Serialize brand assets into downloadable files."""

import json
from dataclasses import dataclass
from typing import List
from urllib.parse import quote

from ..models.schemas import ColorInfo, FontPair, GenerationRun, ImageResult

PALETTE_FILENAME = "color-palette.json"
FONTS_FILENAME = "font-pairings.json"
BRAND_VOICE_FILENAME = "brand-voice.md"
SOCIAL_POSTS_FILENAME = "social-media-posts.txt"

PRIMARY_LOGO_FILENAME = "primary-logo.png"
FAVICON_FILENAME = "favicon.png"
PROFILE_PICTURE_FILENAME = "profile-picture.png"
SOCIAL_BANNER_FILENAME = "social-media-banner.png"
WEBSITE_BANNER_FILENAME = "website-hero-banner.png"


@dataclass(frozen=True)
class ExportFile:
    filename: str
    media_type: str
    content: str
    
    def to_data_uri(self) -> str:
        """Percent-encoded data URI, the form a browser download link takes."""
        return f"data:{self.media_type};charset=utf-8,{quote(self.content, safe='')}"


def export_palette(palette: List[ColorInfo]) -> ExportFile:
    content = json.dumps([c.model_dump() for c in palette], indent=2, ensure_ascii=False)
    return ExportFile(PALETTE_FILENAME, "text/json", content)


def export_fonts(fonts: FontPair) -> ExportFile:
    content = json.dumps(fonts.model_dump(), indent=2, ensure_ascii=False)
    return ExportFile(FONTS_FILENAME, "text/json", content)


def export_brand_voice(brand_voice: str) -> ExportFile:
    return ExportFile(BRAND_VOICE_FILENAME, "text/markdown", brand_voice)


def export_social_posts(posts: List[str]) -> ExportFile:
    """Number each idea and separate them with horizontal rules."""
    content = "\n\n---\n\n".join(
        f"Post Idea {index}:\n{idea}" for index, idea in enumerate(posts, start=1)
    )
    return ExportFile(SOCIAL_POSTS_FILENAME, "text/plain", content)


def secondary_mark_filename(index: int) -> str:
    return f"secondary-mark-{index + 1}.png"


def mood_board_filename(index: int) -> str:
    return f"moodboard-image-{index + 1}.png"


def post_template_filename(index: int) -> str:
    return f"post-template-{index + 1}.png"


def image_download(image: ImageResult, filename: str) -> dict:
    """Href/filename pair for an image download link."""
    return {"filename": filename, "href": image.data_uri}


def collect_image_downloads(run: GenerationRun) -> List[dict]:
    """Every image a run produced, each under its fixed download filename."""
    downloads = []
    
    if run.logos:
        downloads.append(image_download(run.logos.primary, PRIMARY_LOGO_FILENAME))
        for index, image in enumerate(run.logos.secondary):
            downloads.append(image_download(image, secondary_mark_filename(index)))
        if run.logos.favicon:
            downloads.append(image_download(run.logos.favicon, FAVICON_FILENAME))
    
    for index, image in enumerate(run.mood_board or []):
        downloads.append(image_download(image, mood_board_filename(index)))
    
    kit = run.social_kit
    if kit:
        if run.logos:
            # The profile picture slot reuses the primary logo
            downloads.append(image_download(run.logos.primary, PROFILE_PICTURE_FILENAME))
        if kit.banner:
            downloads.append(image_download(kit.banner, SOCIAL_BANNER_FILENAME))
        if kit.website_banner:
            downloads.append(image_download(kit.website_banner, WEBSITE_BANNER_FILENAME))
        for index, image in enumerate(kit.post_templates):
            if image is not None:
                downloads.append(image_download(image, post_template_filename(index)))
    
    return downloads
