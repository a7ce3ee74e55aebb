"""Pydantic schemas for data validation."""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field

from .enums import ChatRole, PipelineStage, RunStatus
from ..utils.errors import CriticalGenerationFailure, PartialGenerationFailure

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"

CRITICAL_FAILURE_MESSAGE = (
    "Failed to generate the core brand identity. The AI may have had an issue "
    "understanding the request. Please try refining your mission statement and resubmitting."
)
PARTIAL_FAILURE_PREFIX = "Some assets could not be generated: \n- "


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


# === BRAND BIBLE ===

class ColorInfo(_Frozen):
    """One palette entry."""
    hex: str = Field(pattern=HEX_COLOR_PATTERN)
    name: str
    usage: str


class HarmonyColor(_Frozen):
    hex: str = Field(pattern=HEX_COLOR_PATTERN)
    name: str


class ColorHarmony(_Frozen):
    """A suggested colour scheme that complements the main palette."""
    name: str
    palette: List[HarmonyColor]
    explanation: str


class FontPair(_Frozen):
    header: str
    body: str
    notes: str


class LogoDescriptions(_Frozen):
    """Text prompts for the logo images. None of them ask for rendered text."""
    primary: str
    secondary: List[str] = Field(min_length=2, max_length=2)
    favicon: Optional[str] = None


class BrandBible(_Frozen):
    """Result of the critical stage. Never mutated once produced."""
    brand_name: str = Field(alias="brandName")
    palette: List[ColorInfo] = Field(min_length=5, max_length=5)
    fonts: FontPair
    logo_descriptions: LogoDescriptions = Field(alias="logoDescriptions")
    harmonies: Optional[List[ColorHarmony]] = None
    
    def with_palette(self, palette: List[ColorInfo]) -> "BrandBible":
        """Return a copy with a user-edited palette, re-validated."""
        data = self.model_dump()
        data["palette"] = [c.model_dump() for c in palette]
        return BrandBible.model_validate(data)
    
    def with_fonts(self, fonts: FontPair) -> "BrandBible":
        """Return a copy with a user-edited font pairing."""
        return self.model_copy(update={"fonts": fonts})


# === GENERATED ASSETS ===

class ImageResult(_Frozen):
    """A single generated raster image, base64 encoded."""
    data: str
    mime_type: str = "image/jpeg"
    
    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


class GeneratedLogos(_Frozen):
    primary: ImageResult
    secondary: List[ImageResult]
    favicon: Optional[ImageResult] = None


class SocialMediaKitAssets(_Frozen):
    """Banner slots and post templates; a failed image leaves its slot empty."""
    banner: Optional[ImageResult] = None
    website_banner: Optional[ImageResult] = None
    post_templates: List[Optional[ImageResult]] = Field(default_factory=list)
    
    def image_count(self) -> int:
        slots = [self.banner, self.website_banner, *self.post_templates]
        return sum(1 for slot in slots if slot is not None)


class VisualAssetPrompts(_Frozen):
    """Image prompts derived from a brand bible for the visual-assets stage."""
    mood_board: List[str]
    website_banner: str
    social_banner: str
    post_templates: List[str]


class SocialPostIdeas(_Frozen):
    posts: List[str]


class SeoRecommendations(_Frozen):
    title_tags: List[str] = Field(alias="titleTags")
    meta_description: str = Field(alias="metaDescription")
    keywords: List[str]


# === CHAT ===

class ChatMessage(_Frozen):
    role: ChatRole
    content: str


# === RUN RECORD ===

class ErrorDetail(_Frozen):
    """One failed stage, reported as one line of the run's error report."""
    stage: PipelineStage
    message: str
    cause: Optional[str] = None


class GenerationRun(_Frozen):
    """Everything one generation request produced, successes and failures."""
    run_id: int
    mission: str
    status: RunStatus = RunStatus.COMPLETED
    brand_bible: Optional[BrandBible] = None
    logos: Optional[GeneratedLogos] = None
    brand_voice: Optional[str] = None
    social_posts: Optional[List[str]] = None
    seo: Optional[SeoRecommendations] = None
    mood_board: Optional[List[ImageResult]] = None
    social_kit: Optional[SocialMediaKitAssets] = None
    errors: List[ErrorDetail] = Field(default_factory=list)
    
    @computed_field
    @property
    def error_report(self) -> str:
        """User-facing summary of every failure; empty when nothing failed."""
        if self.status == RunStatus.FAILED:
            return CRITICAL_FAILURE_MESSAGE
        if not self.errors:
            return ""
        return PARTIAL_FAILURE_PREFIX + "\n- ".join(e.message for e in self.errors)
    
    def raise_for_status(self) -> None:
        """
        Raise if the run did not fully succeed.
        
        Raises:
            CriticalGenerationFailure: The brand bible could not be produced
            PartialGenerationFailure: One or more later stages failed
        """
        if self.status == RunStatus.FAILED:
            raise CriticalGenerationFailure(self.error_report)
        if self.errors:
            raise PartialGenerationFailure(self.error_report)
