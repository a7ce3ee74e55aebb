"""Data models and schemas for the brand bible generator."""

from .schemas import (
    ColorInfo,
    HarmonyColor,
    ColorHarmony,
    FontPair,
    LogoDescriptions,
    BrandBible,
    ImageResult,
    GeneratedLogos,
    SocialMediaKitAssets,
    VisualAssetPrompts,
    SocialPostIdeas,
    SeoRecommendations,
    ChatMessage,
    ErrorDetail,
    GenerationRun,
)
from .enums import (
    AspectRatio,
    StyleHint,
    RunStatus,
    PipelineStage,
    AggregationPolicy,
    ChatRole,
    ChatMode,
)

__all__ = [
    "ColorInfo",
    "HarmonyColor",
    "ColorHarmony",
    "FontPair",
    "LogoDescriptions",
    "BrandBible",
    "ImageResult",
    "GeneratedLogos",
    "SocialMediaKitAssets",
    "VisualAssetPrompts",
    "SocialPostIdeas",
    "SeoRecommendations",
    "ChatMessage",
    "ErrorDetail",
    "GenerationRun",
    "AspectRatio",
    "StyleHint",
    "RunStatus",
    "PipelineStage",
    "AggregationPolicy",
    "ChatRole",
    "ChatMode",
]
