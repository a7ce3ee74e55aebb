"""Enumerations for the brand bible generator."""

from enum import Enum


class AspectRatio(str, Enum):
    """Aspect ratios accepted by the image endpoint."""
    SQUARE = "1:1"
    LANDSCAPE = "4:3"
    PORTRAIT = "3:4"
    WIDESCREEN = "16:9"
    TALL = "9:16"


class StyleHint(str, Enum):
    """How an image prompt is framed before it is sent."""
    NONE = "none"
    LOGO = "logo"


class RunStatus(str, Enum):
    """Terminal status of a generation run."""
    COMPLETED = "completed"
    FAILED = "failed"


class PipelineStage(str, Enum):
    """Stage of a generation run."""
    CRITICAL = "critical"
    LOGOS_AND_VOICE = "logos_and_voice"
    VISUAL_ASSETS = "visual_assets"


class AggregationPolicy(str, Enum):
    """Fan-in policy applied to a stage's settled calls."""
    ALL_OR_NOTHING = "all_or_nothing"
    BEST_EFFORT = "best_effort"


class ChatRole(str, Enum):
    """Author of a transcript entry."""
    USER = "user"
    MODEL = "model"


class ChatMode(str, Enum):
    """How model replies are delivered to the transcript."""
    TURN_BASED = "turn_based"
    STREAMING = "streaming"

