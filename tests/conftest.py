"""Pytest configuration and shared fixtures."""

import asyncio
from typing import Callable, List, Optional

import pytest

from brandbible.core import BrandGateway, BrandOrchestrator
from brandbible.models import (
    AspectRatio,
    BrandBible,
    ImageResult,
    StyleHint,
)
from brandbible.core import prompts
from brandbible.utils.config import PipelineConfig
from brandbible.utils.errors import ChatTurnFailure, GenerationFailure, MalformedResponse


SAMPLE_BIBLE = {
    "brandName": "Threadleaf",
    "palette": [
        {"hex": "#2E5E4E", "name": "Forest Floor", "usage": "Primary"},
        {"hex": "#A8C686", "name": "Moss", "usage": "Secondary"},
        {"hex": "#F4F1DE", "name": "Undyed Cotton", "usage": "Background"},
        {"hex": "#E07A5F", "name": "Terracotta", "usage": "Accent"},
        {"hex": "#3D405B", "name": "Slate", "usage": "Text"},
    ],
    "fonts": {
        "header": "Fraunces",
        "body": "Work Sans",
        "notes": "A soft serif paired with a friendly grotesque.",
    },
    "logoDescriptions": {
        "primary": "A sock silhouette formed from a single leaf",
        "secondary": ["A looping thread forming a circle", "Two interlocking leaves"],
        "favicon": "A single simplified leaf",
    },
    "harmonies": [
        {
            "name": "Analogous",
            "palette": [
                {"hex": "#4F772D", "name": "Fern"},
                {"hex": "#90A955", "name": "Sage"},
                {"hex": "#ECF39E", "name": "Lime Wash"},
            ],
            "explanation": "Keeps the natural greens close together.",
        },
    ],
}


class FakeGateway(BrandGateway):
    """Gateway double that records calls and fails on request."""

    def __init__(
        self,
        bible: Optional[dict] = None,
        fail_bible: bool = False,
        fail_image: Callable[[str], bool] = lambda prompt: False,
        image_delay: Callable[[str], float] = lambda prompt: 0,
        fail_voice: bool = False,
        fail_visual_prompts: bool = False,
        chat_chunks: Optional[List[str]] = None,
        chat_error: Optional[Exception] = None,
    ):
        super().__init__(client=None)
        self.bible = BrandBible.model_validate(bible or SAMPLE_BIBLE)
        self.fail_bible = fail_bible
        self.fail_image = fail_image
        self.image_delay = image_delay
        self.fail_voice = fail_voice
        self.fail_visual_prompts = fail_visual_prompts
        self.chat_chunks = chat_chunks if chat_chunks is not None else ["Hel", "lo!"]
        self.chat_error = chat_error
        self.calls: List[str] = []
        self.images: List[str] = []
        self.turn_gate: Optional[asyncio.Event] = None

    async def generate_brand_bible(self, mission: str) -> BrandBible:
        self.calls.append("brand_bible")
        if self.fail_bible:
            raise MalformedResponse("palette must have 5 entries")
        return self.bible

    async def generate_image(
        self,
        prompt: str,
        aspect_ratio: AspectRatio = AspectRatio.SQUARE,
        style_hint: StyleHint = StyleHint.NONE,
    ) -> ImageResult:
        self.calls.append("image")
        await asyncio.sleep(self.image_delay(prompt))
        if self.fail_image(prompt):
            raise GenerationFailure("no images returned")
        self.images.append(prompt)
        return ImageResult(data=prompt)

    async def generate_brand_voice(self, mission: str, bible: BrandBible) -> str:
        self.calls.append("brand_voice")
        if self.fail_voice:
            raise GenerationFailure("voice failed")
        return "## Brand Voice Summary\nWarm and grounded."

    async def generate_social_posts(self, mission: str, bible: BrandBible) -> List[str]:
        self.calls.append("social_posts")
        return ["Ask us about our yarn", "Meet the knitters"]

    async def generate_seo(self, mission, bible):
        self.calls.append("seo")
        return None

    async def derive_visual_prompts(self, bible: BrandBible):
        self.calls.append("visual_prompts")
        if self.fail_visual_prompts:
            raise RuntimeError("could not derive prompts")
        return prompts.visual_asset_prompts(bible)

    async def send_turn(self, handle, message: str) -> str:
        self.calls.append("send_turn")
        if self.turn_gate:
            await self.turn_gate.wait()
        if self.chat_error:
            raise self.chat_error
        reply = "".join(self.chat_chunks)
        handle.commit(message, reply)
        return reply

    async def stream_turn(self, handle, message: str):
        self.calls.append("stream_turn")
        for chunk in self.chat_chunks:
            if self.turn_gate:
                await self.turn_gate.wait()
            await asyncio.sleep(0)
            yield chunk
        if self.chat_error:
            raise self.chat_error
        handle.commit(message, "".join(self.chat_chunks))


@pytest.fixture
def sample_mission():
    """Sample mission statement."""
    return "Sell eco-friendly socks"


@pytest.fixture
def sample_bible() -> BrandBible:
    return BrandBible.model_validate(SAMPLE_BIBLE)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def pipeline() -> PipelineConfig:
    """Pipeline without optional text extras: 4 logo/voice calls."""
    return PipelineConfig(include_favicon=False, include_social_posts=False, include_seo=False)


@pytest.fixture
def orchestrator(gateway, pipeline) -> BrandOrchestrator:
    return BrandOrchestrator(gateway, pipeline)


@pytest.fixture
def chat_failure() -> ChatTurnFailure:
    return ChatTurnFailure("connection reset")
