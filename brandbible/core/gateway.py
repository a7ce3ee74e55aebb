"""AI service gateway: brand-level operations over the Gemini client."""

import json
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List

from pydantic import ValidationError as SchemaError

from . import prompts
from ..providers.gemini import GeminiClient, build_contents
from ..models.enums import AspectRatio, ChatRole, StyleHint
from ..models.schemas import (
    BrandBible,
    ChatMessage,
    ImageResult,
    SeoRecommendations,
    SocialPostIdeas,
    VisualAssetPrompts,
)
from ..utils.config import ModelsConfig
from ..utils.errors import (
    APIError,
    ChatTurnFailure,
    GatewayError,
    GenerationFailure,
    MalformedResponse,
)
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ConversationHandle:
    """Client-side mirror of one conversation's history."""
    system_instruction: str
    model: str
    history: List[ChatMessage] = field(default_factory=list)

    def commit(self, user_message: str, reply: str):
        """Record a completed turn; failed turns never reach the history."""
        self.history.append(ChatMessage(role=ChatRole.USER, content=user_message))
        self.history.append(ChatMessage(role=ChatRole.MODEL, content=reply))


class BrandGateway:
    """
    Stateless adapter exposing the generation calls the pipeline and chat need.

    No call is retried here; failures surface to the caller.
    """

    def __init__(self, client: GeminiClient, models: ModelsConfig = None):
        """
        Initialize gateway.

        Args:
            client: Initialized Gemini client
            models: Model routing; defaults to ModelsConfig()
        """
        self.client = client
        self.models = models or ModelsConfig()

    # ═══════════════════════════════════════════════════════════
    # STRUCTURED DATA
    # ═══════════════════════════════════════════════════════════

    async def generate_structured_data(
        self,
        prompt: str,
        schema: Dict[str, Any],
        model: str = None,
    ) -> Any:
        """
        Generate JSON constrained by `schema`.

        Raises:
            MalformedResponse: The reply was empty or not valid JSON
            APIError: Transport or HTTP failure
        """
        model = model or self.models.brand_bible

        try:
            text = await self.client.generate_content(
                model,
                build_contents([], prompt),
                response_schema=schema,
            )
        except GenerationFailure as e:
            raise MalformedResponse(str(e)) from e

        try:
            return json.loads(text.strip())
        except json.JSONDecodeError as e:
            logger.error(
                "Failed to parse structured response",
                extra={"model": model, "received": text, "error": str(e)}
            )
            raise MalformedResponse(f"{model} returned invalid JSON: {e}") from e

    async def generate_brand_bible(self, mission: str) -> BrandBible:
        """
        Generate and structurally validate the brand bible.

        Raises:
            MalformedResponse: Invalid JSON or wrong shape (palette size, secondary logos, hex codes)
            APIError: Transport or HTTP failure
        """
        data = await self.generate_structured_data(
            prompts.brand_bible_prompt(mission),
            prompts.BRAND_BIBLE_SCHEMA,
            self.models.brand_bible,
        )

        if not isinstance(data, dict):
            raise MalformedResponse("Brand bible response is not a JSON object")

        try:
            bible = BrandBible.model_validate(data)
        except SchemaError as e:
            logger.error(
                "Brand bible failed structural validation",
                extra={"errors": e.errors(include_url=False)}
            )
            raise MalformedResponse(f"Invalid brand bible structure: {e}") from e

        logger.info(
            "Brand bible generated",
            extra={
                "brand_name": bible.brand_name,
                "has_favicon": bible.logo_descriptions.favicon is not None,
                "harmonies": len(bible.harmonies or []),
            }
        )

        return bible

    async def generate_social_posts(self, mission: str, bible: BrandBible) -> List[str]:
        data = await self.generate_structured_data(
            prompts.social_posts_prompt(mission, bible),
            prompts.SOCIAL_POSTS_SCHEMA,
            self.models.social_posts,
        )
        try:
            return SocialPostIdeas.model_validate(data).posts
        except SchemaError as e:
            raise MalformedResponse(f"Invalid social posts structure: {e}") from e

    async def generate_seo(self, mission: str, bible: BrandBible) -> SeoRecommendations:
        data = await self.generate_structured_data(
            prompts.seo_prompt(mission, bible),
            prompts.SEO_SCHEMA,
            self.models.seo,
        )
        try:
            return SeoRecommendations.model_validate(data)
        except SchemaError as e:
            raise MalformedResponse(f"Invalid SEO structure: {e}") from e

    # ═══════════════════════════════════════════════════════════
    # IMAGES
    # ═══════════════════════════════════════════════════════════

    async def generate_image(
        self,
        prompt: str,
        aspect_ratio: AspectRatio = AspectRatio.SQUARE,
        style_hint: StyleHint = StyleHint.NONE,
    ) -> ImageResult:
        """
        Generate one image.

        Raises:
            GenerationFailure: No image came back or the call failed
        """
        full_prompt = prompts.logo_prompt(prompt) if style_hint == StyleHint.LOGO else prompt

        try:
            return await self.client.generate_image(
                self.models.image,
                full_prompt,
                aspect_ratio,
            )
        except APIError as e:
            raise GenerationFailure(f"Image generation failed: {e}") from e

    async def generate_logo(self, description: str) -> ImageResult:
        return await self.generate_image(description, AspectRatio.SQUARE, StyleHint.LOGO)

    async def derive_visual_prompts(self, bible: BrandBible) -> VisualAssetPrompts:
        return prompts.visual_asset_prompts(bible)

    # ═══════════════════════════════════════════════════════════
    # TEXT
    # ═══════════════════════════════════════════════════════════

    async def generate_text(self, prompt: str, model: str = None) -> str:
        """Freeform, markdown-flavoured text."""
        return await self.client.generate_content(
            model or self.models.text,
            build_contents([], prompt),
        )

    async def generate_brand_voice(self, mission: str, bible: BrandBible) -> str:
        return await self.generate_text(prompts.brand_voice_prompt(mission, bible))

    # ═══════════════════════════════════════════════════════════
    # CONVERSATION
    # ═══════════════════════════════════════════════════════════

    def open_conversation(
        self,
        system_instruction: str = prompts.CHAT_SYSTEM_INSTRUCTION,
    ) -> ConversationHandle:
        return ConversationHandle(
            system_instruction=system_instruction,
            model=self.models.chat,
        )

    async def send_turn(self, handle: ConversationHandle, message: str) -> str:
        """
        Send one message and wait for the whole reply.

        Raises:
            ChatTurnFailure: The turn could not be completed
        """
        try:
            reply = await self.client.generate_content(
                handle.model,
                build_contents(handle.history, message),
                system_instruction=handle.system_instruction,
            )
        except (APIError, GatewayError) as e:
            raise ChatTurnFailure(str(e)) from e

        handle.commit(message, reply)
        return reply

    async def stream_turn(self, handle: ConversationHandle, message: str) -> AsyncIterator[str]:
        """
        Send one message and yield the reply as it arrives.

        Raises:
            ChatTurnFailure: The stream failed or produced nothing
        """
        received: List[str] = []

        try:
            async for chunk in self.client.stream_content(
                handle.model,
                build_contents(handle.history, message),
                system_instruction=handle.system_instruction,
            ):
                received.append(chunk)
                yield chunk
        except (APIError, GatewayError) as e:
            raise ChatTurnFailure(str(e)) from e

        if not received:
            raise ChatTurnFailure(f"{handle.model} streamed no text")

        handle.commit(message, "".join(received))
