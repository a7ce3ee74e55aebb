"""Gemini / Imagen API client (text, structured output, images, chat)."""

import json
from typing import Any, AsyncIterator, Dict, List, Optional
import httpx

from ..models.enums import AspectRatio, ChatRole
from ..models.schemas import ChatMessage, ImageResult
from ..utils.logger import get_logger
from ..utils.errors import (
    AuthenticationError,
    GenerationFailure,
    ProviderError,
    RateLimitError,
)

logger = get_logger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
PROVIDER = "gemini"


def build_contents(
    history: List[ChatMessage],
    message: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Convert a transcript into the Gemini `contents` array.

    Args:
        history: Earlier turns, oldest first
        message: New user message appended after the history

    Returns:
        List of {role, parts} dicts
    """
    contents = [
        {"role": msg.role.value, "parts": [{"text": msg.content}]}
        for msg in history
    ]
    if message is not None:
        contents.append({"role": ChatRole.USER.value, "parts": [{"text": message}]})
    return contents


def extract_text(data: Dict[str, Any]) -> str:
    """Join the text parts of the first candidate; empty string if there are none."""
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts)


class GeminiClient:
    """
    Client for the Gemini generateContent and Imagen predict endpoints.

    Owns one httpx AsyncClient for its whole lifetime; open it with
    `initialize()` or `async with`, and close it on shutdown.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = GEMINI_BASE_URL,
        timeout: float = 180.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize client.

        Args:
            api_key: Gemini API key, sent as x-goog-api-key
            base_url: API root, e.g. .../v1beta
            timeout: Request timeout in seconds (covers image generation)
            transport: Optional httpx transport (mock transports in tests)
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def initialize(self):
        """Open the HTTP client; calling it again is a no-op."""
        if self.client is None:
            self.client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={
                    "x-goog-api-key": self.api_key,
                    "Content-Type": "application/json",
                },
                transport=self.transport,
            )
            logger.info("Gemini client opened", extra={"base_url": self.base_url})

    async def close(self):
        if self.client:
            await self.client.aclose()
            self.client = None
            logger.info("Gemini client closed")

    def _ensure_client(self):
        if self.client is None:
            raise RuntimeError(
                "GeminiClient not initialized. "
                "Call initialize() or use as async context manager."
            )
    def _build_payload(
        self,
        contents: List[Dict[str, Any]],
        system_instruction: Optional[str] = None,
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"contents": contents}

        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}

        if response_schema is not None:
            payload["generationConfig"] = {
                "responseMimeType": "application/json",
                "responseSchema": response_schema,
            }

        return payload

    async def generate_content(
        self,
        model: str,
        contents: List[Dict[str, Any]],
        system_instruction: Optional[str] = None,
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Run a single generateContent call.

        Args:
            model: Gemini model name
            contents: Conversation contents (see build_contents)
            system_instruction: Optional system prompt
            response_schema: When set, the model is constrained to JSON matching it

        Returns:
            Concatenated text of the first candidate

        Raises:
            ProviderError: Transport or HTTP failure
            GenerationFailure: The response carried no text
        """
        self._ensure_client()

        payload = self._build_payload(contents, system_instruction, response_schema)

        try:
            response = await self.client.post(
                f"{self.base_url}/models/{model}:generateContent",
                json=payload,
            )
        except httpx.RequestError as e:
            logger.error(
                f"Gemini request failed: {e}",
                extra={"model": model, "error": str(e)}
            )
            raise ProviderError(PROVIDER, f"Request failed: {e}") from e

        self._handle_response_errors(response)

        text = extract_text(self._json(response, model))
        if not text:
            raise GenerationFailure(f"{model} returned no text")

        logger.info(
            "Gemini response received",
            extra={
                "model": model,
                "structured": response_schema is not None,
                "chars": len(text),
            }
        )

        return text

    async def stream_content(
        self,
        model: str,
        contents: List[Dict[str, Any]],
        system_instruction: Optional[str] = None,
    ) -> AsyncIterator[str]:
        """
        Stream a generateContent call over server-sent events.

        Yields:
            Text chunks in arrival order (empty chunks are skipped)

        Raises:
            ProviderError: Transport or HTTP failure
        """
        self._ensure_client()

        payload = self._build_payload(contents, system_instruction)

        try:
            async with self.client.stream(
                "POST",
                f"{self.base_url}/models/{model}:streamGenerateContent",
                params={"alt": "sse"},
                json=payload,
            ) as response:
                if response.status_code >= 400:
                    await response.aread()
                    self._handle_response_errors(response)

                chunks = 0
                async for line in response.aiter_lines():
                    if not line.startswith("data:"):
                        continue

                    body = line[len("data:"):].strip()
                    if not body:
                        continue

                    try:
                        event = json.loads(body)
                    except json.JSONDecodeError as e:
                        raise ProviderError(PROVIDER, f"Malformed stream event: {body[:200]}") from e

                    chunk = extract_text(event)
                    if chunk:
                        chunks += 1
                        yield chunk
        except httpx.RequestError as e:
            logger.error(
                f"Gemini stream failed: {e}",
                extra={"model": model, "error": str(e)}
            )
            raise ProviderError(PROVIDER, f"Stream failed: {e}") from e

        logger.info("Gemini stream finished", extra={"model": model, "chunks": chunks})

    async def generate_image(
        self,
        model: str,
        prompt: str,
        aspect_ratio: AspectRatio = AspectRatio.SQUARE,
    ) -> ImageResult:
        """
        Generate one image with Imagen.

        Args:
            model: Imagen model name
            prompt: Full image prompt
            aspect_ratio: Output aspect ratio

        Returns:
            ImageResult with base64 JPEG data

        Raises:
            ProviderError: Transport or HTTP failure
            GenerationFailure: No image came back (e.g. filtered by safety checks)
        """
        self._ensure_client()

        payload = {
            "instances": [{"prompt": prompt}],
            "parameters": {
                "sampleCount": 1,
                "aspectRatio": AspectRatio(aspect_ratio).value,
                "outputMimeType": "image/jpeg",
            },
        }

        try:
            response = await self.client.post(
                f"{self.base_url}/models/{model}:predict",
                json=payload,
            )
        except httpx.RequestError as e:
            logger.error(
                f"Imagen request failed: {e}",
                extra={"model": model, "error": str(e)}
            )
            raise ProviderError(PROVIDER, f"Request failed: {e}") from e

        self._handle_response_errors(response)

        predictions = self._json(response, model).get("predictions") or []
        encoded = predictions[0].get("bytesBase64Encoded") if predictions else None

        if not encoded:
            logger.error(
                "Imagen returned no images",
                extra={"model": model, "prompt": prompt}
            )
            raise GenerationFailure(f"{model} returned no images")

        logger.info(
            "Image generated",
            extra={
                "model": model,
                "aspect_ratio": AspectRatio(aspect_ratio).value,
                "size_kb": round(len(encoded) * 0.75 / 1024, 1),
            }
        )

        return ImageResult(
            data=encoded,
            mime_type=predictions[0].get("mimeType") or "image/jpeg",
        )

    def _json(self, response: httpx.Response, model: str) -> Dict[str, Any]:
        """
        Decode a successful response body.

        Raises:
            ProviderError: Body is not a JSON object
        """
        try:
            data = response.json()
        except ValueError as e:
            logger.error(
                "Gemini returned a non-JSON body",
                extra={"model": model, "response": response.text}
            )
            raise ProviderError(PROVIDER, "Invalid JSON response", response.status_code) from e

        if not isinstance(data, dict):
            raise ProviderError(PROVIDER, "Invalid JSON response", response.status_code)
        return data

    def _handle_response_errors(self, response: httpx.Response):
        """Handle HTTP response errors."""
        if response.status_code == 401:
            raise AuthenticationError(PROVIDER)
        elif response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                PROVIDER,
                int(retry_after) if retry_after and retry_after.isdigit() else None
            )
        elif response.status_code >= 400:
            try:
                error_message = response.json().get("error", {}).get("message", response.text)
            except ValueError:
                error_message = response.text

            logger.error(
                f"Gemini API error: {response.status_code}",
                extra={
                    "status": response.status_code,
                    "response": response.text,
                }
            )

            raise ProviderError(PROVIDER, error_message, response.status_code)
