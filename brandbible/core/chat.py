"""Chat session controller owning one branding conversation."""

from typing import AsyncIterator, Callable, List, Optional, Tuple

from .gateway import BrandGateway, ConversationHandle
from .prompts import CHAT_APOLOGY, CHAT_GREETING, CHAT_SYSTEM_INSTRUCTION
from ..models.enums import ChatMode, ChatRole
from ..models.schemas import ChatMessage
from ..utils.logger import get_logger

logger = get_logger(__name__)

Transcript = Tuple[ChatMessage, ...]
TranscriptListener = Callable[[Transcript], None]


class ChatSessionController:
    """
    Keeps the transcript of a single conversation and runs its turns.

    The transcript is only mutated here. Listeners and callers get immutable
    snapshots. While a reply streams, only the last entry changes.
    """

    def __init__(
        self,
        gateway: BrandGateway,
        mode: ChatMode = ChatMode.STREAMING,
        system_instruction: str = CHAT_SYSTEM_INSTRUCTION,
        greeting: str = CHAT_GREETING,
    ):
        """
        Initialize controller.

        Args:
            gateway: AI service gateway
            mode: Streaming or turn-based replies
            system_instruction: Assistant persona sent when the conversation opens
            greeting: Synthetic first model message (never sent to the service)
        """
        self.gateway = gateway
        self.mode = ChatMode(mode)
        self.system_instruction = system_instruction
        self.greeting = greeting
        self.draft = ""
        self._conversation: Optional[ConversationHandle] = None
        self._transcript: List[ChatMessage] = []
        self._listeners: List[TranscriptListener] = []
        self._in_flight = False

    @property
    def transcript(self) -> Transcript:
        return tuple(self._transcript)

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def is_open(self) -> bool:
        return self._conversation is not None

    def on_update(self, listener: TranscriptListener):
        self._listeners.append(listener)

    def open(self):
        """Open the conversation and seed the transcript with the greeting."""
        self._conversation = self.gateway.open_conversation(self.system_instruction)
        self._transcript = [ChatMessage(role=ChatRole.MODEL, content=self.greeting)]
        logger.info("Chat session opened", extra={"mode": self.mode.value})
        self._publish()

    # ═══════════════════════════════════════════════════════════
    # TURNS
    # ═══════════════════════════════════════════════════════════

    async def submit_turn(self, text: Optional[str] = None) -> bool:
        """
        Send `text` (or the current draft) and wait for the reply.

        Returns:
            False when the turn was refused (blank text, a turn in flight,
            or no open conversation); True once the turn has finished,
            successfully or not
        """
        text = self.draft if text is None else text
        if not self.begin_turn(text):
            return False

        async for _ in self.iter_reply(text):
            pass
        return True

    def begin_turn(self, text: str) -> bool:
        """Accept a turn: record the user message and mark the turn in flight."""
        if not text or not text.strip() or self._in_flight or self._conversation is None:
            return False

        self._in_flight = True
        self._append(ChatMessage(role=ChatRole.USER, content=text))
        self.draft = ""
        return True

    async def iter_reply(self, text: str) -> AsyncIterator[str]:
        """
        Produce the reply to an accepted turn, yielding each new chunk.

        On any failure, or if the consumer stops early, the partial reply is
        dropped and one apology message takes its place.
        """
        placeholder = False
        completed = False

        try:
            if self.mode == ChatMode.STREAMING:
                self._append(ChatMessage(role=ChatRole.MODEL, content=""))
                placeholder = True

                async for chunk in self.gateway.stream_turn(self._conversation, text):
                    self._extend_last(chunk)
                    yield chunk
                completed = True
            else:
                reply = await self.gateway.send_turn(self._conversation, text)
                self._append(ChatMessage(role=ChatRole.MODEL, content=reply))
                completed = True
                yield reply
        except Exception as e:
            logger.error(
                f"Chat turn failed: {e}",
                extra={"mode": self.mode.value, "error": str(e)},
                exc_info=True
            )
        finally:
            if not completed:
                self._fail_turn(placeholder)
            self._in_flight = False

    # ═══════════════════════════════════════════════════════════
    # TRANSCRIPT MUTATION
    # ═══════════════════════════════════════════════════════════

    def _append(self, message: ChatMessage):
        self._transcript.append(message)
        self._publish()

    def _extend_last(self, chunk: str):
        """Grow the reply being streamed; earlier entries are left untouched."""
        last = self._transcript[-1]
        self._transcript[-1] = ChatMessage(role=last.role, content=last.content + chunk)
        self._publish()

    def _fail_turn(self, placeholder: bool):
        if placeholder and self._transcript and self._transcript[-1].role == ChatRole.MODEL:
            self._transcript.pop()
        self._append(ChatMessage(role=ChatRole.MODEL, content=CHAT_APOLOGY))

    def _publish(self):
        snapshot = self.transcript
        for listener in self._listeners:
            listener(snapshot)
