"""Main orchestrator coordinating the brand bible generation pipeline."""

import time
from typing import Awaitable, Callable, List, Optional, Tuple

from .aggregation import StageOutcome, aggregate, settle, skipped
from .gateway import BrandGateway
from ..models.enums import AggregationPolicy, AspectRatio, PipelineStage, RunStatus
from ..models.schemas import (
    CRITICAL_FAILURE_MESSAGE,
    BrandBible,
    ErrorDetail,
    GeneratedLogos,
    GenerationRun,
    SocialMediaKitAssets,
)
from ..utils.config import PipelineConfig
from ..utils.errors import ValidationError
from ..utils.logger import get_logger
from ..utils.share import build_share_url, mission_from_query

logger = get_logger(__name__)

EMPTY_MISSION_MESSAGE = "Please enter your company mission."
LOGOS_AND_VOICE_FAILURE = (
    "Failed to generate logos and brand voice. This can be a temporary issue "
    "with the image generation service."
)
VISUAL_ASSETS_FAILURE = "Failed to create the mood board and social media kit."
VISUAL_ASSETS_PARTIAL = "Some mood board or social media kit images could not be created."

STEP_CRITICAL = "Generating brand identity text..."
STEP_LOGOS_AND_VOICE = "Generating logos & brand voice..."
STEP_VISUAL_ASSETS = "Creating mood board & social media kit..."

ProgressCallback = Callable[[str], None]
UpdateCallback = Callable[[GenerationRun], None]


def validate_mission(mission: str) -> str:
    """
    Reject blank missions before anything is sent.

    Raises:
        ValidationError: Mission is empty or whitespace only
    """
    if mission is None or not mission.strip():
        raise ValidationError(EMPTY_MISSION_MESSAGE)
    return mission


class BrandOrchestrator:
    """
    Runs one generation request through its three stages.

    The critical stage produces the brand bible and is the only fatal one.
    Logos and voice are all-or-nothing; visual assets are best-effort.
    Holds no per-run state, so concurrent runs cannot interfere.
    """

    def __init__(self, gateway: BrandGateway, pipeline: PipelineConfig = None):
        """
        Initialize orchestrator.

        Args:
            gateway: AI service gateway
            pipeline: Optional stage members; defaults to PipelineConfig()
        """
        self.gateway = gateway
        self.pipeline = pipeline or PipelineConfig()

    async def run(
        self,
        mission: str,
        run_id: int = 0,
        on_progress: Optional[ProgressCallback] = None,
        on_update: Optional[UpdateCallback] = None,
    ) -> GenerationRun:
        """
        Generate a complete brand bible for `mission`.

        Args:
            mission: Company mission statement, typed or decoded from a share link
            run_id: Identifier stamped on the result
            on_progress: Receives a label as each stage starts
            on_update: Receives the partial run after each stage settles

        Returns:
            GenerationRun holding everything that succeeded plus the error report

        Raises:
            ValidationError: Mission is blank (no call is made)
        """
        validate_mission(mission)

        start_time = time.time()
        run = GenerationRun(run_id=run_id, mission=mission)

        logger.info(
            "Starting brand generation",
            extra={"run_id": run_id, "mission_length": len(mission)}
        )

        # Stage 1: critical
        self._progress(on_progress, STEP_CRITICAL)

        try:
            bible = await self.gateway.generate_brand_bible(mission)
        except Exception as e:
            logger.error(
                "Critical stage failed, aborting run",
                extra={"run_id": run_id, "error": str(e)},
                exc_info=True
            )
            run = run.model_copy(update={
                "status": RunStatus.FAILED,
                "errors": [ErrorDetail(
                    stage=PipelineStage.CRITICAL,
                    message=CRITICAL_FAILURE_MESSAGE,
                    cause=str(e),
                )],
            })
            self._notify(on_update, run)
            return run

        run = run.model_copy(update={"brand_bible": bible})
        self._notify(on_update, run)

        # Stage 2: logos, voice and text extras
        self._progress(on_progress, STEP_LOGOS_AND_VOICE)
        outcome = await self.run_logos_and_voice(mission, bible)
        run = self.fold_logos_and_voice(run, outcome)
        self._notify(on_update, run)

        # Stage 3: mood board and social kit
        self._progress(on_progress, STEP_VISUAL_ASSETS)
        outcome = await self.run_visual_assets(bible)
        run = self.fold_visual_assets(run, outcome)
        self._notify(on_update, run)

        logger.info(
            "Brand generation complete",
            extra={
                "run_id": run_id,
                "brand_name": bible.brand_name,
                "failed_stages": [e.stage.value for e in run.errors],
                "processing_time_seconds": round(time.time() - start_time, 2),
            }
        )

        return run

    # ═══════════════════════════════════════════════════════════
    # STAGE A: all-or-nothing
    # ═══════════════════════════════════════════════════════════

    async def run_logos_and_voice(self, mission: str, bible: BrandBible) -> StageOutcome:
        descriptions = bible.logo_descriptions

        calls: List[Tuple[str, Awaitable]] = [
            ("primary", self.gateway.generate_logo(descriptions.primary)),
        ]
        calls += [
            (f"secondary.{i}", self.gateway.generate_logo(desc))
            for i, desc in enumerate(descriptions.secondary)
        ]
        if self.pipeline.include_favicon and descriptions.favicon:
            calls.append(("favicon", self.gateway.generate_logo(descriptions.favicon)))

        calls.append(("brand_voice", self.gateway.generate_brand_voice(mission, bible)))

        if self.pipeline.include_social_posts:
            calls.append(("social_posts", self.gateway.generate_social_posts(mission, bible)))
        if self.pipeline.include_seo:
            calls.append(("seo", self.gateway.generate_seo(mission, bible)))

        logger.info(
            f"Launching {len(calls)} logo/voice calls",
            extra={"slots": [slot for slot, _ in calls]}
        )

        results = await settle(calls)
        return aggregate(
            results,
            AggregationPolicy.ALL_OR_NOTHING,
            PipelineStage.LOGOS_AND_VOICE,
            LOGOS_AND_VOICE_FAILURE,
        )

    @staticmethod
    def fold_logos_and_voice(run: GenerationRun, outcome: StageOutcome) -> GenerationRun:
        if outcome.error:
            return run.model_copy(update={"errors": [*run.errors, outcome.error]})

        logos = GeneratedLogos(
            primary=outcome.get("primary"),
            secondary=[outcome.get(slot) for slot in outcome.slots_with_prefix("secondary.")],
            favicon=outcome.get("favicon"),
        )

        return run.model_copy(update={
            "logos": logos,
            "brand_voice": outcome.get("brand_voice"),
            "social_posts": outcome.get("social_posts"),
            "seo": outcome.get("seo"),
        })

    # ═══════════════════════════════════════════════════════════
    # STAGE B: best-effort
    # ═══════════════════════════════════════════════════════════

    async def run_visual_assets(self, bible: BrandBible) -> StageOutcome:
        try:
            visual = await self.gateway.derive_visual_prompts(bible)
        except Exception as e:
            return skipped(PipelineStage.VISUAL_ASSETS, VISUAL_ASSETS_FAILURE, e)

        generate = self.gateway.generate_image
        wide = AspectRatio.WIDESCREEN
        calls: List[Tuple[str, Awaitable]] = [
            (f"mood_board.{i}", generate(prompt)) for i, prompt in enumerate(visual.mood_board)
        ]
        calls.append(("website_banner", generate(visual.website_banner, wide)))
        calls.append(("banner", generate(visual.social_banner, wide)))
        calls += [
            (f"post_template.{i}", generate(prompt))
            for i, prompt in enumerate(visual.post_templates)
        ]

        logger.info(
            f"Launching {len(calls)} visual asset calls",
            extra={"slots": [slot for slot, _ in calls]}
        )

        results = await settle(calls)
        return aggregate(
            results,
            AggregationPolicy.BEST_EFFORT,
            PipelineStage.VISUAL_ASSETS,
            VISUAL_ASSETS_PARTIAL,
        )

    @staticmethod
    def fold_visual_assets(run: GenerationRun, outcome: StageOutcome) -> GenerationRun:
        errors = [*run.errors, outcome.error] if outcome.error else run.errors

        if not outcome.launched:
            return run.model_copy(update={"errors": errors})

        mood_board = [
            outcome.get(slot)
            for slot in outcome.slots_with_prefix("mood_board.")
            if outcome.get(slot) is not None
        ]
        social_kit = SocialMediaKitAssets(
            banner=outcome.get("banner"),
            website_banner=outcome.get("website_banner"),
            post_templates=[
                outcome.get(slot) for slot in outcome.slots_with_prefix("post_template.")
            ],
        )

        return run.model_copy(update={
            "mood_board": mood_board,
            "social_kit": social_kit,
            "errors": errors,
        })

    # ═══════════════════════════════════════════════════════════
    # CALLBACKS
    # ═══════════════════════════════════════════════════════════

    @staticmethod
    def _progress(callback: Optional[ProgressCallback], step: str):
        logger.info(step)
        if callback:
            callback(step)

    @staticmethod
    def _notify(callback: Optional[UpdateCallback], run: GenerationRun):
        if callback:
            callback(run)


class GeneratorSession:
    """
    State behind one generator screen.

    Every submit gets a fresh generation id. Results and progress from a run
    whose id is no longer live (after reset or a newer submit) are ignored.
    """

    def __init__(self, orchestrator: BrandOrchestrator):
        self.orchestrator = orchestrator
        self.progress: Optional[str] = None
        self._generation = 0
        self._current: Optional[GenerationRun] = None
        self._loading = False

    @property
    def current(self) -> Optional[GenerationRun]:
        return self._current

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def generation(self) -> int:
        return self._generation

    async def submit(self, mission: str) -> GenerationRun:
        """
        Start a run and make it the live one.

        Raises:
            ValidationError: Blank mission, or a run is already in progress
        """
        validate_mission(mission)
        if self._loading:
            raise ValidationError("A brand bible is already being generated.")

        self._generation += 1
        generation = self._generation
        self._current = None
        self._loading = True

        def is_live() -> bool:
            return generation == self._generation

        def on_progress(step: str):
            if is_live():
                self.progress = step

        def on_update(run: GenerationRun):
            if is_live():
                self._current = run

        try:
            run = await self.orchestrator.run(
                mission,
                run_id=generation,
                on_progress=on_progress,
                on_update=on_update,
            )
        finally:
            if is_live():
                self._loading = False
                self.progress = None

        if is_live():
            self._current = run
        else:
            logger.info(
                "Discarding result of abandoned run",
                extra={"run_id": generation, "live_generation": self._generation}
            )

        return run

    async def submit_shared(self, query: str) -> Optional[GenerationRun]:
        """Replay a shared link; None when the link carries no mission."""
        mission = mission_from_query(query)
        if mission is None:
            return None
        return await self.submit(mission)

    def reset(self):
        """Clear the screen and stop listening to any run in flight."""
        self._generation += 1
        self._current = None
        self._loading = False
        self.progress = None

    def share_url(self, base_url: str) -> Optional[str]:
        if self._current is None:
            return None
        return build_share_url(base_url, self._current.mission)
