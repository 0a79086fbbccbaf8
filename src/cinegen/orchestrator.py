"""Generation orchestrator: sequences provider calls against the credit ledger."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .credits import IMAGE_COST, SMART_PASTE_COST, script_cost
from .errors import BudgetInsufficient
from .models import Scene
from .services.provider import GenerationProvider
from .session import Session

logger = logging.getLogger(__name__)

FAILURE_NOTE = "Failed"

ProgressCallback = Callable[[int, Scene], None]
# Called once a batch scene has settled as completed or failed
SceneCallback = Callable[[Scene], None]


@dataclass
class BatchResult:
    """Aggregate outcome of a batch image run."""

    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    debited: int = 0
    # Set when the registry was replaced mid-batch
    cancelled: bool = False


class Orchestrator:
    """Runs every credit-metered action against one session.

    Operations run one at a time. Before each provider call the registry
    generation is captured; a response that returns after the registry has
    been re-initialized is dropped without touching scenes or credits.
    """

    def __init__(
        self,
        session: Session,
        provider: GenerationProvider,
        on_progress: Optional[ProgressCallback] = None,
        on_scene_done: Optional[SceneCallback] = None,
    ) -> None:
        self._session = session
        self._provider = provider
        self._on_progress = on_progress
        self._on_scene_done = on_scene_done
        self._current_index: Optional[int] = None

    @property
    def session(self) -> Session:
        return self._session

    @property
    def current_index(self) -> Optional[int]:
        """Position of the scene being generated by a batch, if any."""
        return self._current_index

    def _scene_done(self, scene: Scene) -> None:
        if self._on_scene_done:
            self._on_scene_done(scene)

    def _require_budget(self, amount: int) -> None:
        ledger = self._session.ledger
        if not ledger.can_afford(amount):
            raise BudgetInsufficient(amount, ledger.remaining)

    # Registry pass-throughs

    def resize(self, count: int) -> None:
        self._session.registry.initialize(count)

    def set_prompt(self, scene_id: int, text: str) -> None:
        self._session.registry.set_prompt(scene_id, text)

    def bulk_paste(self, text: str) -> int:
        return self._session.registry.bulk_assign(text)

    # Paid operations

    def generate_script(
        self,
        summary: str,
        scene_count: Optional[int] = None,
        style: Optional[str] = None,
    ) -> list[str]:
        """Fill scene prompts from a narrative summary.

        A fresh script resets every scene to idle and clears images.

        Raises:
            ValueError: If the summary is blank.
            BudgetInsufficient: If the ledger cannot cover the script.
            ProviderError: If the storyline capability fails. Nothing is
                mutated or debited in that case.
        """
        if not summary.strip():
            raise ValueError("Story summary is empty")

        registry = self._session.registry
        scene_count = scene_count or len(registry)
        style = style or self._session.style
        cost = script_cost(scene_count)
        self._require_budget(cost)

        generation = registry.generation
        logger.info(f"Generating script for {scene_count} scenes ({cost} credits)")
        prompts = list(self._provider.generate_storyline(summary, scene_count, style))

        if not registry.is_current(generation):
            logger.warning("Scenes were reset during script generation; discarding result")
            return []

        registry.reset_for_script(prompts)
        self._session.summary = summary
        self._session.ledger.debit(cost)
        return prompts

    def _generate_image(self, scene: Scene) -> str:
        return self._provider.generate_image(
            scene.effective_prompt(),
            self._session.style,
            self._session.aspect_ratio,
        )

    def generate_all(self) -> BatchResult:
        """Generate images for every scene that is not completed.

        Scenes run one after another in ascending id order. A failing scene
        is marked failed and the batch moves on; only successes are debited.

        Raises:
            BudgetInsufficient: If the ledger cannot cover every pending scene.
        """
        registry = self._session.registry
        ledger = self._session.ledger
        pending = registry.pending()
        self._require_budget(len(pending) * IMAGE_COST)

        generation = registry.generation
        result = BatchResult()
        logger.info(f"Starting batch image generation for {len(pending)} scenes")

        try:
            for scene in pending:
                if not registry.is_current(generation):
                    result.cancelled = True
                    break

                self._current_index = scene.id - 1
                registry.mark_generating(scene.id)
                if self._on_progress:
                    self._on_progress(self._current_index, scene)
                result.attempted += 1

                try:
                    image_ref = self._generate_image(scene)
                except Exception as e:
                    if not registry.is_current(generation):
                        result.cancelled = True
                        break
                    logger.error(f"Scene {scene.id} failed: {e}")
                    registry.mark_failed(scene.id, FAILURE_NOTE)
                    result.failed += 1
                    self._scene_done(scene)
                    continue

                if not registry.is_current(generation):
                    logger.warning(f"Dropping stale image for scene {scene.id}")
                    result.cancelled = True
                    break

                registry.mark_completed(scene.id, image_ref)
                ledger.debit(IMAGE_COST)
                result.succeeded += 1
                result.debited += IMAGE_COST
                self._scene_done(scene)
        finally:
            self._current_index = None

        logger.info(
            f"Batch finished: {result.succeeded} completed, {result.failed} failed"
        )
        return result

    def regenerate(self, scene_id: int) -> Scene:
        """Generate a new image for one scene.

        The previous image stays on the scene while the call runs and is kept
        if the call fails.

        Raises:
            BudgetInsufficient: If the ledger cannot cover one image.
            KeyError: If no scene has ``scene_id``.
        """
        self._require_budget(IMAGE_COST)
        registry = self._session.registry
        generation = registry.generation
        scene = registry.mark_generating(scene_id)

        try:
            image_ref = self._generate_image(scene)
        except Exception as e:
            if registry.is_current(generation):
                logger.error(f"Regeneration of scene {scene_id} failed: {e}")
                registry.mark_failed(scene_id, FAILURE_NOTE)
            return scene

        if not registry.is_current(generation):
            logger.warning(f"Dropping stale image for scene {scene_id}")
            return scene

        registry.mark_completed(scene_id, image_ref)
        self._session.ledger.debit(IMAGE_COST)
        return scene

    def smart_paste(self, text: str) -> int:
        """Map ``Scene N`` segments of ``text`` onto scenes.

        Credits are only charged when at least one marker was found.

        Returns:
            Number of markers found.

        Raises:
            ValueError: If the text is blank.
            BudgetInsufficient: If the ledger cannot cover the parse.
        """
        self._require_budget(SMART_PASTE_COST)
        if not text.strip():
            raise ValueError("Nothing to paste")

        matched = self._session.registry.smart_assign(text)
        if matched == 0:
            logger.info("No scene markers found; nothing changed")
            return 0

        self._session.ledger.debit(SMART_PASTE_COST)
        return matched
