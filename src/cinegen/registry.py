"""Ordered scene collection with bulk and structured text ingestion."""

import logging
import re
from typing import Iterable, Iterator, List, Optional

from .models import Scene, SceneStatus

logger = logging.getLogger(__name__)

# "Scene 3 - text", "scene 3: text", "Scene3. text" ... up to the next marker
SCENE_MARKER_RE = re.compile(
    r"scene\s*(\d+)\s*[-:.]?\s*(.*?)(?=scene\s*\d+|$)",
    re.IGNORECASE | re.DOTALL,
)


def parse_scene_markers(text: str) -> list[tuple[int, str]]:
    """Split free text on ``Scene N`` markers.

    Returns:
        (scene number, trimmed body) pairs in the order they appear.
    """
    return [
        (int(match.group(1)), match.group(2).strip())
        for match in SCENE_MARKER_RE.finditer(text)
    ]


class SceneRegistry:
    """Ordered scenes plus a generation counter bumped on every resize.

    Work started against one generation must not write into a later one;
    callers capture :attr:`generation` before a provider call and check
    :meth:`is_current` when it returns.
    """

    def __init__(self, scenes: Optional[Iterable[Scene]] = None) -> None:
        self._scenes: List[Scene] = list(scenes or [])
        self._generation = 0

    def __len__(self) -> int:
        return len(self._scenes)

    def __iter__(self) -> Iterator[Scene]:
        return iter(self._scenes)

    @property
    def scenes(self) -> List[Scene]:
        return list(self._scenes)

    @property
    def generation(self) -> int:
        return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def get(self, scene_id: int) -> Optional[Scene]:
        for scene in self._scenes:
            if scene.id == scene_id:
                return scene
        return None

    def _require(self, scene_id: int) -> Scene:
        scene = self.get(scene_id)
        if scene is None:
            raise KeyError(f"No scene with id {scene_id}")
        return scene

    def initialize(self, count: int) -> None:
        """Replace every scene with ``count`` fresh idle scenes."""
        if count < 0:
            raise ValueError(f"Scene count must be non-negative, got {count}")
        self._scenes = [Scene(id=i + 1) for i in range(count)]
        self._generation += 1
        logger.info(f"Initialized {count} scenes (generation {self._generation})")

    def set_prompt(self, scene_id: int, text: str) -> None:
        scene = self.get(scene_id)
        if scene is not None:
            scene.prompt = text

    def bulk_assign(self, text: str) -> int:
        """Assign non-empty lines to scenes in order.

        Returns:
            Number of scenes that received a line.
        """
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        assigned = min(len(lines), len(self._scenes))
        for scene, line in zip(self._scenes, lines):
            scene.prompt = line
        logger.debug(f"Bulk assigned {assigned} of {len(lines)} lines")
        return assigned

    def smart_assign(self, text: str) -> int:
        """Assign ``Scene N`` segments to the scene whose id is N.

        Out-of-range scene numbers are ignored.

        Returns:
            Number of markers found. Zero means nothing changed.
        """
        matches = parse_scene_markers(text)
        for number, body in matches:
            if 1 <= number <= len(self._scenes):
                self._scenes[number - 1].prompt = body
            else:
                logger.debug(f"Ignoring out-of-range marker: Scene {number}")
        return len(matches)

    def mark_generating(self, scene_id: int) -> Scene:
        scene = self._require(scene_id)
        scene.status = SceneStatus.GENERATING
        return scene

    def mark_completed(self, scene_id: int, image_ref: str) -> Scene:
        scene = self._require(scene_id)
        scene.image_url = image_ref
        scene.status = SceneStatus.COMPLETED
        scene.error = None
        return scene

    def mark_failed(self, scene_id: int, error_note: str) -> Scene:
        # Any previous image stays as the last known artifact.
        scene = self._require(scene_id)
        scene.status = SceneStatus.FAILED
        scene.error = error_note
        return scene

    def reset_for_script(self, prompts: List[str]) -> None:
        """Apply a fresh script: prompts by position, all images cleared."""
        for idx, scene in enumerate(self._scenes):
            if idx < len(prompts) and prompts[idx]:
                scene.prompt = prompts[idx]
            scene.status = SceneStatus.IDLE
            scene.image_url = None
            scene.error = None

    def pending(self) -> List[Scene]:
        """Scenes that are not completed, in ascending id order."""
        return sorted(
            (s for s in self._scenes if s.status != SceneStatus.COMPLETED),
            key=lambda s: s.id,
        )
