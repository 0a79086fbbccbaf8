"""Generation provider contract and the default implementation."""

from typing import List, Optional, Protocol

from ..models import AspectRatio
from .imagen import ImagenClient


class GenerationProvider(Protocol):
    """The two capabilities the orchestrator needs from a provider."""

    def generate_storyline(self, summary: str, scene_count: int, style: str) -> List[str]:
        """Return up to ``scene_count`` sequential scene descriptions."""
        ...

    def generate_image(self, prompt: str, style: str, aspect_ratio: AspectRatio) -> str:
        """Return one image payload reference for a scene description."""
        ...


class StudioProvider:
    """Storyline text from Claude, scene images from Imagen."""

    def __init__(
        self,
        storyline_agent=None,
        imagen_client: Optional[ImagenClient] = None,
    ) -> None:
        # Clients are built lazily so that one capability can be used
        # without credentials for the other.
        self._storyline_agent = storyline_agent
        self._imagen_client = imagen_client

    @property
    def storyline_agent(self):
        if self._storyline_agent is None:
            from ..agents import StorylineAgent
            self._storyline_agent = StorylineAgent()
        return self._storyline_agent

    @property
    def imagen_client(self) -> ImagenClient:
        if self._imagen_client is None:
            self._imagen_client = ImagenClient()
        return self._imagen_client

    def generate_storyline(self, summary: str, scene_count: int, style: str) -> List[str]:
        from ..agents.storyline import StorylineInput

        return self.storyline_agent.run(
            StorylineInput(summary=summary, scene_count=scene_count, style=style)
        )

    def generate_image(self, prompt: str, style: str, aspect_ratio: AspectRatio) -> str:
        return self.imagen_client.generate_image(prompt, style, aspect_ratio)
