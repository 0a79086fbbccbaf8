"""Application state shared by every orchestrator operation."""

from dataclasses import dataclass

from .config import config
from .credits import CreditLedger
from .models import AspectRatio, Storyboard
from .registry import SceneRegistry


@dataclass
class Session:
    """Explicitly owned credit and scene state plus generation settings."""

    ledger: CreditLedger
    registry: SceneRegistry
    style: str = config.default_style
    aspect_ratio: AspectRatio = AspectRatio.LANDSCAPE
    summary: str = ""

    @classmethod
    def from_storyboard(cls, storyboard: Storyboard, ledger: CreditLedger) -> "Session":
        return cls(
            ledger=ledger,
            registry=SceneRegistry(storyboard.scenes),
            style=storyboard.style,
            aspect_ratio=storyboard.aspect_ratio,
            summary=storyboard.summary,
        )

    def to_storyboard(self) -> Storyboard:
        return Storyboard(
            summary=self.summary,
            style=self.style,
            aspect_ratio=self.aspect_ratio,
            scenes=[scene.model_copy() for scene in self.registry],
        )
