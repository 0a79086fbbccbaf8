"""Storyboard data model."""

from typing import List
from pathlib import Path
from pydantic import BaseModel, Field
import yaml

from .scene import AspectRatio, Scene
from ..config import DEFAULT_STYLE


class Storyboard(BaseModel):
    """Working storyboard state shared between CLI invocations."""

    summary: str = Field(default="", description="Narrative summary for script generation")
    style: str = Field(default=DEFAULT_STYLE, description="Global visual style")
    aspect_ratio: AspectRatio = Field(default=AspectRatio.LANDSCAPE, description="Image aspect ratio")
    scenes: List[Scene] = Field(default_factory=list, description="Scenes in order")

    class Config:
        """Pydantic config."""
        frozen = False

    @classmethod
    def from_yaml(cls, path: Path) -> "Storyboard":
        """Load storyboard from YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, path: Path) -> None:
        """Save storyboard to YAML file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(self.model_dump(mode="json"), f, default_flow_style=False)
