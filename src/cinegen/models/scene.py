"""Scene data model."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class SceneStatus(str, Enum):
    """Generation status of a single scene."""
    IDLE = "idle"
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


class AspectRatio(str, Enum):
    """Supported image aspect ratios."""
    LANDSCAPE = "16:9"
    PORTRAIT = "9:16"


class Scene(BaseModel):
    """Represents a single storyboard scene."""

    id: int = Field(..., description="1-based position at creation time", gt=0)
    prompt: str = Field(default="", description="Visual description of the scene")
    image_url: Optional[str] = Field(None, description="Generated image as a data URI")
    status: SceneStatus = Field(default=SceneStatus.IDLE, description="Generation status")
    error: Optional[str] = Field(None, description="Failure note when status is failed")

    class Config:
        """Pydantic config."""
        frozen = False

    @property
    def label(self) -> str:
        """Synthetic prompt used when the scene has no description."""
        return f"Scene {self.id}"

    def effective_prompt(self) -> str:
        return self.prompt or self.label
