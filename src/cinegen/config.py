"""Configuration management."""

import os
from pathlib import Path
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_STYLE = (
    "Cinematic lighting, 8k resolution, photorealistic character, "
    "dramatic shadows, vibrant colors"
)


def _workspace() -> Path:
    return Path(os.getenv("CINEGEN_WORKSPACE", "."))


class Config(BaseModel):
    """Application configuration."""

    # API Keys
    anthropic_api_key: str = Field(
        default_factory=lambda: os.getenv("ANTHROPIC_API_KEY", ""),
        description="Anthropic API key (storyline generation)"
    )
    google_cloud_project: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_CLOUD_PROJECT", ""),
        description="Google Cloud project ID (Imagen)"
    )

    # Paths
    workspace: Path = Field(
        default_factory=_workspace,
        description="Workspace directory"
    )
    credit_file: Path = Field(
        default_factory=lambda: Path(
            os.getenv("CINEGEN_CREDIT_FILE", str(_workspace() / ".cinegen_credits.yaml"))
        ),
        description="Persistent credit store"
    )
    storyboard_file: Path = Field(
        default_factory=lambda: Path(
            os.getenv("CINEGEN_STORYBOARD", str(_workspace() / "storyboard.yaml"))
        ),
        description="Working storyboard state"
    )

    # Provider settings
    default_model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Claude model for storyline generation"
    )
    imagen_model: str = Field(
        default="imagen-3.0-generate-001",
        description="Imagen model for scene images"
    )
    provider_timeout: float = Field(
        default_factory=lambda: float(os.getenv("CINEGEN_PROVIDER_TIMEOUT", "120")),
        description="Timeout in seconds for a single provider call",
        gt=0,
    )

    # Storyboard defaults
    default_style: str = Field(default=DEFAULT_STYLE, description="Global visual style")
    default_scene_count: int = Field(default=10, description="Scenes in a new storyboard", gt=0)
    default_aspect_ratio: str = Field(default="16:9", description="Image aspect ratio")
    initial_credits: int = Field(default=300, description="Starting credit balance", ge=0)

    class Config:
        """Pydantic config."""
        frozen = False

    def validate_required(self) -> None:
        """Validate that storyline credentials are set."""
        if not self.anthropic_api_key:
            raise ValueError("ANTHROPIC_API_KEY not set")

    def validate_imagen_required(self) -> None:
        """Validate that Imagen / Google Cloud settings are set.

        Raises:
            ValueError: If any required Imagen configuration is missing.
        """
        missing: list[str] = []

        if not self.google_cloud_project:
            missing.append("GOOGLE_CLOUD_PROJECT")

        if missing:
            raise ValueError(
                f"Missing required Imagen configuration: {', '.join(missing)}. "
                "Set the corresponding environment variables."
            )


# Global config instance
config = Config()
