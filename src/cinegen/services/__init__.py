"""External service integrations."""

from .anthropic import AnthropicClient
from .imagen import ImagenClient, build_image_prompt
from .provider import GenerationProvider, StudioProvider

__all__ = [
    "AnthropicClient",
    "ImagenClient",
    "build_image_prompt",
    "GenerationProvider",
    "StudioProvider",
]
