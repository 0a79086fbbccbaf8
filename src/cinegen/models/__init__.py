"""Data models for the storyboard generator."""

from .scene import AspectRatio, Scene, SceneStatus
from .credits import CreditState, UNLIMITED_BALANCE
from .storyboard import Storyboard

__all__ = [
    "AspectRatio",
    "Scene",
    "SceneStatus",
    "CreditState",
    "UNLIMITED_BALANCE",
    "Storyboard",
]
