"""AI agents for storyboard text generation."""

from .storyline import StorylineAgent, StorylineInput

__all__ = ["StorylineAgent", "StorylineInput"]
