"""Storyline agent: break a story summary into scene prompts."""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from ..config import config
from ..errors import ProviderError
from ..services.anthropic import AnthropicClient

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a storyboard artist breaking stories into visual scenes.
Output a valid JSON array of strings only, with no additional text or markdown formatting."""


@dataclass
class StorylineInput:
    """Input data for the storyline agent."""

    summary: str
    scene_count: int
    style: str


def extract_json(response: str) -> str:
    """Extract JSON from a response that may contain markdown or other text."""
    # Code fences first
    if "```json" in response:
        start = response.find("```json") + 7
        end = response.find("```", start)
        if end > start:
            return response[start:end].strip()

    if "```" in response:
        start = response.find("```") + 3
        end = response.find("```", start)
        if end > start:
            return response[start:end].strip()

    # Raw array or object
    for start_char, end_char in [("[", "]"), ("{", "}")]:
        start = response.find(start_char)
        if start != -1:
            depth = 0
            for i, char in enumerate(response[start:], start):
                if char == start_char:
                    depth += 1
                elif char == end_char:
                    depth -= 1
                    if depth == 0:
                        return response[start:i + 1]

    return response.strip()


def _prompt_text(item: Any) -> str:
    # Blank means "keep the existing prompt" downstream
    if isinstance(item, dict):
        item = item.get("prompt") or item.get("description")
    if item is None or isinstance(item, (dict, list)):
        return ""
    return str(item).strip()


class StorylineAgent:
    """Generates sequential scene descriptions from a narrative summary.

    The returned list may be shorter than requested; it is never longer.
    Entries the model leaves null or empty come back as blank strings.
    """

    def __init__(
        self,
        client: Optional[AnthropicClient] = None,
        model: Optional[str] = None,
    ) -> None:
        self._model = model or config.default_model
        self._client = client or AnthropicClient(model=self._model)

    @property
    def model(self) -> str:
        return self._model

    @property
    def system_prompt(self) -> str:
        return SYSTEM_PROMPT

    def run(self, input_data: StorylineInput) -> list[str]:
        """Generate up to ``scene_count`` scene prompts.

        Raises:
            ProviderError: If the response cannot be parsed as a list of prompts.
        """
        logger.info(
            f"Generating {input_data.scene_count} scenes for: "
            f"'{input_data.summary[:60]}'"
        )
        response = self._client.create_message(
            prompt=self._build_prompt(input_data),
            max_tokens=4096,
            system=self.system_prompt,
            temperature=0.8,
        )
        logger.debug(f"Received response of length: {len(response)}")
        prompts = self._parse_response(response)[: input_data.scene_count]
        logger.info(f"Generated {len(prompts)} scene prompts")
        return prompts

    def _build_prompt(self, input_data: StorylineInput) -> str:
        return "\n".join([
            f"Break down the following story into exactly {input_data.scene_count} "
            "distinct, sequential visual scenes for a video storyboard.",
            f"Story: {input_data.summary}",
            f"Global Style: {input_data.style}",
            "",
            "Format the response as a JSON array of strings, where each string is a "
            "highly descriptive visual prompt for an image generator.",
            "Each description should focus on characters, actions, and environment "
            "while maintaining consistency.",
            "Only return the JSON array.",
        ])

    def _parse_response(self, response: str) -> list[str]:
        try:
            data = json.loads(extract_json(response))
        except json.JSONDecodeError as e:
            logger.debug(f"Raw response: {response}")
            raise ProviderError(f"Invalid JSON in storyline response: {e}") from e

        # Tolerate {"scenes": [...]} wrappers
        if isinstance(data, dict):
            data = data.get("scenes", [])
        if not isinstance(data, list):
            raise ProviderError("Storyline response is not a JSON array")

        return [_prompt_text(item) for item in data]
