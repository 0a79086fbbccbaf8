"""Tests for the storyline agent."""

from unittest.mock import MagicMock

import pytest

from cinegen.agents.storyline import StorylineAgent, StorylineInput, extract_json
from cinegen.errors import ProviderError


def make_agent(response):
    client = MagicMock()
    client.create_message.return_value = response
    return StorylineAgent(client=client, model="test-model"), client


def test_prompt_includes_count_and_style():
    agent, client = make_agent('["a", "b"]')
    agent.run(StorylineInput(summary="A heist", scene_count=2, style="noir"))

    kwargs = client.create_message.call_args.kwargs
    assert "exactly 2" in kwargs["prompt"]
    assert "Story: A heist" in kwargs["prompt"]
    assert "Global Style: noir" in kwargs["prompt"]
    assert kwargs["system"] == agent.system_prompt


def test_truncates_to_requested_count():
    agent, _ = make_agent('["a", "b", "c", "d"]')
    assert agent.run(StorylineInput("s", 2, "noir")) == ["a", "b"]


def test_short_response_allowed():
    agent, _ = make_agent('```json\n["only one"]\n```')
    assert agent.run(StorylineInput("s", 5, "noir")) == ["only one"]


def test_wrapped_objects_coerced():
    agent, _ = make_agent('Here you go: {"scenes": [{"prompt": "x"}, 3]}')
    assert agent.run(StorylineInput("s", 5, "noir")) == ["x", "3"]


def test_unparseable_response_raises():
    agent, _ = make_agent("I cannot do that")
    with pytest.raises(ProviderError):
        agent.run(StorylineInput("s", 2, "noir"))


def test_non_list_response_raises():
    agent, _ = make_agent('"just a string"')
    with pytest.raises(ProviderError):
        agent.run(StorylineInput("s", 2, "noir"))


def test_extract_json_finds_array_in_prose():
    assert extract_json('Sure! ["a", ["b"]] done') == '["a", ["b"]]'


def test_null_and_empty_entries_become_blank():
    agent, _ = make_agent('[null, "storm", {"prompt": null}, {}, "  "]')
    assert agent.run(StorylineInput("s", 5, "noir")) == ["", "storm", "", "", ""]
