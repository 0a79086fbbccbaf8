"""Tests for the command line interface."""

import pytest
from typer.testing import CliRunner

from cinegen import cli
from cinegen.config import config
from cinegen.credits import CreditLedger, CreditStore
from cinegen.models import SceneStatus, Storyboard

from .conftest import FakeProvider

runner = CliRunner()


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "credit_file", tmp_path / "credits.yaml")
    monkeypatch.setattr(config, "storyboard_file", tmp_path / "storyboard.yaml")
    monkeypatch.setattr(config, "google_cloud_project", "proj")
    monkeypatch.setattr(config, "anthropic_api_key", "key")
    return tmp_path


@pytest.fixture
def provider(monkeypatch):
    fake = FakeProvider(storyline=["first", "second"])
    monkeypatch.setattr(cli, "_provider", lambda: fake)
    return fake


def load_storyboard(workspace):
    return Storyboard.from_yaml(workspace / "storyboard.yaml")


def test_new_and_status(workspace):
    result = runner.invoke(cli.app, ["new", "--scenes", "2", "--aspect-ratio", "9:16"])
    assert result.exit_code == 0, result.output
    storyboard = load_storyboard(workspace)
    assert [s.id for s in storyboard.scenes] == [1, 2]
    assert storyboard.aspect_ratio.value == "9:16"

    result = runner.invoke(cli.app, ["status"])
    assert result.exit_code == 0
    assert "Credits: 300" in result.output


def test_status_without_storyboard(workspace):
    result = runner.invoke(cli.app, ["status"])
    assert result.exit_code == 1


def test_script_generate_export(workspace, provider):
    runner.invoke(cli.app, ["new", "--scenes", "2"])

    result = runner.invoke(cli.app, ["script", "A tale of two cities"])
    assert result.exit_code == 0, result.output
    assert [s.prompt for s in load_storyboard(workspace).scenes] == ["first", "second"]

    result = runner.invoke(cli.app, ["generate"])
    assert result.exit_code == 0, result.output
    scenes = load_storyboard(workspace).scenes
    assert all(s.status == SceneStatus.COMPLETED for s in scenes)
    assert CreditLedger.load(CreditStore(workspace / "credits.yaml")).remaining == 300 - 10 - 20

    result = runner.invoke(cli.app, ["export", "--output", str(workspace / "out")])
    assert result.exit_code == 0, result.output
    assert len(list((workspace / "out").glob("*.zip"))) == 1


def test_smart_paste_without_markers_is_free(workspace, provider):
    runner.invoke(cli.app, ["new", "--scenes", "2"])
    source = workspace / "paste.txt"
    source.write_text("no markers at all")

    result = runner.invoke(cli.app, ["smart-paste", str(source)])

    assert result.exit_code == 0
    assert "nothing changed" in result.output
    assert CreditLedger.load(CreditStore(workspace / "credits.yaml")).remaining == 300


def test_paste_and_prompt(workspace):
    runner.invoke(cli.app, ["new", "--scenes", "2"])
    source = workspace / "lines.txt"
    source.write_text("one\ntwo\nthree\n")

    assert runner.invoke(cli.app, ["paste", str(source)]).exit_code == 0
    assert runner.invoke(cli.app, ["prompt", "2", "edited"]).exit_code == 0
    assert [s.prompt for s in load_storyboard(workspace).scenes] == ["one", "edited"]


def test_login_modes(workspace):
    assert runner.invoke(cli.app, ["login", "--token", "abc"]).exit_code == 1

    result = runner.invoke(cli.app, ["login", "--mode", "dev"])
    assert result.exit_code == 0
    assert "∞" in result.output

    result = runner.invoke(cli.app, ["credits"])
    assert "∞" in result.output


def test_generate_reports_budget(workspace, provider):
    runner.invoke(cli.app, ["new", "--scenes", "5"])
    CreditLedger.load(CreditStore(workspace / "credits.yaml")).set_finite(20)

    result = runner.invoke(cli.app, ["generate"])

    assert result.exit_code == 1
    assert "Insufficient credits" in result.output
    assert provider.image_calls == []


def test_generate_saves_each_scene_as_it_settles(workspace, provider):
    runner.invoke(cli.app, ["new", "--scenes", "2"])
    on_disk = []

    def snapshot(prompt):
        if prompt == "Scene 2":
            on_disk.append([s.status for s in load_storyboard(workspace).scenes])

    provider.on_image = snapshot
    result = runner.invoke(cli.app, ["generate"])

    assert result.exit_code == 0, result.output
    assert on_disk == [[SceneStatus.COMPLETED, SceneStatus.IDLE]]


def test_export_reports_corrupt_image(workspace):
    runner.invoke(cli.app, ["new", "--scenes", "1"])
    storyboard = load_storyboard(workspace)
    storyboard.scenes[0].status = SceneStatus.COMPLETED
    storyboard.scenes[0].image_url = "data:image/png;base64,not base64!!"
    storyboard.to_yaml(workspace / "storyboard.yaml")

    result = runner.invoke(cli.app, ["export", "--output", str(workspace / "out")])

    assert result.exit_code == 1
    assert "Error exporting images" in result.output
