"""
Tests for the space command-line interface.
"""

import json
import logging
import warnings

import pytest
from click.testing import CliRunner

from space import __version__
from space.cli import main
from space.cli.main import cli, split_values
from space.cli.output import format_eval_file
from space.services.modes import Modes


@pytest.fixture(autouse=True)
def restore_root_logger(monkeypatch):
    for name in ("GITHUB_ACTIONS", "GITLAB_CI", "LOG_LEVEL", "NSC_CACHE_PATH"):
        monkeypatch.delenv(name, raising=False)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def patched(monkeypatch, executor, fake_provider):
    """Route the CLI to the executor double and a small registry."""
    providers = [
        fake_provider("go", detected=True, mount_paths=["/go/cache"], add_envs={"GOFLAGS": "-mod=mod"}),
        fake_provider("uv", detected=False, mount_paths=["/uv"], add_envs={"UV_LINK_MODE": "symlink"}),
    ]
    monkeypatch.setattr(main, "DefaultExecutor", lambda: executor)
    monkeypatch.setattr(main, "default_modes", lambda: Modes(providers))
    return executor


def test_split_values():
    assert split_values(["go,uv", " rust ", "", "a,,b"]) == ["go", "uv", "rust", "a", "b"]


def test_format_eval_file_sorted_and_quoted():
    content = format_eval_file({"B": "two words", "A": 'say "hi"'})

    assert content == 'export A="say \\"hi\\""\nexport B="two words"\n'


class TestVersion:
    def test_json(self, runner):
        result = runner.invoke(cli, ["-o", "json", "version"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["version"] == __version__
        assert set(data) == {"version", "commit", "date"}

    def test_plain(self, runner):
        result = runner.invoke(cli, ["version"])

        assert result.exit_code == 0
        assert "Space CLI" in result.stdout


class TestModes:
    def test_json(self, runner, patched):
        result = runner.invoke(cli, ["-o", "json", "cache", "modes"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {
            "modes": {"go": {"detected": True}, "uv": {"detected": False}}
        }

    def test_plain(self, runner, patched):
        result = runner.invoke(cli, ["cache", "modes"])

        assert result.exit_code == 0
        assert "Detected:" in result.stdout
        assert "Undetected:" in result.stdout


class TestMount:
    def test_dry_run_json(self, runner, patched, tmp_path):
        eval_file = tmp_path / "env.sh"

        result = runner.invoke(
            cli,
            [
                "-o", "json", "cache", "mount",
                "--cache_root", str(tmp_path),
                "--detect", "*",
                "--path", "/opt/tool",
                "--eval_file", str(eval_file),
            ],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["input"] == {"modes": ["go"], "paths": ["/opt/tool"]}
        assert data["output"]["destructive_mode"] is False
        assert [m.get("mode", "") for m in data["output"]["mounts"]] == ["go", ""]
        assert eval_file.read_text() == 'export GOFLAGS="-mod=mod"\n'
        patched.mount.assert_not_called()

    def test_destructive_in_ci(self, runner, patched, tmp_path, monkeypatch):
        monkeypatch.setenv("GITLAB_CI", "true")

        result = runner.invoke(
            cli, ["-o", "json", "cache", "mount", "--cache_root", str(tmp_path), "--mode", "uv"]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["output"]["destructive_mode"] is True
        patched.mount.assert_awaited_once()
        patched.write_file.assert_awaited_once()

    def test_explicit_dry_run_overrides_ci(self, runner, patched, tmp_path, monkeypatch):
        monkeypatch.setenv("GITLAB_CI", "true")

        result = runner.invoke(
            cli,
            ["-o", "json", "cache", "mount", "--dry_run", "--cache_root", str(tmp_path), "--mode", "uv"],
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["output"]["destructive_mode"] is False

    def test_cache_root_from_environment(self, runner, patched, tmp_path, monkeypatch):
        monkeypatch.setenv("NSC_CACHE_PATH", str(tmp_path))

        result = runner.invoke(cli, ["-o", "json", "cache", "mount", "--mode", "go"])

        assert result.exit_code == 0, result.output
        mount = json.loads(result.stdout)["output"]["mounts"][0]
        assert mount["cache_path"] == str(tmp_path / "go" / "cache")

    def test_unknown_mode_fails(self, runner, patched, tmp_path):
        result = runner.invoke(
            cli, ["cache", "mount", "--cache_root", str(tmp_path), "--mode", "cobol"]
        )

        assert result.exit_code == 1
        assert "unknown mode: cobol" in result.output

    def test_empty_request_fails(self, runner, patched, tmp_path):
        result = runner.invoke(cli, ["cache", "mount", "--cache_root", str(tmp_path)])

        assert result.exit_code == 1

    def test_missing_cache_root_fails(self, runner, patched):
        result = runner.invoke(cli, ["cache", "mount", "--mode", "go"])

        assert result.exit_code == 1
        assert "path is empty" in result.output

    def test_plain_summary(self, runner, patched, tmp_path):
        result = runner.invoke(
            cli, ["cache", "mount", "--cache_root", str(tmp_path), "--mode", "go,uv"]
        )

        assert result.exit_code == 0, result.output
        assert "Dry Run mode enabled." in result.stdout
        assert "Cache hit rate" in result.stdout

    def test_non_true_ci_value_stays_dry_run(self, runner, patched, tmp_path, monkeypatch):
        monkeypatch.setenv("GITLAB_CI", "1")
        monkeypatch.setenv("GITHUB_ACTIONS", "")

        result = runner.invoke(
            cli, ["-o", "json", "cache", "mount", "--cache_root", str(tmp_path), "--mode", "uv"]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["output"]["destructive_mode"] is False
        patched.mount.assert_not_called()


class TestLogStream:
    @pytest.mark.parametrize("args", [["-o", "json", "version"], ["version"]])
    def test_no_deprecation_warnings(self, runner, args):
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            result = runner.invoke(cli, args)

        assert result.exit_code == 0, result.output
        assert result.exception is None

    def test_json_logs_go_to_stderr(self, runner, patched):
        result = runner.invoke(cli, ["-o", "json", "--log_level", "debug", "cache", "modes"])

        assert result.exit_code == 0, result.output
        json.loads(result.stdout)
        assert "Detected modes" in result.stderr
