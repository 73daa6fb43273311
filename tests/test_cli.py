"""Tests for CLI module."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import typer
from typer.testing import CliRunner

from cloudship.cli.main import (
    ExitCode,
    _build_overrides,
    _make_choice_prompt_callback,
    _make_progress_callback,
    _validate_project_path,
    app,
)
from cloudship.exceptions import ExternalStepError
from cloudship.workflows.state import Option, Severity

runner = CliRunner()


class TestValidateProjectPath:
    """Test _validate_project_path function."""

    def test_valid_directory(self, tmp_path):
        assert _validate_project_path(tmp_path) == tmp_path.resolve()

    def test_nonexistent_path_raises(self, tmp_path):
        with pytest.raises(typer.BadParameter, match="does not exist"):
            _validate_project_path(tmp_path / "missing")

    def test_file_path_raises(self, tmp_path):
        file_path = tmp_path / "file.txt"
        file_path.touch()
        with pytest.raises(typer.BadParameter, match="not a directory"):
            _validate_project_path(file_path)


class TestMakeProgressCallback:
    """Test _make_progress_callback function."""

    def test_prints_success_with_checkmark(self):
        console = MagicMock()
        callback = _make_progress_callback(console)

        callback(Severity.SUCCESS, "Generated wrangler.jsonc")

        call_args = console.print.call_args[0][0]
        assert "green" in call_args
        assert "✓" in call_args
        assert "Generated wrangler.jsonc" in call_args

    def test_prints_error_with_icon(self):
        console = MagicMock()
        callback = _make_progress_callback(console)

        callback(Severity.ERROR, "Deployment failed")

        call_args = console.print.call_args[0][0]
        assert "red" in call_args
        assert "✗" in call_args


class TestMakeChoicePromptCallback:
    """Test the interactive chooser."""

    def test_returns_selected_value(self):
        console = MagicMock()
        callback = _make_choice_prompt_callback(console)
        options = [Option("Continue", True), Option("Cancel", False)]

        with patch("cloudship.cli.main.Prompt.ask", return_value="2") as mock_ask:
            assert callback("Continue?", options) is False

        assert mock_ask.call_args.kwargs["choices"] == ["1", "2"]


class TestBuildOverrides:
    """Test combining flags with the project config file."""

    def _build(self, cwd, **flags):
        params = {
            "type_id": None,
            "name": None,
            "class_name": None,
            "max_instances": None,
            "migration_tag": None,
            "force": False,
            "no_prompt": False,
        }
        params.update(flags)
        return _build_overrides(cwd, **params)

    def test_defaults(self, tmp_path):
        overrides = self._build(tmp_path)

        assert overrides.name is None
        assert overrides.max_instances >= 1
        assert not overrides.force

    def test_config_file_fills_gaps(self, tmp_path):
        (tmp_path / "cf.config.json").write_text(
            json.dumps({"name": "from-config", "maxInstances": 5, "migrationTag": "v9"})
        )

        overrides = self._build(tmp_path)

        assert overrides.name == "from-config"
        assert overrides.max_instances == 5
        assert overrides.migration_tag == "v9"

    def test_flags_win_over_config_file(self, tmp_path):
        (tmp_path / "cf.config.json").write_text(
            json.dumps({"name": "from-config", "class": "ConfigClass", "maxInstances": 5})
        )

        overrides = self._build(tmp_path, name="from-flag", class_name="FlagClass", max_instances=2)

        assert overrides.name == "from-flag"
        assert overrides.class_name == "FlagClass"
        assert overrides.max_instances == 2


class TestExitCodes:
    """Test exit code values."""

    def test_values(self):
        assert ExitCode.SUCCESS == 0
        assert ExitCode.PARTIAL == 2
        assert ExitCode.USAGE == 64
        assert ExitCode.CONFIG == 65


class TestCommand:
    """Invoke the command end to end."""

    def test_detect_only(self, tmp_path):
        result = runner.invoke(app, ["nginx:alpine", "--cwd", str(tmp_path), "--detect"])

        assert result.exit_code == ExitCode.SUCCESS
        assert "Detected: Container" in result.output
        assert "95%" in result.output
        assert list(tmp_path.iterdir()) == []

    def test_nothing_detected(self, tmp_path):
        result = runner.invoke(app, ["--cwd", str(tmp_path), "--no-prompt"])

        assert result.exit_code == ExitCode.USAGE
        assert "No supported project type detected" in result.output

    def test_unsupported_forced_type(self, tmp_path):
        result = runner.invoke(app, ["nginx:alpine", "--cwd", str(tmp_path), "--type", "python"])

        assert result.exit_code == ExitCode.USAGE
        assert "Unsupported project type" in result.output

    def test_scaffold_image(self, tmp_path):
        result = runner.invoke(app, ["nginx:alpine", "--cwd", str(tmp_path), "--no-prompt"])

        assert result.exit_code == ExitCode.SUCCESS
        assert (tmp_path / "wrangler.jsonc").exists()
        assert (tmp_path / "Dockerfile.generated").exists()
        assert "Next steps" in result.output

    def test_plan_writes_nothing(self, tmp_path):
        result = runner.invoke(app, ["nginx:alpine", "--cwd", str(tmp_path), "--plan", "--ship"])

        assert result.exit_code == ExitCode.SUCCESS
        assert "Execution Plan" in result.output
        assert "wrangler deploy" in result.output
        assert list(tmp_path.iterdir()) == []

    def test_malformed_descriptor_is_config_error(self, tmp_path):
        (tmp_path / "Dockerfile").write_text("FROM alpine\n")
        (tmp_path / "wrangler.jsonc").write_text("{ not json")

        result = runner.invoke(app, ["--cwd", str(tmp_path), "--force"])

        assert result.exit_code == ExitCode.CONFIG
        assert (tmp_path / "wrangler.jsonc").read_text() == "{ not json"

    def test_declined(self, tmp_path):
        (tmp_path / "Dockerfile").write_text("FROM alpine\n")
        (tmp_path / "wrangler.jsonc").write_text("{}")

        with patch("cloudship.cli.main.Prompt.ask", return_value="2"):
            result = runner.invoke(app, ["--cwd", str(tmp_path)])

        assert result.exit_code == ExitCode.DECLINED
        assert (tmp_path / "wrangler.jsonc").read_text() == "{}"

    def test_ship_failure_is_partial(self, tmp_path):
        with patch(
            "cloudship.activities.deploy.require_step",
            new_callable=AsyncMock,
            side_effect=ExternalStepError("install", 1),
        ):
            result = runner.invoke(app, ["nginx:alpine", "--cwd", str(tmp_path), "--ship", "--no-prompt"])

        assert result.exit_code == ExitCode.PARTIAL
        assert (tmp_path / "wrangler.jsonc").exists()
        assert "scaffolding was successful" in result.output

    def test_ship_success(self, tmp_path):
        with (
            patch("cloudship.activities.deploy.require_step", new_callable=AsyncMock),
            patch("cloudship.activities.deploy.run_step", new_callable=AsyncMock, return_value=0),
        ):
            result = runner.invoke(app, ["nginx:alpine", "--cwd", str(tmp_path), "--ship", "--no-prompt"])

        assert result.exit_code == ExitCode.SUCCESS
        assert "Deployment complete" in result.output
