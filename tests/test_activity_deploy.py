"""Tests for external ship steps."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from cloudship.activities.deploy import COMMAND_NOT_FOUND, require_step, run_step
from cloudship.exceptions import ExternalStepError


def _process(returncode: int) -> MagicMock:
    process = MagicMock()
    process.wait = AsyncMock(return_value=returncode)
    return process


class TestRunStep:
    """Test running a single external step."""

    @pytest.mark.asyncio
    async def test_returns_exit_code(self, tmp_path):
        with patch(
            "cloudship.activities.deploy.asyncio.create_subprocess_exec",
            new_callable=AsyncMock,
            return_value=_process(3),
        ) as mock_exec:
            exit_code = await run_step("deploy", ["npx", "wrangler", "deploy"], tmp_path)

        assert exit_code == 3
        mock_exec.assert_awaited_once_with("npx", "wrangler", "deploy", cwd=str(tmp_path))

    @pytest.mark.asyncio
    async def test_missing_command(self, tmp_path):
        with patch(
            "cloudship.activities.deploy.asyncio.create_subprocess_exec",
            new_callable=AsyncMock,
            side_effect=FileNotFoundError("npm"),
        ):
            exit_code = await run_step("install", ["npm", "install"], tmp_path)

        assert exit_code == COMMAND_NOT_FOUND


class TestRequireStep:
    """Test steps that must succeed."""

    @pytest.mark.asyncio
    async def test_success(self, tmp_path):
        with patch("cloudship.activities.deploy.run_step", new_callable=AsyncMock, return_value=0):
            await require_step("install", ["npm", "install"], tmp_path)

    @pytest.mark.asyncio
    async def test_failure_raises(self, tmp_path):
        with patch("cloudship.activities.deploy.run_step", new_callable=AsyncMock, return_value=1):
            with pytest.raises(ExternalStepError) as exc_info:
                await require_step("install", ["npm", "install"], tmp_path)

        assert exc_info.value.step == "install"
        assert exc_info.value.exit_code == 1
