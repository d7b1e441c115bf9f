"""Tests for the tool executor."""

from unittest.mock import MagicMock

import pytest

from working_paper_agent.models import WorkingPaperFailure
from working_paper_agent.tools.definitions import GENERATE_WORKING_PAPER
from working_paper_agent.tools.executor import ToolExecutionError, ToolExecutor


@pytest.fixture
def executor(tmp_path):
    """Executor writing to a temporary default directory."""
    return ToolExecutor(default_output_dir=tmp_path / "default")


class TestToolExecutor:
    """Tests for ToolExecutor."""

    def test_default_output_dir_from_settings(self):
        """Test the default directory comes from settings."""
        executor = ToolExecutor()

        assert executor.default_output_dir == "./output"

    def test_registered_tools(self, executor):
        assert executor.tool_names == [GENERATE_WORKING_PAPER]

    @pytest.mark.asyncio
    async def test_unknown_tool_raises(self, executor):
        """Test unknown tool names are rejected."""
        with pytest.raises(ToolExecutionError, match="Unknown tool: get_weather"):
            await executor.execute("get_weather", {})

    @pytest.mark.asyncio
    async def test_generates_working_paper(self, executor, tool_arguments, tmp_path):
        """Test an explicit outputPath is honored and the path relayed."""
        tool_arguments["outputPath"] = str(tmp_path / "explicit")

        result = await executor.execute(GENERATE_WORKING_PAPER, tool_arguments)

        expected = tmp_path / "explicit" / "m1_working_paper.xlsx"
        assert result == {"success": True, "outputFilePath": str(expected)}
        assert expected.is_file()

    @pytest.mark.asyncio
    async def test_uses_default_output_dir(self, executor, tool_arguments, tmp_path):
        """Test a missing outputPath falls back to the executor default."""
        result = await executor.execute(GENERATE_WORKING_PAPER, tool_arguments)

        assert result["success"] is True
        assert (tmp_path / "default" / "m1_working_paper.xlsx").is_file()

    @pytest.mark.asyncio
    async def test_relays_relative_default_path_verbatim(
        self, tool_arguments, tmp_path, monkeypatch
    ):
        """Test the settings default comes back as ./output/m1_working_paper.xlsx."""
        monkeypatch.chdir(tmp_path)

        result = await ToolExecutor().execute(GENERATE_WORKING_PAPER, tool_arguments)

        assert result == {"success": True, "outputFilePath": "./output/m1_working_paper.xlsx"}
        assert (tmp_path / "output" / "m1_working_paper.xlsx").is_file()

    @pytest.mark.asyncio
    async def test_does_not_mutate_arguments(self, executor, tool_arguments):
        """Test the caller's payload is left as it was."""
        before = dict(tool_arguments)

        await executor.execute(GENERATE_WORKING_PAPER, tool_arguments)

        assert tool_arguments == before

    @pytest.mark.asyncio
    async def test_invalid_adjustment_type(self, executor, tool_arguments):
        """Test schema errors come back as a descriptive error string."""
        tool_arguments["adjustments"][0]["type"] = "Deferred"

        result = await executor.execute(GENERATE_WORKING_PAPER, tool_arguments)

        assert result["success"] is False
        assert result["error"].startswith(
            f"Invalid arguments for {GENERATE_WORKING_PAPER}: adjustments.0.type"
        )

    @pytest.mark.asyncio
    async def test_missing_required_field(self, executor, tool_arguments):
        """Test a missing mandatory field is named in the error."""
        del tool_arguments["lastYear"]

        result = await executor.execute(GENERATE_WORKING_PAPER, tool_arguments)

        assert result["success"] is False
        assert "lastYear: Field required" in result["error"]

    @pytest.mark.asyncio
    async def test_writer_failure_relayed_unchanged(
        self, executor, tool_arguments, monkeypatch
    ):
        """Test the writer's failure result is passed straight through."""
        monkeypatch.setattr(
            "working_paper_agent.tools.executor.generate_working_paper",
            MagicMock(return_value=WorkingPaperFailure(error="disk full")),
        )

        result = await executor.execute(GENERATE_WORKING_PAPER, tool_arguments)

        assert result == {"success": False, "error": "disk full"}

    @pytest.mark.asyncio
    async def test_unexpected_error_reported(self, executor, tool_arguments, monkeypatch):
        """Test faults outside the writer are converted to error results."""
        monkeypatch.setattr(
            "working_paper_agent.tools.executor.generate_working_paper",
            MagicMock(side_effect=KeyError("boom")),
        )

        result = await executor.execute(GENERATE_WORKING_PAPER, tool_arguments)

        assert result == {"success": False, "error": "'boom'"}
