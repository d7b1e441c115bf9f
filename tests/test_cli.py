"""Tests for the command-line entry point."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from working_paper_agent import cli


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    """Keep main() from reconfiguring global logging during tests."""
    monkeypatch.setattr(cli, "configure_logging", MagicMock())


@pytest.fixture
def fake_agent(monkeypatch):
    """Replace the agent with one that answers without calling Gemini."""
    agent = MagicMock()
    agent.run_task = AsyncMock(return_value="| Meals | Permanent | 500 |")
    agent.working_papers = [
        {"success": True, "outputFilePath": "output/m1_working_paper.xlsx"}
    ]
    agent.get_context_summary.return_value = {
        "agent_id": "a1",
        "name": "M-1 Preparer",
        "state": "idle",
        "message_count": 3,
        "action_count": 1,
    }
    monkeypatch.setattr(cli, "WorkingPaperAgent", MagicMock(return_value=agent))
    return agent


@pytest.fixture
def trial_balance_csv(tmp_path):
    path = tmp_path / "tb_2023.csv"
    path.write_text("Account,Balance\nCash,1000\nMeals,1000\n")
    return path


class TestParser:
    """Tests for argument parsing."""

    def test_prompt_with_files(self):
        args = cli.build_parser().parse_args(
            ["prompt", "Prepare the M-1", "-f", "a.csv", "b.csv"]
        )

        assert args.task == "Prepare the M-1"
        assert args.files == ["a.csv", "b.csv"]

    def test_short_alias_and_long_option(self):
        args = cli.build_parser().parse_args(["p", "Prepare", "--files", "a.csv"])

        assert args.task == "Prepare"
        assert args.files == ["a.csv"]

    def test_files_optional(self):
        args = cli.build_parser().parse_args(["prompt", "Prepare"])

        assert args.files == []

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.build_parser().parse_args(["--version"])

        assert exc_info.value.code == 0
        assert "0.1.0" in capsys.readouterr().out


class TestMain:
    """Tests for main()."""

    def test_missing_api_key_is_fatal(self, monkeypatch, tmp_path, capsys, fake_agent):
        """Test a missing credential stops the run before the agent starts."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)

        assert cli.main(["prompt", "Prepare the M-1"]) == 1

        assert cli.MISSING_API_KEY_MESSAGE in capsys.readouterr().err
        fake_agent.run_task.assert_not_called()

    def test_empty_api_key_is_fatal(self, monkeypatch, tmp_path, capsys, fake_agent):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("GOOGLE_API_KEY", "")

        assert cli.main(["prompt", "Prepare the M-1"]) == 1

        assert cli.MISSING_API_KEY_MESSAGE in capsys.readouterr().err

    def test_load_error_aborts(self, tmp_path, capsys, fake_agent):
        """Test an unsupported input file is reported and the run aborted."""
        bad_file = tmp_path / "tb.xlsx"
        bad_file.write_bytes(b"")

        assert cli.main(["prompt", "Prepare", "-f", str(bad_file)]) == 1

        err = capsys.readouterr().err
        assert f"Error loading file {bad_file}" in err
        assert "Only CSV files are supported" in err
        fake_agent.run_task.assert_not_called()

    def test_successful_run(self, trial_balance_csv, capsys, fake_agent):
        """Test files are loaded, the agent runs and the outcome is printed."""
        assert cli.main(["prompt", "Prepare the M-1", "-f", str(trial_balance_csv)]) == 0

        task, documents = fake_agent.run_task.call_args.args
        assert task == "Prepare the M-1"
        assert documents[0].rows == [
            {"Account": "Cash", "Balance": "1000"},
            {"Account": "Meals", "Balance": "1000"},
        ]

        captured = capsys.readouterr()
        assert "| Meals | Permanent | 500 |" in captured.out
        assert "Working paper generated at: output/m1_working_paper.xlsx" in captured.out
        assert cli.ALPHA_WARNING in captured.err
        fake_agent.get_context_summary.assert_called_once()

    def test_failed_working_paper_reported(self, capsys, fake_agent):
        fake_agent.working_papers = [{"success": False, "error": "disk full"}]

        assert cli.main(["prompt", "Prepare the M-1"]) == 0

        assert "Working paper error: disk full" in capsys.readouterr().err

    def test_agent_exception_exits_nonzero(self, fake_agent):
        """Test model API failures end the run with status 1."""
        fake_agent.run_task.side_effect = RuntimeError("quota exceeded")

        assert cli.main(["prompt", "Prepare the M-1"]) == 1
        fake_agent.get_context_summary.assert_called_once()
