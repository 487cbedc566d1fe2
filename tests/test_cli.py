"""
Tests for the command-line interface.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from webpack_live.cli import main_cli, parse_args, run
from webpack_live.cli.main import missing_executables, split_execute_argv
from webpack_live.models import ExecuteCommand, WatchState
from webpack_live.validation import ConfigLoadFailure


@pytest.mark.unit
class TestParseArgs:
    """Test cases for argument parsing."""

    def test_defaults(self):
        options, verbose = parse_args([])

        assert options.config_path == Path("./webpack.config.js")
        assert options.in_memory is False
        assert options.execute_command is None
        assert options.runtime == "node"
        assert options.webpack_command == ["npx", "webpack"]
        assert options.clear_console is True
        assert verbose is False

    def test_all_options(self):
        options, verbose = parse_args([
            "--config", "build/webpack.prod.js", "-m", "--runtime", "deno",
            "--webpack", "node_modules/.bin/webpack", "--no-clear", "-v",
        ])

        assert options.config_path == Path("build/webpack.prod.js")
        assert options.in_memory is True
        assert options.runtime == "deno"
        assert options.webpack_command == ["node_modules/.bin/webpack"]
        assert options.clear_console is False
        assert verbose is True

    def test_execute_command_after_separator(self):
        options, _ = parse_args(["-m", "--", "python", "run.py", "--port", "8080"])

        assert options.in_memory is True
        assert options.execute_command == ExecuteCommand("python", ["run.py", "--port", "8080"])

    def test_split_execute_argv(self):
        assert split_execute_argv(["-m", "--", "a", "--", "b"]) == (["-m"], ["a", "--", "b"])
        assert split_execute_argv(["-m"]) == (["-m"], [])

    def test_blank_command_exits(self):
        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--", " "])

        assert exc_info.value.code == 1


@pytest.mark.unit
class TestRun:
    """Test cases for running a session."""

    def test_missing_config_returns_one(self, temp_dir, reporter):
        options, _ = parse_args(["--config", str(temp_dir / "missing.js")])

        assert run(options, reporter=reporter) == 1
        assert reporter.texts("info")[-1] == "Loading webpack options ..."
        assert "not found" in reporter.texts("error")[0]

    def test_clear_shows_exit_hint_first(self, temp_dir, reporter):
        options, _ = parse_args(["--config", str(temp_dir / "missing.js")])

        run(options, reporter=reporter)

        assert reporter.events[0] == ("clear", "")

    def test_configuration_evaluated_with_runtime(self, temp_dir, reporter):
        options, _ = parse_args(["--runtime", "/opt/node20/bin/node", "--no-clear"])

        with patch("webpack_live.cli.main.load_build_configuration",
                   side_effect=ConfigLoadFailure("stop here")) as load:
            assert run(options, reporter=reporter) == 1

        load.assert_called_once_with(options.config_path, node="/opt/node20/bin/node")

    def test_missing_programs_are_warned_about(self, temp_dir, reporter, make_engine):
        config_path = temp_dir / "webpack.config.json"
        config_path.write_text(json.dumps({"output": {"path": "dist"}}))
        options, _ = parse_args(["--config", str(config_path), "--no-clear"])
        engine = make_engine(on_watch=lambda e: e.callback.__self__.request_shutdown())

        with patch("webpack_live.cli.main.check_executable_installed",
                   side_effect=lambda name: name != "node"):
            assert run(options, reporter=reporter, engine=engine) == 0

        assert reporter.texts("warning") == [
            "'node' was not found on PATH; builds or restarts will fail"
        ]

    def test_missing_executables_checks_override_instead_of_runtime(self):
        options, _ = parse_args(["--", "python", "run.py"])

        with patch("webpack_live.cli.main.check_executable_installed", return_value=False):
            assert missing_executables(options) == ["npx", "python"]

    def test_session_runs_until_shutdown(self, temp_dir, reporter, make_engine, build_result):
        config_path = temp_dir / "webpack.config.json"
        config_path.write_text(json.dumps({"output": {"path": "dist"}}))
        options, _ = parse_args(["--config", str(config_path), "--no-clear", "--", "true"])
        seen = []

        def build_then_stop(engine):
            controller = engine.callback.__self__
            seen.append(controller)
            controller.request_shutdown()

        engine = make_engine(on_watch=build_then_stop)

        assert run(options, reporter=reporter, engine=engine) == 0
        assert seen[0].state is WatchState.STOPPED
        assert seen[0].execute_command == ExecuteCommand("true", [])
        assert engine.watching.closed
        assert reporter.texts("clear") == []
