"""
Command-line interface for webpack-live.

Runs the bundler in watch mode and restarts the built program after every
successful build:

    webpack-live [--config PATH] [-m] [-- COMMAND [ARGS...]]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ..config import DEFAULT_CONFIG_PATH, load_build_configuration
from ..engine import AbstractBuildEngine, WebpackCliEngine
from ..models import BuildConfiguration, ExecuteCommand, SessionOptions
from ..orchestration import (
    ArtifactLocator,
    CommandResolver,
    DEFAULT_RUNTIME,
    ProcessSupervisor,
    SignalHandler,
    WatchController,
)
from ..reporting import ConsoleReporter
from ..storage import MemoryStore
from ..system import check_executable_installed, split_command
from ..validation import (
    ConfigLoadFailure,
    ValidationError,
    handle_cli_error,
    validate_command_argv,
)

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure diagnostic logging. User-facing output goes through the reporter."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def split_execute_argv(argv: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Split argv at the first `--` into our options and the command to run."""
    argv = list(argv)
    if "--" in argv:
        index = argv.index("--")
        return argv[:index], argv[index + 1:]
    return argv, []


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="webpack-live",
        description="Rebuild on change with webpack and restart the built program.",
        epilog="Everything after `--` is run instead of the built file, e.g. "
               "`webpack-live -- python run.py`.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path(DEFAULT_CONFIG_PATH),
        help=f"Bundler configuration file (default: {DEFAULT_CONFIG_PATH}).",
    )
    parser.add_argument(
        "-m",
        "--memory",
        action="store_true",
        help="Keep build output in memory and run it inline instead of from disk.",
    )
    parser.add_argument(
        "--runtime",
        default=DEFAULT_RUNTIME,
        help=f"Program used to run the built file and evaluate JavaScript "
             f"configurations (default: {DEFAULT_RUNTIME}).",
    )
    parser.add_argument(
        "--webpack",
        default="npx webpack",
        help="Command line that invokes webpack (default: 'npx webpack').",
    )
    parser.add_argument(
        "--no-clear",
        action="store_true",
        help="Do not clear the terminal at startup.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging on stderr.",
    )
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> Tuple[SessionOptions, bool]:
    """
    Parse the command line into session options.

    Returns:
        The session options and whether verbose logging was requested
    """
    own_argv, execute_argv = split_execute_argv(sys.argv[1:] if argv is None else argv)
    args = build_parser().parse_args(own_argv)

    options = SessionOptions(
        config_path=args.config,
        in_memory=args.memory,
        execute_command=ExecuteCommand.from_argv(
            validate_command_argv(execute_argv, field_name="command after --")
        ),
        runtime=args.runtime,
        webpack_command=split_command(args.webpack),
        clear_console=not args.no_clear,
    )
    return options, args.verbose


def missing_executables(options: SessionOptions) -> List[str]:
    """Programs the session will start that cannot be found on PATH."""
    programs = [options.webpack_command[0]] if options.webpack_command else []
    if options.execute_command is not None:
        programs.append(options.execute_command.command)
    else:
        programs.append(options.runtime)
    return [p for p in programs if not check_executable_installed(p)]


def create_controller(options: SessionOptions, config: BuildConfiguration,
                      reporter: ConsoleReporter,
                      engine: Optional[AbstractBuildEngine] = None,
                      store: Optional[MemoryStore] = None) -> WatchController:
    """Wire up the components of one watch session."""
    if store is None and options.in_memory:
        store = MemoryStore()
    if engine is None:
        engine = WebpackCliEngine(webpack_command=options.webpack_command, store=store)
    resolver = CommandResolver(ArtifactLocator(store), runtime=options.runtime)
    return WatchController(
        config=config,
        engine=engine,
        supervisor=ProcessSupervisor(reporter),
        resolver=resolver,
        reporter=reporter,
        execute_command=options.execute_command,
        in_memory=options.in_memory,
    )


def run(options: SessionOptions, reporter: Optional[ConsoleReporter] = None,
        engine: Optional[AbstractBuildEngine] = None) -> int:
    """
    Run a watch session until interrupted.

    Returns:
        The process exit status: 1 if the configuration cannot be loaded,
        0 after an interrupt
    """
    reporter = reporter or ConsoleReporter()
    if options.clear_console:
        reporter.clear()

    reporter.info("Loading webpack options ...")
    try:
        config = load_build_configuration(options.config_path, node=options.runtime)
    except ConfigLoadFailure as e:
        reporter.error(str(e))
        return 1

    for program in missing_executables(options):
        reporter.warning(f"'{program}' was not found on PATH; builds or restarts will fail")

    controller = create_controller(options, config, reporter, engine)
    with SignalHandler(controller):
        controller.run_forever()
    if isinstance(controller.engine, WebpackCliEngine):
        controller.engine.close()
    return 0


def main_cli(argv: Optional[Sequence[str]] = None) -> None:
    """Console script entry point."""
    try:
        options, verbose = parse_args(argv)
    except ValidationError as e:
        handle_cli_error(error=e, context="argument validation", exit_code=1, logger=logger)
    setup_logging(verbose)
    sys.exit(run(options))


if __name__ == "__main__":
    main_cli()
