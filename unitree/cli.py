"""Text-mode entry point running a test tree."""

import argparse
import json
import logging
import sys
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

from unitree.errors import ConfigError
from unitree.models.config import RunConfig, load_run_config
from unitree.models.result import RunResult
from unitree.runner import TestRunner
from unitree.tree import TestNode, iter_leaves, matches_filters

STATUS_SYMBOLS = {
    "passed": "✓",
    "failed": "✗",
    "error": "!",
    "skipped": "-",
    "todo": "?",
}


def log_results_summary(log: logging.Logger, result: RunResult) -> None:
    """Log a formatted summary of leaf outcomes and totals."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for leaf_result in result.results:
        symbol = STATUS_SYMBOLS.get(leaf_result.status, "?")
        log.info(
            "%s %s: %s (%.2fs)",
            symbol,
            leaf_result.path,
            leaf_result.status,
            leaf_result.duration,
        )
        if leaf_result.message:
            log.info("  Message: %s", leaf_result.message)

    log.info("=" * 80)
    log.info(
        "Ran: %d tests. Passed: %d, Failed: %d, Errors: %d, Skipped: %d, Todo: %d",
        result.total,
        result.passed,
        result.failed,
        result.errors,
        result.skipped,
        result.todos,
    )
    if not result.was_successful:
        log.info(
            "Unsuccessful: %d of %d test(s)",
            len(result.unsuccessful_paths),
            result.total,
        )
        for path in result.unsuccessful_paths:
            log.info("  %s", path)


def format_output(result: RunResult) -> dict[str, Any]:
    """Format a run result for JSON output."""
    return {
        "total": result.total,
        "passed": result.passed,
        "failed": result.failed,
        "errors": result.errors,
        "skipped": result.skipped,
        "todo": result.todos,
        "successful": result.was_successful,
        "results": [
            {
                "path": leaf_result.path,
                "status": leaf_result.status,
                "duration": leaf_result.duration,
                "message": leaf_result.message,
            }
            for leaf_result in result.results
        ],
    }


def parse_conf_overrides(items: Sequence[str]) -> Mapping[str, str]:
    """Parse ``NAME=VALUE`` settings given on the command line."""
    overrides: dict[str, str] = {}
    for item in items:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise ConfigError(f"Expected NAME=VALUE, got {item!r}")
        overrides[name.strip()] = value
    return overrides


def build_config(args: argparse.Namespace) -> RunConfig:
    """Merge the config file, if any, with command-line flags."""
    config = load_run_config(args.config_file) if args.config_file else RunConfig()

    update: dict[str, Any] = {}
    if args.verbose:
        update["verbose"] = True
    if args.check_env:
        update["check_env"] = True
    if args.only_test:
        update["only_tests"] = tuple(args.only_test)
    if args.conf:
        update["conf"] = {**config.conf, **parse_conf_overrides(args.conf)}

    return config.model_copy(update=update)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser of the text-mode runner."""
    parser = argparse.ArgumentParser(description="Run a unit test tree")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log at debug level",
    )
    parser.add_argument(
        "--only-test",
        action="append",
        default=[],
        metavar="PATH",
        help="Run only the tests under this qualified path (repeatable)",
    )
    parser.add_argument(
        "--list-test",
        action="store_true",
        help="List the qualified paths of the selected tests and exit",
    )
    parser.add_argument(
        "--check-env",
        action="store_true",
        help="Fail tests that change the working directory or environment",
    )
    parser.add_argument(
        "--conf",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Set a named setting read by tests (repeatable)",
    )
    parser.add_argument(
        "--config-file",
        type=Path,
        default=None,
        help="YAML file with run configuration",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print a JSON summary on stdout",
    )
    return parser


def run_test_tt_main(
    test: TestNode,
    argv: Sequence[str] | None = None,
    exit: Callable[[int], object] = sys.exit,
) -> None:
    """Run a test tree from the command line and exit with its status.

    Exits with 0 when every test passed or was skipped, 1 otherwise.
    """
    args = create_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    log = logging.getLogger("unitree")

    if args.list_test:
        for path, _ in iter_leaves(test):
            if matches_filters(path, args.only_test):
                print(path)
        exit(0)
        return

    config = build_config(args)
    result = TestRunner(config=config).run(test)

    log_results_summary(log, result)
    if args.json:
        print(json.dumps(format_output(result), indent=2))

    exit(0 if result.was_successful else 1)

