"""CLI entry point for scenario mining and test runs."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from dataclasses import asdict
from pathlib import Path
from typing import Any

from scenario_miner.config import MinerConfig
from scenario_miner.config_loader import CONFIG_FILE_NAME, load_config
from scenario_miner.mining.session import MiningSession, discover_test_files
from scenario_miner.models.result import RunResult
from scenario_miner.models.scenario import ScenarioMap
from scenario_miner.runner.test_runner import TestRunner

STATUS_SYMBOLS = {
    "passed": "✅",
    "failed": "❌",
}

LAUNCH_FAILURE_EXIT_CODE = 2


def log_run_summary(log: logging.Logger, result: RunResult) -> None:
    """Log a formatted summary of a test run with its failures."""
    status = "passed" if result.all_passed else "failed"
    totals = result.totals

    log.info("=" * 80)
    log.info("Test Run Summary:")
    log.info("=" * 80)
    log.info(
        "%s %s: %d total, %d passed, %d failed, %d skipped (%dms)",
        STATUS_SYMBOLS[status],
        status,
        totals.total,
        totals.passed,
        totals.failed,
        totals.skipped,
        result.duration_ms,
    )

    for index, failure in enumerate(result.failures, start=1):
        log.info("%d. %s", index, failure.origin_file)
        log.info("  Test: %s", failure.test_name)
        log.info("  Error: %s", failure.error_message)
        if failure.source_line is not None:
            log.info("  Line: %d", failure.source_line)


def format_result(result: RunResult) -> dict[str, Any]:
    """Format a run result for JSON output."""
    return {
        "timestamp": result.timestamp.isoformat(),
        "all_passed": result.all_passed,
        "exit_code": result.exit_code,
        "duration_ms": result.duration_ms,
        "stats_source": result.stats_source,
        **asdict(result.totals),
        "failures": [asdict(failure) for failure in result.failures],
    }


def format_scenario_map(scenario_map: ScenarioMap) -> dict[str, Any]:
    """Format a scenario map for JSON output."""
    return {
        "targets": len(scenario_map),
        "scenarios": {
            target: [section.model_dump(mode="json") for section in sections]
            for target, sections in scenario_map.items()
        },
    }


async def resolve_config(config_path: Path | None) -> MinerConfig:
    """Load the given config file, the default one if present, or defaults."""
    if config_path is not None:
        return await load_config(config_path)

    default_path = Path.cwd() / CONFIG_FILE_NAME
    if default_path.is_file():
        return await load_config(default_path)

    return MinerConfig()


async def mine(config: MinerConfig) -> ScenarioMap:
    """Discover test files and mine their scenarios."""
    log = logging.getLogger("scenario_miner")

    test_files: list[Path] = []
    for test_dir in config.test_dirs:
        root = config.project_root / test_dir
        if not root.is_dir():
            log.warning("Test directory not found: %s", root)
            continue
        test_files.extend(
            discover_test_files(root, config.test_file_pattern, config.ignore_dirs)
        )

    log.info("Mining %d test file(s)...", len(test_files))
    session = MiningSession.from_config(config)
    return session.mine(test_files)


async def run(
    config: MinerConfig,
    pattern: str | None = None,
    coverage: bool = False,
) -> int:
    """Run the test command, print the result and return an exit code."""
    log = logging.getLogger("scenario_miner")

    runner = TestRunner(config=config, stdout=sys.stderr, stderr=sys.stderr)
    try:
        result = await runner.run(pattern=pattern, coverage=coverage)
    except OSError as e:
        log.error("Could not launch test command %r: %s", config.test_command, e)
        return LAUNCH_FAILURE_EXIT_CODE

    log_run_summary(log, result)
    print(json.dumps(format_result(result), indent=2, ensure_ascii=False))

    return 0 if result.all_passed else 1


async def dispatch(args: argparse.Namespace) -> int:
    """Execute the selected subcommand."""
    config = await resolve_config(args.config)

    if args.command == "mine":
        scenario_map = await mine(config)
        print(
            json.dumps(format_scenario_map(scenario_map), indent=2, ensure_ascii=False)
        )
        return 0

    return await run(config, pattern=args.pattern, coverage=args.coverage)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        description="Mine test scenarios and parse test-runner output"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Path to the YAML configuration (default: ./{CONFIG_FILE_NAME})",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "mine", help="Print scenarios of existing tests grouped by target file"
    )

    run_parser = subparsers.add_parser("run", help="Run tests and print the result")
    run_parser.add_argument(
        "pattern", nargs="?", default=None, help="Test file or filter to run"
    )
    run_parser.add_argument(
        "--coverage", action="store_true", help="Collect coverage"
    )

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(dispatch(args))
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
