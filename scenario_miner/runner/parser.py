"""Parse a test-runner transcript into a structured run result.

Parsing never raises: every missing or malformed piece of the transcript
falls back to a default so that a best-effort result is always returned.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone

from scenario_miner.models.result import (
    FailureEntry,
    RunResult,
    RunTotals,
    StatsSource,
)
from scenario_miner.runner.grammar import (
    VITEST_GRAMMAR,
    StatsPattern,
    TranscriptGrammar,
)


@dataclass(frozen=True, kw_only=True)
class StatsExtraction:
    """Counts read from a transcript, tagged with the path that found them.

    ``total`` is None when the transcript does not state one.
    """

    source: StatsSource
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    total: int | None = None


def parse_transcript(
    transcript: str,
    duration_ms: int,
    exit_code: int,
    grammar: TranscriptGrammar = VITEST_GRAMMAR,
) -> RunResult:
    """Turn a captured transcript into a RunResult.

    Args:
        transcript: Combined stdout/stderr of the test run
        duration_ms: Wall-clock duration of the run
        exit_code: Exit code of the test process
        grammar: Output conventions of the test runner

    Returns:
        Totals, failures and the raw transcript

    """
    text = strip_ansi(transcript, grammar)
    failures = extract_failures(text, grammar)
    stats = extract_stats(text, len(failures), grammar)

    return RunResult(
        timestamp=datetime.now(timezone.utc),
        totals=reconcile_totals(stats, len(failures), exit_code),
        duration_ms=duration_ms,
        failures=failures,
        raw_text=transcript,
        exit_code=exit_code,
        stats_source=stats.source,
    )


def strip_ansi(text: str, grammar: TranscriptGrammar = VITEST_GRAMMAR) -> str:
    """Remove color and style escape sequences."""
    return grammar.ansi_escape.sub("", text)


def extract_failures(
    text: str, grammar: TranscriptGrammar = VITEST_GRAMMAR
) -> tuple[FailureEntry, ...]:
    """Collect one FailureEntry per failure line in every failure block."""
    failures: list[FailureEntry] = []

    for block in grammar.block_split.split(text):
        if not any(marker in block for marker in grammar.block_markers):
            continue

        failure_lines = list(grammar.failure_line.finditer(block))
        for index, line in enumerate(failure_lines):
            segment_end = (
                failure_lines[index + 1].start()
                if index + 1 < len(failure_lines)
                else len(block)
            )
            segment = block[line.end() : segment_end]
            failures.append(_failure_entry(block, line, segment, grammar))

    return tuple(failures)


def _failure_entry(
    block: str,
    line: re.Match[str],
    segment: str,
    grammar: TranscriptGrammar,
) -> FailureEntry:
    """Build a failure from its line, the text it owns, and its block.

    Error message and stack frame are looked up in the text following the
    failure line first and in the whole block second.
    """
    test_name = grammar.trailing_duration.sub("", line["name"]).strip()

    preceding_files = list(grammar.test_file.finditer(block, 0, line.start()))
    origin_file = (
        preceding_files[-1]["path"] if preceding_files else grammar.unknown_file
    )

    error_message = grammar.default_error
    for pattern in grammar.error_patterns:
        if (match := pattern.search(segment) or pattern.search(block)) is not None:
            error_message = match["message"].strip()
            break

    frame = grammar.stack_frame.search(segment) or grammar.stack_frame.search(block)

    return FailureEntry(
        test_name=test_name,
        origin_file=origin_file,
        error_message=error_message,
        source_line=int(frame["line"]) if frame else None,
        stack_excerpt=frame[0] if frame else None,
    )


def extract_stats(
    text: str,
    failure_count: int,
    grammar: TranscriptGrammar = VITEST_GRAMMAR,
) -> StatsExtraction:
    """Read totals from the combined summary line or the per-metric fallbacks.

    In fallback mode the discovered failure count stands in for a missing
    failed count, and no total is reported.
    """
    if (combined := _read_counts(grammar.combined_stats, text)) is not None:
        return StatsExtraction(
            source="combined",
            passed=combined.get("passed") or 0,
            failed=combined.get("failed") or 0,
            skipped=combined.get("skipped") or 0,
            total=combined.get("total"),
        )

    counts: dict[str, int | None] = {}
    for stats_pattern in grammar.fallback_stats:
        counts.update(_read_counts(stats_pattern, text) or {})

    failed = counts.get("failed")
    return StatsExtraction(
        source="fallback",
        passed=counts.get("passed") or 0,
        failed=failed if failed is not None else failure_count,
        skipped=counts.get("skipped") or 0,
    )


def reconcile_totals(
    stats: StatsExtraction, failure_count: int, exit_code: int
) -> RunTotals:
    """Make totals consistent with the exit code.

    A failing exit is never reported as fully passing: with no failed count
    the discovered failures (or at least one) are counted as failed.
    """
    failed = stats.failed
    if exit_code != 0 and failed == 0:
        failed = failure_count or 1

    computed = stats.passed + failed + stats.skipped
    return RunTotals(
        total=stats.total or computed,
        passed=stats.passed,
        failed=failed,
        skipped=stats.skipped,
    )


def _read_counts(
    stats_pattern: StatsPattern, text: str
) -> dict[str, int | None] | None:
    """Apply a totals pattern, using its last match in the text."""
    matches = list(stats_pattern.pattern.finditer(text))
    if not matches:
        return None

    match = matches[-1]
    return {
        field_name: int(value) if (value := match[group]) is not None else None
        for field_name, group in stats_pattern.fields.items()
    }
