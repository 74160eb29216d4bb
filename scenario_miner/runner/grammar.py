"""Textual conventions of the test runner's console output.

Everything the transcript parser matches against lives in one table so a
different runner's output can be supported by supplying a new grammar.
"""

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

# Horizontal whitespace only, so patterns never span lines.
_SP = r"[^\S\n]"


@dataclass(frozen=True, kw_only=True)
class StatsPattern:
    """A totals pattern and the RunTotals fields its named groups fill."""

    pattern: re.Pattern[str]
    fields: Mapping[str, str]


@dataclass(frozen=True, kw_only=True)
class TranscriptGrammar:
    """Patterns describing one test runner's console output."""

    ansi_escape: re.Pattern[str]
    block_split: re.Pattern[str]
    block_markers: Sequence[str]
    failure_line: re.Pattern[str]
    trailing_duration: re.Pattern[str]
    test_file: re.Pattern[str]
    error_patterns: Sequence[re.Pattern[str]]
    stack_frame: re.Pattern[str]
    combined_stats: StatsPattern
    fallback_stats: Sequence[StatsPattern]
    unknown_file: str = "Unknown File"
    default_error: str = "Test failed"


def _count(name: str) -> str:
    return rf"(?:(?P<{name}>\d{{1,9}}){_SP}+{name}{_SP}*[|,]?{_SP}*)?"


def _single(name: str) -> StatsPattern:
    return StatsPattern(
        pattern=re.compile(rf"(?<!\d)(?P<{name}>\d{{1,9}}){_SP}+{name}\b"),
        fields={name: name},
    )


VITEST_GRAMMAR = TranscriptGrammar(
    ansi_escape=re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]"),
    block_split=re.compile(r"(?=❯|FAIL)"),
    block_markers=("×", "✕", "FAIL"),
    failure_line=re.compile(
        rf"^{_SP}*[×✕]{_SP}+(?P<name>\S(?:.*\S)?)", re.MULTILINE
    ),
    trailing_duration=re.compile(rf"(?<=\S){_SP}+\d+(?:\.\d+)?m?s$"),
    test_file=re.compile(
        r"(?<![\w./\\@\-\[\]])"
        r"(?P<path>[\w./\\@\-\[\]]+\.(?:spec|test)\.[cm]?[jt]sx?)(?!\w)"
    ),
    error_patterns=(
        re.compile(rf"Error:{_SP}*(?P<message>\S.*)"),
        re.compile(rf"AssertionError:{_SP}*(?P<message>\S.*)"),
    ),
    stack_frame=re.compile(
        r"\bat\s+(?:[^\n()]{0,200}?\()?"
        r"(?P<path>[^\s()]+?\.\w+):(?P<line>\d{1,9}):(?P<column>\d+)"
    ),
    combined_stats=StatsPattern(
        pattern=re.compile(
            rf"\bTests{_SP}+"
            + _count("failed")
            + _count("passed")
            + _count("skipped")
            + r"\((?P<total>\d{1,9})\)"
        ),
        fields={
            "failed": "failed",
            "passed": "passed",
            "skipped": "skipped",
            "total": "total",
        },
    ),
    fallback_stats=(_single("passed"), _single("failed"), _single("skipped")),
)
