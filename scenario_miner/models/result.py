"""Models for test run results."""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, TypeAlias

StatsSource: TypeAlias = Literal["combined", "fallback"]


@dataclass(frozen=True, kw_only=True)
class Transcript:
    """Combined output of one process execution."""

    text: str
    exit_code: int


@dataclass(frozen=True, kw_only=True)
class RunTotals:
    """Aggregate counts reported by a test run."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0


@dataclass(frozen=True, kw_only=True)
class FailureEntry:
    """A single failing test found in a transcript."""

    test_name: str
    origin_file: str
    error_message: str
    source_line: int | None = None
    stack_excerpt: str | None = None


@dataclass(frozen=True, kw_only=True)
class RunResult:
    """Structured outcome of one test run.

    ``stats_source`` records which totals pattern matched: the single
    combined summary line, or the independent per-metric fallbacks.
    """

    timestamp: datetime
    totals: RunTotals
    duration_ms: int
    failures: tuple[FailureEntry, ...]
    raw_text: str
    exit_code: int
    stats_source: StatsSource = "fallback"

    @property
    def all_passed(self) -> bool:
        """True only if the process succeeded and nothing failed."""
        return self.exit_code == 0 and not self.failures and self.totals.failed == 0
