"""Configuration for scenario mining and test runs."""

from collections.abc import Mapping, Sequence
from pathlib import Path

from pydantic import Field

from scenario_miner.mining.resolver import DEFAULT_ALIASES, DEFAULT_EXTENSIONS
from scenario_miner.models.base import Model

DEFAULT_TEST_FILE_PATTERN = r"\.(test|spec)\.(ts|tsx)$"
DEFAULT_IGNORE_DIRS = ("node_modules", "dist", "build", ".git")


class MinerConfig(Model):
    """Project layout and runner settings."""

    project_root: Path = Field(
        default_factory=Path.cwd, description="Root of the project under test"
    )
    test_dirs: Sequence[str] = Field(
        default=("src/__tests__",),
        description="Directories searched for test files, relative to the root",
    )
    test_file_pattern: str = Field(
        default=DEFAULT_TEST_FILE_PATTERN,
        description="Regex matched against file names to identify test files",
    )
    ignore_dirs: Sequence[str] = Field(
        default=DEFAULT_IGNORE_DIRS,
        description="Directory names skipped during discovery",
    )
    aliases: Mapping[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_ALIASES),
        description="Import prefix to directory (relative to the root) mapping",
    )
    extensions: Sequence[str] = Field(
        default=DEFAULT_EXTENSIONS,
        description="Suffixes probed, in order, when resolving an import",
    )
    test_command: str = Field(
        default="pnpm test", description="Command that runs the test suite"
    )
