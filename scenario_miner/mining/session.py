"""Mine scenario maps from a set of test files."""

import logging
import os
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeAlias

from scenario_miner.config import MinerConfig
from scenario_miner.mining.aggregator import build_scenario_map
from scenario_miner.mining.extractor import extract_dependencies, extract_sections
from scenario_miner.mining.resolver import TargetResolver
from scenario_miner.models.scenario import MinedFile, ScenarioMap, TargetIdentity

log = logging.getLogger(__name__)

FileStamp: TypeAlias = tuple[int, int]


@dataclass(kw_only=True)
class SectionCache:
    """Previously mined files, keyed by path and invalidated on change.

    A cache belongs to exactly one mining session.
    """

    entries: dict[Path, tuple[FileStamp, MinedFile]] = field(default_factory=dict)

    def get(self, path: Path, stamp: FileStamp) -> MinedFile | None:
        """Return the cached result if the file has not changed since."""
        if (entry := self.entries.get(path)) is not None and entry[0] == stamp:
            return entry[1]
        return None

    def put(self, path: Path, stamp: FileStamp, mined: MinedFile) -> None:
        """Store a mined file under its current stamp."""
        self.entries[path] = (stamp, mined)

    def __len__(self) -> int:
        return len(self.entries)


def discover_test_files(
    root: Path,
    pattern: str | re.Pattern[str],
    ignore_dirs: Iterable[str] = (),
) -> Sequence[Path]:
    """Find test files below ``root`` whose names match ``pattern``.

    Args:
        root: Directory to walk
        pattern: Regex searched in each file name
        ignore_dirs: Directory names that are not descended into

    Returns:
        Matching file paths, sorted

    """
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    ignored = frozenset(ignore_dirs)
    found: list[Path] = []

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [
            name
            for name in dirnames
            if name not in ignored and not name.startswith(".")
        ]
        found.extend(
            Path(dirpath) / name for name in filenames if regex.search(name)
        )

    return sorted(found)


@dataclass(kw_only=True)
class MiningSession:
    """Extracts, resolves and aggregates scenarios for many test files."""

    resolver: TargetResolver
    test_file_pattern: re.Pattern[str]
    cache: SectionCache = field(default_factory=SectionCache)

    @classmethod
    def from_config(cls, config: MinerConfig) -> "MiningSession":
        """Create a session with a fresh cache from configuration."""
        return cls(
            resolver=TargetResolver(
                project_root=config.project_root,
                aliases=config.aliases,
                extensions=config.extensions,
            ),
            test_file_pattern=re.compile(config.test_file_pattern),
        )

    def mine(self, paths: Iterable[Path]) -> ScenarioMap:
        """Mine every file and aggregate the results per target.

        Files that cannot be read are logged and skipped.
        """
        mined_files: list[MinedFile] = []
        for path in paths:
            try:
                mined_files.append(self.mine_file(path))
            except (OSError, UnicodeDecodeError) as e:
                log.warning("Skipping unreadable test file %s: %s", path, e)

        scenario_map = build_scenario_map(mined_files)
        log.info(
            "Mined %d file(s) into %d target(s)", len(mined_files), len(scenario_map)
        )
        return scenario_map

    def mine_file(self, path: Path) -> MinedFile:
        """Extract sections and resolved targets from one test file.

        Raises:
            OSError: If the file cannot be read
            UnicodeDecodeError: If the file is not valid UTF-8

        """
        path = path.absolute()
        stat = path.stat()
        stamp = (stat.st_mtime_ns, stat.st_size)

        if (cached := self.cache.get(path, stamp)) is not None:
            return cached

        text = path.read_text(encoding="utf-8")
        mined = MinedFile(
            path=path,
            sections=extract_sections(text),
            targets=self._resolve_targets(path, extract_dependencies(text)),
        )
        self.cache.put(path, stamp, mined)
        return mined

    def _resolve_targets(
        self, path: Path, dependencies: Sequence[str]
    ) -> tuple[TargetIdentity, ...]:
        targets: list[TargetIdentity] = []
        for dependency in dependencies:
            target = self.resolver.resolve(path, dependency)
            if target is None or self.test_file_pattern.search(target):
                continue
            if target not in targets:
                targets.append(target)
        return tuple(targets)
