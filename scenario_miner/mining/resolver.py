"""Resolve import specifiers in test files to implementation files."""

import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path, PurePath

from scenario_miner.models.scenario import TargetIdentity

log = logging.getLogger(__name__)

RELATIVE_PREFIXES = ("./", "../")

DEFAULT_ALIASES: Mapping[str, str] = {"@/": "src"}

DEFAULT_EXTENSIONS: Sequence[str] = (
    "",
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    "/index.ts",
    "/index.tsx",
    "/index.js",
    "/index.jsx",
)


def normalize_identity(path: str | os.PathLike[str]) -> TargetIdentity:
    """Normalize a path into a separator-independent absolute identity."""
    absolute = os.path.normpath(os.path.abspath(path))
    return PurePath(absolute).as_posix()


@dataclass(frozen=True, kw_only=True)
class TargetResolver:
    """Maps a dependency specifier to the file it refers to.

    Relative specifiers resolve against the importing file's directory and
    alias specifiers (e.g. ``@/utils/x``) against a directory under the
    project root. Bare package names are never resolved.
    """

    project_root: Path
    aliases: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_ALIASES))
    extensions: Sequence[str] = DEFAULT_EXTENSIONS

    def resolve(
        self, origin_path: str | os.PathLike[str], dependency: str
    ) -> TargetIdentity | None:
        """Return the identity of the file ``dependency`` refers to, if any.

        Args:
            origin_path: Absolute path of the file containing the import
            dependency: Specifier exactly as written in the import statement

        Returns:
            Normalized absolute path of the first existing candidate, or
            None for package imports and specifiers with no file on disk

        """
        base = self._base_path(Path(origin_path), dependency)
        if base is None:
            return None

        extensions = self.extensions
        if _names_directory(dependency):
            extensions = [ext for ext in extensions if ext.startswith("/")]

        for extension in extensions:
            candidate = Path(f"{base}{extension}")
            if candidate.is_file():
                return normalize_identity(candidate)

        log.debug("Unresolved dependency %r from %s", dependency, origin_path)
        return None

    def _base_path(self, origin_path: Path, dependency: str) -> Path | None:
        if dependency in {".", ".."} or dependency.startswith(RELATIVE_PREFIXES):
            return origin_path.parent / dependency

        for prefix, target_dir in self.aliases.items():
            if dependency.startswith(prefix):
                return self.project_root / target_dir / dependency[len(prefix) :]

        return None


def _names_directory(dependency: str) -> bool:
    """Whether the specifier can only refer to a directory, like ``./`` or ``..``."""
    return dependency in {".", ".."} or dependency.endswith("/")
