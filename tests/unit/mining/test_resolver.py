"""Tests for the target resolver."""

from pathlib import Path

import pytest

from scenario_miner.mining.resolver import TargetResolver, normalize_identity


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Create a small project tree with implementation files."""
    (tmp_path / "src" / "utils").mkdir(parents=True)
    (tmp_path / "src" / "hooks" / "useSearch").mkdir(parents=True)
    (tmp_path / "src" / "__tests__" / "unit").mkdir(parents=True)
    (tmp_path / "src" / "utils" / "dateUtils.ts").write_text("export {}")
    (tmp_path / "src" / "utils" / "legacy.js").write_text("module.exports = {}")
    (tmp_path / "src" / "utils" / "style.css").write_text("")
    (tmp_path / "src" / "hooks" / "useSearch" / "index.ts").write_text("export {}")
    (tmp_path / "src" / "App.tsx").write_text("export {}")
    return tmp_path


@pytest.fixture
def resolver(project: Path) -> TargetResolver:
    """Create a resolver rooted at the project."""
    return TargetResolver(project_root=project)


def test_resolves_relative_dependency(project: Path, resolver: TargetResolver) -> None:
    """A relative import resolves against the importing file's directory."""
    origin = project / "src" / "__tests__" / "x.spec.ts"

    target = resolver.resolve(origin, "../utils/dateUtils")

    assert target == (project / "src" / "utils" / "dateUtils.ts").as_posix()


def test_external_package_resolves_to_none(
    project: Path, resolver: TargetResolver
) -> None:
    """A bare package name is never resolved."""
    origin = project / "src" / "__tests__" / "x.spec.ts"

    assert resolver.resolve(origin, "left-pad") is None


@pytest.mark.parametrize(
    ("dependency", "expected"),
    [
        ("../../utils/dateUtils", "src/utils/dateUtils.ts"),
        ("../../utils/legacy", "src/utils/legacy.js"),
        ("../../utils/style.css", "src/utils/style.css"),
        ("../../hooks/useSearch", "src/hooks/useSearch/index.ts"),
        ("../../App", "src/App.tsx"),
        ("@/utils/dateUtils", "src/utils/dateUtils.ts"),
        ("@/hooks/useSearch", "src/hooks/useSearch/index.ts"),
    ],
)
def test_probes_extension_candidates(
    project: Path, resolver: TargetResolver, dependency: str, expected: str
) -> None:
    """Extensions and index files are probed in order."""
    origin = project / "src" / "__tests__" / "unit" / "x.spec.ts"

    assert resolver.resolve(origin, dependency) == (project / expected).as_posix()


@pytest.mark.parametrize(
    "dependency",
    ["../../utils/missing", "@/nowhere", "./", "react", "@testing-library/react"],
)
def test_unresolved_dependencies_are_dropped(
    project: Path, resolver: TargetResolver, dependency: str
) -> None:
    """No file on disk, or a package import, yields None."""
    origin = project / "src" / "__tests__" / "unit" / "x.spec.ts"

    assert resolver.resolve(origin, dependency) is None


def test_directory_is_not_a_target(project: Path, resolver: TargetResolver) -> None:
    """A directory without an index file does not resolve."""
    origin = project / "src" / "__tests__" / "x.spec.ts"

    assert resolver.resolve(origin, "../utils") is None


@pytest.mark.parametrize(
    ("dependency", "origin_dir"),
    [
        ("./", "src/hooks/useSearch"),
        (".", "src/hooks/useSearch"),
        ("..", "src/hooks/useSearch/nested"),
        ("../useSearch/", "src/hooks/other"),
    ],
)
def test_directory_specifier_only_probes_index_files(
    project: Path, resolver: TargetResolver, dependency: str, origin_dir: str
) -> None:
    """A sibling file named like the directory is not picked over its index."""
    (project / "src" / "hooks" / "useSearch.ts").write_text("export {}")
    (project / origin_dir).mkdir(parents=True, exist_ok=True)
    origin = project / origin_dir / "x.spec.ts"

    assert (
        resolver.resolve(origin, dependency)
        == (project / "src" / "hooks" / "useSearch" / "index.ts").as_posix()
    )


def test_custom_alias(project: Path) -> None:
    """Configured aliases map onto directories under the project root."""
    resolver = TargetResolver(project_root=project, aliases={"~utils/": "src/utils"})
    origin = project / "src" / "__tests__" / "x.spec.ts"

    assert (
        resolver.resolve(origin, "~utils/dateUtils")
        == (project / "src" / "utils" / "dateUtils.ts").as_posix()
    )
    assert resolver.resolve(origin, "@/utils/dateUtils") is None


def test_same_file_through_different_routes_is_one_identity(
    project: Path, resolver: TargetResolver
) -> None:
    """Relative and alias imports of one file produce equal identities."""
    origin = project / "src" / "__tests__" / "unit" / "x.spec.ts"

    assert resolver.resolve(origin, "../../utils/dateUtils") == resolver.resolve(
        origin, "@/utils/dateUtils"
    )


def test_normalize_identity_uses_forward_slashes(tmp_path: Path) -> None:
    """Identities are absolute, normalized and use forward slashes."""
    identity = normalize_identity(tmp_path / "a" / ".." / "b" / "c.ts")

    assert identity == (tmp_path / "b" / "c.ts").as_posix()
    assert "\\" not in identity
