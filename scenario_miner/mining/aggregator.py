"""Merge scenario sections contributed by many test files."""

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence

from scenario_miner.models.scenario import (
    MinedFile,
    ScenarioMap,
    ScenarioSection,
    TargetIdentity,
)

log = logging.getLogger(__name__)


def aggregate(
    target: TargetIdentity,
    sections_per_file: Iterable[Sequence[ScenarioSection]],
) -> tuple[ScenarioSection, ...]:
    """Union the scenarios of same-named sections across files.

    Merging is commutative and idempotent when results are compared as
    sets of (name, scenario set) pairs. Sections whose union is empty are
    dropped. The enumeration order of the result is not guaranteed.

    Args:
        target: Identity of the implementation file the sections exercise
        sections_per_file: Sections extracted from each contributing file

    Returns:
        One merged section per non-empty label

    """
    merged: dict[str, dict[str, None]] = {}
    for sections in sections_per_file:
        for section in sections:
            scenarios = merged.setdefault(section.name, {})
            scenarios.update(dict.fromkeys(section.scenarios))

    result = tuple(
        ScenarioSection(name=name, scenarios=tuple(scenarios))
        for name, scenarios in merged.items()
        if scenarios
    )
    log.debug("Merged %d section(s) for %s", len(result), target)
    return result


def build_scenario_map(mined_files: Iterable[MinedFile]) -> ScenarioMap:
    """Group mined files by target and aggregate each group."""
    by_target: defaultdict[TargetIdentity, list[Sequence[ScenarioSection]]] = (
        defaultdict(list)
    )
    for mined in mined_files:
        for target in mined.targets:
            by_target[target].append(mined.sections)

    scenario_map: dict[TargetIdentity, Sequence[ScenarioSection]] = {}
    for target, contributions in by_target.items():
        if sections := aggregate(target, contributions):
            scenario_map[target] = sections
    return scenario_map
