"""Models for scenario structure mined from test files."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TypeAlias

from pydantic import Field, field_validator

from scenario_miner.models.base import Model

TargetIdentity: TypeAlias = str


class ScenarioSection(Model):
    """A named group of scenarios (a ``describe`` block)."""

    name: str = Field(..., description="Section label, verbatim from source")
    scenarios: tuple[str, ...] = Field(
        default=(), description="Case labels in first-discovery order"
    )

    @field_validator("scenarios")
    @classmethod
    def _collapse_duplicates(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(value))


@dataclass(frozen=True, kw_only=True)
class MinedFile:
    """Sections and resolved targets of a single test file."""

    path: Path
    sections: tuple[ScenarioSection, ...]
    targets: tuple[TargetIdentity, ...]


ScenarioMap: TypeAlias = Mapping[TargetIdentity, Sequence[ScenarioSection]]
