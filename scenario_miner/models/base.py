"""Shared pydantic base for mined structure and configuration."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Immutable model that rejects unknown fields.

    Unknown keys in a configuration file are reported instead of ignored.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
