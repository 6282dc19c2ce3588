from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from dicompose.lock_mode import LockMode

DEFAULT_MAX_PARAMETER_DEPTH = 32
DEFAULT_MAX_ARGUMENT_DEPTH = 10


class ContainerSettings(BaseSettings):
    """Tune interpolation bounds and locking for a container.

    Values are read from ``DICOMPOSE_*`` environment variables when the
    container is created without explicit settings, for example
    ``DICOMPOSE_LOCK_MODE=none`` or ``DICOMPOSE_MAX_ARGUMENT_DEPTH=20``.
    """

    model_config = SettingsConfigDict(env_prefix="DICOMPOSE_", frozen=True)

    max_parameter_depth: int = Field(default=DEFAULT_MAX_PARAMETER_DEPTH, ge=1)
    """Deepest chain of parameters referencing parameters before a cycle is reported."""

    max_argument_depth: int = Field(default=DEFAULT_MAX_ARGUMENT_DEPTH, ge=1)
    """Deepest nesting of mappings and sequences inside a definition argument."""

    lock_mode: LockMode = LockMode.THREAD
    """Serialization strategy for ``compile`` and ``get``."""


__all__ = [
    "DEFAULT_MAX_ARGUMENT_DEPTH",
    "DEFAULT_MAX_PARAMETER_DEPTH",
    "ContainerSettings",
]
