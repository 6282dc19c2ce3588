from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from dicompose.compiler_pass import CompilerPass
    from dicompose.definition import Definition
    from dicompose.loaders import AbstractLoader


class ResolvedContainer(ABC):
    """Interface for reading services and parameters from a container.

    This is what ``Container.compile`` hands back: the definition graph is
    fixed and only resolution remains.
    """

    @abstractmethod
    def get(self, service_id: str) -> Any:
        """Return the service registered under ``service_id``, composing it on first use."""

    @abstractmethod
    def has(self, service_id: str) -> bool:
        """Return whether a definition exists for ``service_id``."""

    @abstractmethod
    def get_parameter(self, name: str) -> Any:
        """Return the interpolated value of parameter ``name``."""

    @abstractmethod
    def has_parameter(self, name: str) -> bool:
        """Return whether parameter ``name`` is set."""

    @abstractmethod
    def find_tagged_service_ids(self, tag: str) -> list[str]:
        """Return ids of definitions tagged ``tag`` in registration order."""

    @abstractmethod
    def interpolate_parameters(self, value: Any) -> Any:
        """Replace ``%name%`` placeholders in ``value`` with parameter values."""

    @property
    @abstractmethod
    def max_argument_depth(self) -> int:
        """Deepest nesting allowed inside a definition argument."""

    @abstractmethod
    def compile(self) -> ResolvedContainer:
        """Run compiler passes and freeze the definition graph, once."""


class MutableContainerBuilder(ABC):
    """Interface for populating a container before compilation.

    Loaders and compiler passes receive this view. Every method here raises
    ``ContainerCompiledError`` once the container is compiled, except
    ``find_tagged_service_ids``, ``has_parameter`` and ``get_parameter``, which
    stay readable.
    """

    @abstractmethod
    def set_definition(self, service_id: str, definition: Definition) -> None:
        """Register or replace the definition for ``service_id``."""

    @abstractmethod
    def has_definition(self, service_id: str) -> bool:
        """Return whether a definition exists for ``service_id``."""

    @abstractmethod
    def get_definition(self, service_id: str) -> Definition:
        """Return the definition registered for ``service_id``."""

    @abstractmethod
    def register(
        self,
        service_id: str,
        target: Callable[..., Any],
        *arguments: Any,
    ) -> Definition:
        """Create, register and return a definition in one step."""

    @abstractmethod
    def find_tagged_service_ids(self, tag: str) -> list[str]:
        """Return ids of definitions tagged ``tag`` in registration order."""

    @abstractmethod
    def set_parameter(self, name: str, value: Any) -> None:
        """Create or replace parameter ``name``."""

    @abstractmethod
    def has_parameter(self, name: str) -> bool:
        """Return whether parameter ``name`` is set."""

    @abstractmethod
    def get_parameter(self, name: str) -> Any:
        """Return the interpolated value of parameter ``name``."""

    @abstractmethod
    def add_compiler_pass(
        self,
        compiler_pass: CompilerPass | Callable[[], CompilerPass],
    ) -> None:
        """Queue a compiler pass to run during compilation."""

    @abstractmethod
    def load(self, loader: AbstractLoader, source: Any) -> None:
        """Populate this builder from ``source`` using ``loader``."""


__all__ = ["MutableContainerBuilder", "ResolvedContainer"]
