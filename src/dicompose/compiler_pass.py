from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dicompose.container_interface import MutableContainerBuilder


class CompilerPass(ABC):
    """Transform definitions and parameters once, before any service is built.

    Passes run in registration order during ``Container.compile``. A pass may
    add or replace definitions, arguments, method calls, tags and parameters,
    but may not instantiate services: ``Container.get`` raises
    ``ContainerCompilingError`` while passes run.

    Subclassing is optional. The container accepts any object with a
    ``compile(container)`` method, or a zero-argument factory producing one.

    Examples:
        .. code-block:: python

            class ArgvPass(CompilerPass):
                def compile(self, container: MutableContainerBuilder) -> None:
                    for service_id in container.find_tagged_service_ids("argv"):
                        container.get_definition(service_id).replace_argument(0, sys.argv)

    """

    @abstractmethod
    def compile(self, container: MutableContainerBuilder) -> None:
        """Mutate the definition graph of ``container``."""


__all__ = ["CompilerPass"]
