from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from contextlib import AbstractContextManager, nullcontext
from typing import Any

from dicompose.compiler_pass import CompilerPass
from dicompose.container_interface import MutableContainerBuilder, ResolvedContainer
from dicompose.definition import Definition
from dicompose.exceptions import (
    CircularReferenceError,
    ContainerCompiledError,
    ContainerCompilingError,
    InvalidRegistrationError,
    UnknownDefinitionError,
    UnknownServiceError,
)
from dicompose.loaders import AbstractLoader
from dicompose.lock_mode import LockMode
from dicompose.parameters import ParameterStore
from dicompose.settings import ContainerSettings

logger = logging.getLogger(__name__)


class Container(MutableContainerBuilder, ResolvedContainer):
    """Own service definitions and parameters, and compose services lazily.

    A container has two phases. While building, loaders, compiler passes and
    application code register definitions, parameters and passes. ``compile``
    runs the passes once, resolves every parameter and fixes the graph; from
    then on the builder methods raise ``ContainerCompiledError``. ``get``
    compiles implicitly on first use.

    Every service is composed at most once and cached for the lifetime of the
    container. Dependencies are composed on demand while their dependent is
    being built, and a service requested again on its own resolution path
    raises ``CircularReferenceError`` with the full chain.

    Examples:
        .. code-block:: python

            container = Container()
            container.set_parameter("greeting", "hi")
            container.register("b", B)
            container.register("a", A, Reference("b"), "%greeting%")

            a = container.get("a")  # builds B first, then A(b, "hi")

    """

    def __init__(self, settings: ContainerSettings | None = None) -> None:
        """Initialize an empty container.

        Args:
            settings: Interpolation bounds and lock mode. Read from
                ``DICOMPOSE_*`` environment variables when omitted.

        """
        self._settings = settings if settings is not None else ContainerSettings()
        self._definitions: dict[str, Definition] = {}
        self._parameters = ParameterStore(max_depth=self._settings.max_parameter_depth)
        self._services: dict[str, Any] = {}
        self._compiler_passes: list[CompilerPass] = []
        self._passes_run = 0
        self._load_stack: list[str] = []
        self._compiled = False
        self._compiling = False

        self._lock: AbstractContextManager[Any]
        if self._settings.lock_mode is LockMode.THREAD:
            # Re-entrant: composing a service calls ``get`` for its dependencies.
            self._lock = threading.RLock()
        else:
            self._lock = nullcontext()

    @property
    def settings(self) -> ContainerSettings:
        return self._settings

    @property
    def is_compiled(self) -> bool:
        return self._compiled

    @property
    def max_argument_depth(self) -> int:
        return self._settings.max_argument_depth

    # region Builder Methods
    def load(self, loader: AbstractLoader, source: Any) -> None:
        """Populate the container from ``source`` using ``loader``.

        Raises:
            InvalidRegistrationError: If ``loader`` is not an ``AbstractLoader``.
            ContainerCompiledError: If the container was compiled.

        """
        self._ensure_mutable("load")
        if not isinstance(loader, AbstractLoader):
            msg = f"The given loader must be an AbstractLoader, got {type(loader).__name__}."
            raise InvalidRegistrationError(msg)
        loader.load(self, source)

    def add_compiler_pass(
        self,
        compiler_pass: CompilerPass | Callable[[], CompilerPass],
    ) -> None:
        """Queue a compiler pass.

        Args:
            compiler_pass: Object with a ``compile(container)`` method, or a
                class/zero-argument factory producing one.

        Raises:
            InvalidRegistrationError: If no ``compile`` method is available.
            ContainerCompiledError: If the container was compiled.

        """
        self._ensure_mutable("add_compiler_pass")
        if (isinstance(compiler_pass, type) or not hasattr(compiler_pass, "compile")) and callable(
            compiler_pass,
        ):
            compiler_pass = compiler_pass()
        if not callable(getattr(compiler_pass, "compile", None)):
            msg = (
                "Compiler pass expected to expose a compile() method, "
                f"got {type(compiler_pass).__name__}."
            )
            raise InvalidRegistrationError(msg)
        self._compiler_passes.append(compiler_pass)  # type: ignore[arg-type]

    def set_definition(self, service_id: str, definition: Definition) -> None:
        self._ensure_mutable("set_definition")
        if not isinstance(definition, Definition):
            msg = (
                f"set_definition('{service_id}') requires a Definition, "
                f"got {type(definition).__name__}."
            )
            raise InvalidRegistrationError(msg)
        if service_id in self._definitions:
            logger.debug("Replacing definition for service '%s'", service_id)
        self._definitions[service_id] = definition

    def has_definition(self, service_id: str) -> bool:
        self._ensure_mutable("has_definition")
        return service_id in self._definitions

    def get_definition(self, service_id: str) -> Definition:
        """Return the definition for ``service_id`` so it can be modified.

        Raises:
            UnknownDefinitionError: If nothing is registered under ``service_id``.
            ContainerCompiledError: If the container was compiled.

        """
        self._ensure_mutable("get_definition")
        try:
            return self._definitions[service_id]
        except KeyError:
            raise UnknownDefinitionError(service_id) from None

    def register(
        self,
        service_id: str,
        target: Callable[..., Any],
        *arguments: Any,
    ) -> Definition:
        """Create a definition for ``target``, register it and return it for further setup.

        Examples:
            .. code-block:: python

                container.register("mailer", Mailer, Reference("transport")).add_tag("mailer")

        """
        definition = Definition(target, arguments)
        self.set_definition(service_id, definition)
        return definition

    def set_parameter(self, name: str, value: Any) -> None:
        self._ensure_mutable("set_parameter")
        self._parameters.set(name, value)

    # endregion Builder Methods

    def find_tagged_service_ids(self, tag: str) -> list[str]:
        """Return ids of definitions carrying ``tag``, in registration order.

        Replacing a definition keeps its original position.
        """
        return [
            service_id
            for service_id, definition in self._definitions.items()
            if definition.has_tag(tag)
        ]

    def service_ids(self) -> list[str]:
        return list(self._definitions)

    def has_parameter(self, name: str) -> bool:
        return self._parameters.has(name)

    def get_parameter(self, name: str) -> Any:
        """Return the interpolated value of parameter ``name``.

        Raises:
            UnknownParameterError: If the parameter or a placeholder in it is undefined.
            CyclicParameterError: If the placeholders form a cycle.

        """
        return self._parameters.get(name)

    def interpolate_parameters(self, value: Any) -> Any:
        return self._parameters.interpolate(value)

    def compile(self) -> ResolvedContainer:
        """Run compiler passes, resolve parameters and fix the definition graph.

        Passes run in the order they were added. ``get`` is blocked while they
        run. Parameters are resolved right after so broken placeholders fail
        here rather than at first use. Calling ``compile`` after success is a no-op.

        If a pass or a parameter fails, the error propagates and the container
        stays uncompiled. Passes that completed are not run again by a later
        ``compile``.

        Returns:
            This container, typed as the read-only view.

        Raises:
            ContainerCompilingError: If called from inside a compiler pass.

        """
        with self._lock:
            if self._compiled:
                return self
            if self._compiling:
                msg = "The container is already compiling."
                raise ContainerCompilingError(msg)

            self._compiling = True
            try:
                # A retry after a failure resumes with the pass that failed.
                while self._passes_run < len(self._compiler_passes):
                    compiler_pass = self._compiler_passes[self._passes_run]
                    logger.debug("Running compiler pass %s", type(compiler_pass).__qualname__)
                    compiler_pass.compile(self)
                    self._passes_run += 1
                self._parameters.freeze()
            finally:
                self._compiling = False
            self._compiled = True

        logger.info(
            "Compiled container with %d definitions, %d parameters and %d compiler passes",
            len(self._definitions),
            len(self._parameters.names()),
            len(self._compiler_passes),
        )
        return self

    def has(self, service_id: str) -> bool:
        return service_id in self._definitions

    def get(self, service_id: str) -> Any:
        """Return the service registered under ``service_id``.

        The first call composes the service and its dependencies (compiling
        the container first if needed); later calls return the same instance.
        A failed compose caches nothing, so the next call starts over.

        Raises:
            ContainerCompilingError: If called while compiler passes run.
            UnknownServiceError: If no definition exists for ``service_id``.
            CircularReferenceError: If ``service_id`` is already being composed
                on the current resolution path.

        """
        if service_id in self._services:
            return self._services[service_id]

        with self._lock:
            if service_id in self._services:
                return self._services[service_id]

            if not self._compiled:
                if self._compiling:
                    msg = (
                        f"Cannot retrieve service '{service_id}' while the container is compiling."
                    )
                    raise ContainerCompilingError(msg)
                self.compile()

            definition = self._definitions.get(service_id)
            if definition is None:
                raise UnknownServiceError(service_id)

            if service_id in self._load_stack:
                raise CircularReferenceError(service_id, self._load_stack)

            self._load_stack.append(service_id)
            try:
                logger.debug("Composing service '%s'", service_id)
                service = definition.compose(self)
            finally:
                self._load_stack.pop()

            self._services[service_id] = service
            return service

    def _ensure_mutable(self, operation: str) -> None:
        if self._compiled:
            raise ContainerCompiledError(operation)


__all__ = ["Container"]
