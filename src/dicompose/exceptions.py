from __future__ import annotations

from collections.abc import Sequence


class DicomposeError(Exception):
    """Represent a base class for all dicompose-specific failures.

    Catch this type when you want to handle any dicompose error path without
    matching each concrete exception class individually.
    """


class InvalidRegistrationError(DicomposeError):
    """Signal an invalid value passed to the ingestion API.

    Raised by ``Container.set_definition`` when the value is not a
    ``Definition``, by ``Container.add_compiler_pass`` when the value exposes no
    ``compile()`` method, and by loaders for malformed documents.
    """


class UnknownParameterError(DicomposeError):
    """Signal a lookup or placeholder that names an undefined parameter.

    ``name`` is the missing parameter. ``referenced_by`` is the parameter whose
    value contained the placeholder, or ``None`` for a direct lookup.
    """

    def __init__(self, name: str, referenced_by: str | None = None) -> None:
        self.name = name
        self.referenced_by = referenced_by
        if referenced_by is None:
            msg = f"Requested parameter '{name}' does not exist."
        else:
            msg = f"Parameter '{referenced_by}' references a non-existing parameter '{name}'."
        super().__init__(msg)


class InterpolationDepthError(DicomposeError):
    """Signal that interpolation recursed deeper than the configured bound.

    Raised while compiling definition arguments nested deeper than
    ``ContainerSettings.max_argument_depth``.
    """


class CyclicParameterError(InterpolationDepthError):
    """Signal a parameter whose placeholders lead back to itself.

    ``chain`` lists the parameter names on the interpolation path, ending with
    the name that closed the cycle (or the name that exceeded the depth bound).
    """

    def __init__(self, chain: Sequence[str]) -> None:
        self.chain = list(chain)
        super().__init__(
            "Cyclic parameter reference detected: " + " -> ".join(self.chain),
        )


class InvalidTargetError(DicomposeError):
    """Signal a definition target that cannot be called to build a service."""

    def __init__(self, target: object) -> None:
        self.target = target
        super().__init__(
            f"Definition target must be callable, got {type(target).__name__} instead.",
        )


class ArgumentIndexOutOfRangeError(DicomposeError):
    """Signal ``Definition.replace_argument`` with an index outside the argument list."""

    def __init__(self, index: int, length: int) -> None:
        self.index = index
        self.length = length
        super().__init__(
            f"Argument index #{index} is out of range 0~{length - 1}.",
        )


class AlreadyComposedError(DicomposeError):
    """Signal a second ``compose`` call on the same definition.

    Each definition produces exactly one instance. Repeated lookups go through
    ``Container.get``, which serves the cached instance.
    """


class MissingMethodError(DicomposeError):
    """Signal a registered method call the composed service cannot answer."""

    def __init__(self, service: object, method: str) -> None:
        self.service = service
        self.method = method
        super().__init__(
            f"The service {type(service).__name__} does not have a method named '{method}'.",
        )


class UnknownDefinitionError(DicomposeError):
    """Signal ``Container.get_definition`` for an unregistered id."""

    def __init__(self, service_id: str) -> None:
        self.service_id = service_id
        super().__init__(f"The requested definition '{service_id}' does not exist.")


class UnknownServiceError(DicomposeError):
    """Signal ``Container.get`` for an id without a definition."""

    def __init__(self, service_id: str) -> None:
        self.service_id = service_id
        super().__init__(f"The requested service '{service_id}' does not exist.")


class CircularReferenceError(DicomposeError):
    """Signal a service that depends on itself through its own dependencies.

    ``chain`` is the resolution path in dependency order, ending with the id
    that was requested again, for example ``["a", "b", "a"]``.
    """

    def __init__(self, service_id: str, load_stack: Sequence[str]) -> None:
        self.service_id = service_id
        self.chain = [*load_stack, service_id]
        super().__init__(
            f"Circular reference detected while initializing service '{service_id}': "
            + " -> ".join(self.chain),
        )


class ContainerCompilingError(DicomposeError):
    """Signal service retrieval while compiler passes are running.

    Compiler passes may read and mutate definitions and parameters, but no
    service may be instantiated until compilation finishes.
    """


class ContainerCompiledError(DicomposeError):
    """Signal use of the builder surface after the container was compiled.

    The shape of the service graph is fixed once resolution can begin.
    """

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(
            f"Cannot call '{operation}' after the container has been compiled.",
        )
