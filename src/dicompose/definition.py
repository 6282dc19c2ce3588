from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any

from typing_extensions import Self

from dicompose.exceptions import (
    AlreadyComposedError,
    ArgumentIndexOutOfRangeError,
    InterpolationDepthError,
    InvalidTargetError,
    MissingMethodError,
)
from dicompose.references import Reference, TaggedReference

if TYPE_CHECKING:
    from dicompose.container_interface import ResolvedContainer


class Definition:
    """Describe how to build one service.

    A definition holds a callable ``target`` and the positional ``arguments``
    it is called with, followed by method calls and property assignments
    applied to the new instance. Arguments, method-call arguments and property
    values may contain ``%name%`` placeholders, ``Reference`` and
    ``TaggedReference`` values, nested in mappings, lists and tuples.

    Tags are plain names. Compiler passes use them to find definitions with
    ``Container.find_tagged_service_ids``.

    Examples:
        .. code-block:: python

            definition = Definition(Mailer, [Reference("transport"), "%mailer.sender%"])
            definition.add_method_call("set_logger", [Reference("logger")])
            definition.add_tag("mailer")
            container.set_definition("mailer", definition)

    """

    def __init__(self, target: Callable[..., Any], arguments: Iterable[Any] | None = None) -> None:
        """Initialize a definition.

        Args:
            target: Class or factory function called with the compiled arguments.
            arguments: Positional arguments. The count is fixed from here on;
                ``replace_argument`` only swaps existing slots.

        Raises:
            InvalidTargetError: If ``target`` is not callable.

        """
        if not callable(target):
            raise InvalidTargetError(target)
        self._target = target
        self._arguments: list[Any] = list(arguments or [])
        self._method_calls: list[tuple[str, list[Any]]] = []
        self._properties: dict[str, Any] = {}
        self._tags: list[str] = []
        self._tag_set: set[str] = set()
        self._composed = False

    def __repr__(self) -> str:
        target_name = getattr(self._target, "__qualname__", repr(self._target))
        return f"Definition({target_name}, arguments={self._arguments!r}, tags={self._tags!r})"

    @property
    def target(self) -> Callable[..., Any]:
        return self._target

    @property
    def arguments(self) -> tuple[Any, ...]:
        return tuple(self._arguments)

    @property
    def method_calls(self) -> tuple[tuple[str, tuple[Any, ...]], ...]:
        return tuple((name, tuple(arguments)) for name, arguments in self._method_calls)

    @property
    def properties(self) -> Mapping[str, Any]:
        return dict(self._properties)

    @property
    def tags(self) -> tuple[str, ...]:
        return tuple(self._tags)

    @property
    def composed(self) -> bool:
        return self._composed

    def add_method_call(self, name: str, arguments: Iterable[Any] | None = None) -> Self:
        """Queue a method call on the instance after construction.

        Calls run in registration order. Whether the method exists is checked
        at compose time.
        """
        self._method_calls.append((name, list(arguments or [])))
        return self

    def add_tag(self, name: str) -> Self:
        if name not in self._tag_set:
            self._tag_set.add(name)
            self._tags.append(name)
        return self

    def has_tag(self, name: str) -> bool:
        return name in self._tag_set

    def set_property(self, name: str, value: Any) -> Self:
        """Assign ``value`` to attribute ``name`` once construction and method calls are done.

        Properties are not visible inside the constructor.
        """
        self._properties[name] = value
        return self

    def replace_argument(self, index: int, value: Any) -> Self:
        """Replace the positional argument at ``index``.

        Compiler passes use this to inject values into argument slots declared
        by the definition author.

        Raises:
            ArgumentIndexOutOfRangeError: If ``index`` is not in ``[0, len - 1]``.

        """
        if not 0 <= index < len(self._arguments):
            raise ArgumentIndexOutOfRangeError(index, len(self._arguments))
        self._arguments[index] = value
        return self

    def compose(self, container: ResolvedContainer) -> Any:
        """Build the service instance.

        Compiles the arguments, calls the target, runs the method calls in
        order and assigns properties. References are resolved through
        ``container.get``, so dependencies are composed first.

        Composition is not transactional. If a method call fails, earlier
        calls are not undone and the definition stays uncomposed.

        Args:
            container: Container used to resolve references and parameters.

        Returns:
            The new service instance.

        Raises:
            AlreadyComposedError: If this definition already produced an instance.
            MissingMethodError: If a method call names no callable attribute.

        """
        if self._composed:
            raise AlreadyComposedError("Definition was already composed.")

        arguments = [self._compile_argument(container, argument) for argument in self._arguments]
        service = self._target(*arguments)

        for name, call_arguments in self._method_calls:
            method = getattr(service, name, None)
            if not callable(method):
                raise MissingMethodError(service, name)
            method(*[self._compile_argument(container, argument) for argument in call_arguments])

        for name, value in self._properties.items():
            setattr(service, name, self._compile_argument(container, value))

        self._composed = True
        return service

    def _compile_argument(self, container: ResolvedContainer, argument: Any, depth: int = 0) -> Any:
        if depth > container.max_argument_depth:
            raise InterpolationDepthError(
                f"Argument nesting exceeds the maximum depth of {container.max_argument_depth}.",
            )
        if isinstance(argument, str):
            return container.interpolate_parameters(argument)
        if isinstance(argument, Reference):
            return container.get(argument.service_id)
        if isinstance(argument, TaggedReference):
            return [
                container.get(service_id)
                for service_id in container.find_tagged_service_ids(argument.tag)
            ]
        if isinstance(argument, Mapping):
            return {
                key: self._compile_argument(container, value, depth + 1)
                for key, value in argument.items()
            }
        if isinstance(argument, list):
            return [self._compile_argument(container, value, depth + 1) for value in argument]
        if isinstance(argument, tuple):
            return tuple(self._compile_argument(container, value, depth + 1) for value in argument)
        return argument


__all__ = ["Definition"]
