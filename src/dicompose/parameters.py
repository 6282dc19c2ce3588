from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from typing import Any

from dicompose.exceptions import (
    ContainerCompiledError,
    CyclicParameterError,
    UnknownParameterError,
)
from dicompose.settings import DEFAULT_MAX_PARAMETER_DEPTH

PLACEHOLDER_PATTERN = re.compile(r"%([A-Za-z0-9._-]+)%")
"""Match a ``%name%`` parameter placeholder."""


class ParameterStore:
    """Hold named configuration values and interpolate ``%name%`` placeholders.

    Values are stored raw and interpolated on read, so a parameter may refer to
    parameters that are set later. A string made of exactly one placeholder
    resolves to the referenced value with its type kept (a list parameter stays
    a list); placeholders inside longer strings are replaced by ``str()`` of
    their value. Lists and mappings are handed out as copies.
    Mappings, lists and tuples are interpolated element-wise.

    ``freeze`` resolves every parameter once and locks the store. Afterwards
    reads are served from the resolved values and ``set`` is rejected.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_PARAMETER_DEPTH) -> None:
        self._max_depth = max_depth
        self._raw: dict[str, Any] = {}
        self._resolved: dict[str, Any] | None = None

    @property
    def is_frozen(self) -> bool:
        return self._resolved is not None

    def set(self, name: str, value: Any) -> None:
        """Create or replace a parameter. The value is not validated until read.

        Raises:
            ContainerCompiledError: If the store was frozen.

        """
        if self._resolved is not None:
            raise ContainerCompiledError("set_parameter")
        self._raw[name] = value

    def has(self, name: str) -> bool:
        return name in self._raw

    def names(self) -> list[str]:
        return list(self._raw)

    def get(self, name: str) -> Any:
        """Return the fully interpolated value of a parameter.

        Lists and mappings are returned as fresh copies, so callers may mutate
        them without affecting the stored parameter.

        Args:
            name: Parameter name.

        Raises:
            UnknownParameterError: If ``name`` or any placeholder reachable from
                its value is not defined.
            CyclicParameterError: If the placeholders lead back to a parameter
                already being interpolated, or nest deeper than the bound.

        """
        if self._resolved is not None:
            try:
                return _detach(self._resolved[name])
            except KeyError:
                raise UnknownParameterError(name) from None
        if name not in self._raw:
            raise UnknownParameterError(name)
        return _detach(self._resolve(name, (), {}))

    def interpolate(self, value: Any) -> Any:
        """Replace placeholders in an arbitrary value using this store.

        Definitions use this to compile string arguments. Non-string scalars are
        returned unchanged. Like ``get``, containers taken from parameters are
        copied.
        """
        return _detach(self._interpolate(value, (), {}))

    def freeze(self) -> None:
        """Resolve every parameter once and reject further changes.

        Placeholder errors surface here instead of at first use.
        """
        if self._resolved is not None:
            return
        cache: dict[str, tuple[Any, int]] = {}
        self._resolved = {name: self._resolve(name, (), cache) for name in self._raw}

    def _resolve(
        self,
        name: str,
        path: tuple[str, ...],
        cache: dict[str, tuple[Any, int]],
    ) -> Any:
        # cache maps a resolved name to its value and the height of its
        # placeholder chain, so a hit enforces the same depth bound.
        if name in path:
            raise CyclicParameterError([*path, name])
        if name in cache:
            value, height = cache[name]
            if len(path) + height > self._max_depth:
                raise CyclicParameterError([*path, name])
            return value
        if len(path) >= self._max_depth:
            raise CyclicParameterError([*path, name])

        raw = self._raw[name]
        value = self._interpolate(raw, (*path, name), cache)
        height = 1 + max(
            (cache[child][1] for child in _placeholder_names(raw) if child in cache),
            default=0,
        )
        cache[name] = (value, height)
        return value

    def _interpolate(
        self,
        value: Any,
        path: tuple[str, ...],
        cache: dict[str, tuple[Any, int]],
    ) -> Any:
        if isinstance(value, str):
            return self._interpolate_string(value, path, cache)
        if isinstance(value, Mapping):
            return {key: self._interpolate(item, path, cache) for key, item in value.items()}
        if isinstance(value, list):
            return [self._interpolate(item, path, cache) for item in value]
        if isinstance(value, tuple):
            return tuple(self._interpolate(item, path, cache) for item in value)
        return value

    def _interpolate_string(
        self,
        value: str,
        path: tuple[str, ...],
        cache: dict[str, tuple[Any, int]],
    ) -> Any:
        whole = PLACEHOLDER_PATTERN.fullmatch(value)
        if whole is not None:
            return self._lookup(whole.group(1), path, cache)
        return PLACEHOLDER_PATTERN.sub(
            lambda match: str(self._lookup(match.group(1), path, cache)),
            value,
        )

    def _lookup(
        self,
        name: str,
        path: tuple[str, ...],
        cache: dict[str, tuple[Any, int]],
    ) -> Any:
        if self._resolved is not None and name in self._resolved:
            return self._resolved[name]
        if name not in self._raw:
            # Attribute the failure to the outermost parameter being read.
            raise UnknownParameterError(name, referenced_by=path[0] if path else None)
        return self._resolve(name, path, cache)


def _placeholder_names(value: Any) -> Iterator[str]:
    if isinstance(value, str):
        for match in PLACEHOLDER_PATTERN.finditer(value):
            yield match.group(1)
    elif isinstance(value, Mapping):
        for item in value.values():
            yield from _placeholder_names(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _placeholder_names(item)


def _detach(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _detach(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_detach(item) for item in value]
    if isinstance(value, tuple):
        return tuple(_detach(item) for item in value)
    return value


__all__ = ["PLACEHOLDER_PATTERN", "ParameterStore"]
