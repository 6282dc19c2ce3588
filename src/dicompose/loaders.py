from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from dicompose.definition import Definition
from dicompose.exceptions import InvalidRegistrationError
from dicompose.references import Reference, TaggedReference

if TYPE_CHECKING:
    from dicompose.container_interface import MutableContainerBuilder

_REFERENCE_PATTERN = re.compile(r"^@([A-Za-z0-9._-]+)$")
_SERVICE_KEYS = frozenset({"target", "instance", "arguments", "calls", "tags", "properties"})


class AbstractLoader(ABC):
    """Turn some configuration source into definitions, parameters and passes.

    Loaders only talk to the builder interface. Resolving classes from module
    paths, reading files and parsing formats is up to each loader; targets
    handed to ``Definition`` must already be callables.
    """

    @abstractmethod
    def load(self, container: MutableContainerBuilder, source: Any) -> None:
        """Register everything described by ``source`` on ``container``."""


class MappingLoader(AbstractLoader):
    """Load an already-parsed configuration document.

    The document is a mapping with optional ``parameters``, ``services`` and
    ``passes`` sections:

    .. code-block:: python

        {
            "parameters": {"mailer.sender": "noreply@%domain%", "domain": "example.org"},
            "services": {
                "transport": {"target": SmtpTransport, "arguments": ["%smtp.host%"]},
                "mailer": {
                    "target": Mailer,
                    "arguments": ["@transport", "%mailer.sender%"],
                    "calls": [["add_listeners", [{"!tagged": "mail.listener"}]]],
                    "tags": ["mailer"],
                    "properties": {"retries": 3},
                },
                "clock": {"instance": time},
            },
            "passes": [ArgvPass],
        }

    Inside arguments, call arguments and properties, a string ``"@id"`` becomes
    ``Reference("id")`` (write ``"@@text"`` for a literal ``"@text"``), and a
    single-key mapping ``{"!tagged": "tag"}`` becomes ``TaggedReference("tag")``.
    ``instance`` registers a ready object through a zero-argument factory.
    """

    tagged_key = "!tagged"

    def load(self, container: MutableContainerBuilder, source: Any) -> None:
        if not isinstance(source, Mapping):
            msg = f"Expected a mapping document, got {type(source).__name__}."
            raise InvalidRegistrationError(msg)

        for name, value in self._section(source, "parameters", Mapping, {}).items():
            container.set_parameter(name, value)

        for service_id, spec in self._section(source, "services", Mapping, {}).items():
            container.set_definition(service_id, self._parse_service(service_id, spec))

        for compiler_pass in self._section(source, "passes", list, []):
            container.add_compiler_pass(compiler_pass)

    def translate(self, value: Any) -> Any:
        """Replace reference syntax in ``value`` with reference objects, recursively."""
        if isinstance(value, str):
            if value.startswith("@@"):
                return value[1:]
            match = _REFERENCE_PATTERN.match(value)
            if match is not None:
                return Reference(match.group(1))
            return value
        if isinstance(value, Mapping):
            if len(value) == 1 and self.tagged_key in value:
                return TaggedReference(str(value[self.tagged_key]))
            return {key: self.translate(item) for key, item in value.items()}
        if isinstance(value, list):
            return [self.translate(item) for item in value]
        if isinstance(value, tuple):
            return tuple(self.translate(item) for item in value)
        return value

    def _parse_service(self, service_id: str, spec: Any) -> Definition:
        if not isinstance(spec, Mapping):
            msg = f"Service '{service_id}' must be described by a mapping."
            raise InvalidRegistrationError(msg)
        unknown = set(spec) - _SERVICE_KEYS
        if unknown:
            msg = f"Service '{service_id}' has unknown keys: {', '.join(sorted(unknown))}."
            raise InvalidRegistrationError(msg)
        if ("target" in spec) == ("instance" in spec):
            msg = f"Service '{service_id}' needs exactly one of 'target' or 'instance'."
            raise InvalidRegistrationError(msg)

        target = spec["target"] if "target" in spec else _static_factory(spec["instance"])
        definition = Definition(target, self.translate(list(spec.get("arguments") or [])))

        for call in spec.get("calls") or []:
            if isinstance(call, str):
                name, arguments = call, []
            else:
                name, *rest = call
                arguments = rest[0] if rest else []
            definition.add_method_call(name, self.translate(list(arguments or [])))

        for tag in spec.get("tags") or []:
            definition.add_tag(tag)

        for name, value in (spec.get("properties") or {}).items():
            definition.set_property(name, self.translate(value))

        return definition

    @staticmethod
    def _section(source: Mapping[str, Any], key: str, expected: type, default: Any) -> Any:
        section = source.get(key)
        if section is None:
            return default
        if not isinstance(section, expected):
            msg = f"Section '{key}' must be a {expected.__name__}."
            raise InvalidRegistrationError(msg)
        return section


def _static_factory(value: Any) -> Callable[[], Any]:
    def factory() -> Any:
        return value

    return factory


__all__ = ["AbstractLoader", "MappingLoader"]
