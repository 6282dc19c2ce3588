from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING, Any

from dicompose.compiler_pass import CompilerPass
from dicompose.exceptions import InvalidRegistrationError

if TYPE_CHECKING:
    from dicompose.container_interface import MutableContainerBuilder

logger = logging.getLogger(__name__)


def _load_base_settings(module_name: str) -> type[Any] | None:
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None
    base_settings = getattr(module, "BaseSettings", None)
    if isinstance(base_settings, type):
        return base_settings
    return None


def _build_settings_bases() -> tuple[type[Any], ...]:
    base_settings = _load_base_settings("pydantic_settings")
    return () if base_settings is None else (base_settings,)


SETTINGS_BASES: tuple[type[Any], ...] = _build_settings_bases()


def is_pydantic_settings_subclass(candidate: object) -> bool:
    """Return whether ``candidate`` is a ``pydantic_settings.BaseSettings`` subclass."""
    if not isinstance(candidate, type):
        return False
    try:
        return any(issubclass(candidate, base) for base in SETTINGS_BASES)
    except TypeError:
        return False


def is_pydantic_settings_instance(candidate: object) -> bool:
    return is_pydantic_settings_subclass(type(candidate))


def settings_to_parameters(settings: Any, prefix: str | None = None) -> dict[str, Any]:
    """Flatten the top-level fields of a settings model into parameter names.

    Nested models become nested mappings under their field name.

    Args:
        settings: Pydantic settings instance.
        prefix: Optional namespace; ``prefix.field`` names are produced when set.

    """
    values = settings.model_dump()
    if prefix is None:
        return dict(values)
    return {f"{prefix}.{name}": value for name, value in values.items()}


class SettingsParametersPass(CompilerPass):
    """Copy the fields of a pydantic settings model into container parameters.

    Environment-derived configuration then reaches definitions through
    ``%name%`` placeholders. When given a settings class, the pass instantiates
    it at compile time, so the environment is read as late as possible.

    Examples:
        .. code-block:: python

            class MailSettings(BaseSettings):
                model_config = SettingsConfigDict(env_prefix="MAIL_")
                sender: str = "noreply@example.org"


            container.add_compiler_pass(SettingsParametersPass(MailSettings, prefix="mail"))
            container.register("mailer", Mailer, "%mail.sender%")

    """

    def __init__(self, settings: Any, prefix: str | None = None, *, override: bool = True) -> None:
        """Initialize the pass.

        Args:
            settings: Settings instance or settings class.
            prefix: Optional parameter namespace.
            override: Replace parameters that are already set. When ``False``,
                existing parameters win over settings values.

        Raises:
            InvalidRegistrationError: If ``settings`` is not a pydantic settings
                class or instance.

        """
        if not (is_pydantic_settings_subclass(settings) or is_pydantic_settings_instance(settings)):
            msg = (
                "SettingsParametersPass requires a pydantic BaseSettings class or instance, "
                f"got {type(settings).__name__}."
            )
            raise InvalidRegistrationError(msg)
        self._settings = settings
        self._prefix = prefix
        self._override = override

    def compile(self, container: MutableContainerBuilder) -> None:
        settings = self._settings() if isinstance(self._settings, type) else self._settings
        for name, value in settings_to_parameters(settings, self._prefix).items():
            if not self._override and container.has_parameter(name):
                logger.debug("Keeping existing parameter '%s' over settings value", name)
                continue
            container.set_parameter(name, value)


__all__ = [
    "SETTINGS_BASES",
    "SettingsParametersPass",
    "is_pydantic_settings_instance",
    "is_pydantic_settings_subclass",
    "settings_to_parameters",
]
