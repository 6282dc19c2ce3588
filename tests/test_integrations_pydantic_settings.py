from __future__ import annotations

import importlib
from types import ModuleType
from typing import Any

import pytest
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

import dicompose.integrations.pydantic_settings as pydantic_settings_integration
from dicompose.container import Container
from dicompose.exceptions import InvalidRegistrationError
from dicompose.integrations.pydantic_settings import (
    SettingsParametersPass,
    is_pydantic_settings_instance,
    is_pydantic_settings_subclass,
    settings_to_parameters,
)
from dicompose.lock_mode import LockMode
from dicompose.settings import ContainerSettings


class DatabaseSettings(BaseModel):
    host: str = "localhost"
    port: int = 5432


class MailSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TEST_MAIL_")

    sender: str = "noreply@example.org"
    retries: int = 1
    database: DatabaseSettings = DatabaseSettings()


class Mailer:
    def __init__(self, sender: str, retries: int) -> None:
        self.sender = sender
        self.retries = retries


def test_settings_to_parameters_without_prefix() -> None:
    parameters = settings_to_parameters(MailSettings())

    assert parameters == {
        "sender": "noreply@example.org",
        "retries": 1,
        "database": {"host": "localhost", "port": 5432},
    }


def test_settings_to_parameters_with_prefix() -> None:
    parameters = settings_to_parameters(MailSettings(), prefix="mail")

    assert parameters["mail.sender"] == "noreply@example.org"
    assert parameters["mail.database"] == {"host": "localhost", "port": 5432}


def test_pass_copies_settings_instance_into_parameters(container: Container) -> None:
    container.add_compiler_pass(
        SettingsParametersPass(MailSettings(sender="ops@example.org"), prefix="mail"),
    )
    container.register("mailer", Mailer, "%mail.sender%", "%mail.retries%")

    mailer = container.get("mailer")

    assert mailer.sender == "ops@example.org"
    assert mailer.retries == 1
    assert container.get_parameter("mail.database") == {"host": "localhost", "port": 5432}


def test_pass_reads_environment_at_compile_time(
    container: Container,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    container.add_compiler_pass(SettingsParametersPass(MailSettings, prefix="mail"))
    container.register("mailer", Mailer, "%mail.sender%", "%mail.retries%")
    monkeypatch.setenv("TEST_MAIL_SENDER", "env@example.org")
    monkeypatch.setenv("TEST_MAIL_RETRIES", "5")

    mailer = container.get("mailer")

    assert mailer.sender == "env@example.org"
    assert mailer.retries == 5


def test_pass_without_override_keeps_existing_parameters(container: Container) -> None:
    container.set_parameter("mail.sender", "explicit@example.org")
    container.add_compiler_pass(SettingsParametersPass(MailSettings(), prefix="mail", override=False))

    container.compile()

    assert container.get_parameter("mail.sender") == "explicit@example.org"
    assert container.get_parameter("mail.retries") == 1


def test_pass_overrides_existing_parameters_by_default(container: Container) -> None:
    container.set_parameter("sender", "explicit@example.org")
    container.add_compiler_pass(SettingsParametersPass(MailSettings()))

    container.compile()

    assert container.get_parameter("sender") == "noreply@example.org"


@pytest.mark.parametrize("value", [DatabaseSettings(), DatabaseSettings, {"sender": "x"}, None])
def test_pass_rejects_non_settings(value: Any) -> None:
    with pytest.raises(InvalidRegistrationError):
        SettingsParametersPass(value)


def test_settings_detection() -> None:
    assert is_pydantic_settings_subclass(MailSettings)
    assert is_pydantic_settings_instance(MailSettings())
    assert not is_pydantic_settings_subclass(MailSettings())
    assert not is_pydantic_settings_subclass(DatabaseSettings)
    assert not is_pydantic_settings_instance(DatabaseSettings())


def test_load_base_settings_returns_none_for_missing_module(monkeypatch: Any) -> None:
    def _raise_import_error(_module_name: str) -> ModuleType:
        raise ImportError

    monkeypatch.setattr(importlib, "import_module", _raise_import_error)

    assert pydantic_settings_integration._load_base_settings("missing.module") is None


def test_load_base_settings_returns_none_when_base_settings_is_not_a_type(
    monkeypatch: Any,
) -> None:
    module = ModuleType("test_module")
    module.BaseSettings = "not-a-type"  # type: ignore[attr-defined]

    def _import_module(_module_name: str) -> ModuleType:
        return module

    monkeypatch.setattr(importlib, "import_module", _import_module)

    assert pydantic_settings_integration._load_base_settings("fake.module") is None


def test_is_pydantic_settings_subclass_returns_false_on_issubclass_type_error(
    monkeypatch: Any,
) -> None:
    class _Candidate:
        pass

    monkeypatch.setattr(pydantic_settings_integration, "SETTINGS_BASES", ("not-a-class",))

    assert is_pydantic_settings_subclass(_Candidate) is False


class TestContainerSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("MAX_PARAMETER_DEPTH", "MAX_ARGUMENT_DEPTH", "LOCK_MODE"):
            monkeypatch.delenv(f"DICOMPOSE_{name}", raising=False)

        settings = ContainerSettings()

        assert settings.max_parameter_depth == 32
        assert settings.max_argument_depth == 10
        assert settings.lock_mode is LockMode.THREAD

    def test_container_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DICOMPOSE_LOCK_MODE", "none")
        monkeypatch.setenv("DICOMPOSE_MAX_ARGUMENT_DEPTH", "3")

        container = Container()

        assert container.settings.lock_mode is LockMode.NONE
        assert container.max_argument_depth == 3

    def test_rejects_non_positive_bounds(self) -> None:
        with pytest.raises(ValueError):
            ContainerSettings(max_parameter_depth=0)


def test_settings_bases_hold_only_pydantic_settings() -> None:
    assert pydantic_settings_integration.SETTINGS_BASES == (BaseSettings,)
