from __future__ import annotations

from dicompose.container import Container
from dicompose.lock_mode import LockMode
from dicompose.references import Reference
from dicompose.settings import ContainerSettings

pytest_plugins = ["dicompose.integrations.pytest_plugin"]


class Greeter:
    def __init__(self, greeting: str) -> None:
        self.greeting = greeting


class App:
    def __init__(self, greeter: Greeter) -> None:
        self.greeter = greeter


def test_container_fixture_is_fresh_and_uncompiled(dicompose_container: Container) -> None:
    assert isinstance(dicompose_container, Container)
    assert not dicompose_container.is_compiled
    assert dicompose_container.service_ids() == []


def test_container_fixture_resolves_services(dicompose_container: Container) -> None:
    dicompose_container.set_parameter("greeting", "hello")
    dicompose_container.register("greeter", Greeter, "%greeting%")
    dicompose_container.register("app", App, Reference("greeter"))

    assert dicompose_container.get("app").greeter.greeting == "hello"


def test_settings_fixture_uses_library_defaults(
    dicompose_settings: ContainerSettings,
    dicompose_container: Container,
) -> None:
    assert dicompose_settings.max_parameter_depth == 32
    assert dicompose_settings.max_argument_depth == 10
    assert dicompose_settings.lock_mode is LockMode.THREAD
    assert dicompose_container.settings is dicompose_settings
