"""Shared pytest fixtures for dicompose tests."""

import pytest

from dicompose.container import Container
from dicompose.lock_mode import LockMode
from dicompose.settings import ContainerSettings


@pytest.fixture()
def settings() -> ContainerSettings:
    """Library defaults, independent of DICOMPOSE_* environment variables."""
    return ContainerSettings(
        max_parameter_depth=32,
        max_argument_depth=10,
        lock_mode=LockMode.THREAD,
    )


@pytest.fixture()
def container(settings: ContainerSettings) -> Container:
    """Fresh, uncompiled container."""
    return Container(settings=settings)


@pytest.fixture()
def unlocked_container() -> Container:
    """Container without resolution locking."""
    return Container(settings=ContainerSettings(lock_mode=LockMode.NONE))
