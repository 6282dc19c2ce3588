from __future__ import annotations

import pytest

from dicompose.container import Container
from dicompose.lock_mode import LockMode
from dicompose.settings import (
    DEFAULT_MAX_ARGUMENT_DEPTH,
    DEFAULT_MAX_PARAMETER_DEPTH,
    ContainerSettings,
)


@pytest.fixture()
def dicompose_settings() -> ContainerSettings:
    """Provide container settings with library defaults, ignoring ``DICOMPOSE_*`` variables.

    Override this fixture to tune depth bounds or the lock mode for a module.
    """
    return ContainerSettings.model_construct(
        max_parameter_depth=DEFAULT_MAX_PARAMETER_DEPTH,
        max_argument_depth=DEFAULT_MAX_ARGUMENT_DEPTH,
        lock_mode=LockMode.THREAD,
    )


@pytest.fixture()
def dicompose_container(dicompose_settings: ContainerSettings) -> Container:
    """Create a per-test, uncompiled container.

    The fixture is function-scoped, so definitions and cached services are
    isolated between tests.

    Returns:
        A new ``Container`` built from ``dicompose_settings``.

    """
    return Container(settings=dicompose_settings)
