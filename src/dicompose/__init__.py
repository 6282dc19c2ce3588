from dicompose.compiler_pass import CompilerPass
from dicompose.container import Container
from dicompose.container_interface import MutableContainerBuilder, ResolvedContainer
from dicompose.definition import Definition
from dicompose.exceptions import (
    AlreadyComposedError,
    ArgumentIndexOutOfRangeError,
    CircularReferenceError,
    ContainerCompiledError,
    ContainerCompilingError,
    CyclicParameterError,
    DicomposeError,
    InterpolationDepthError,
    InvalidRegistrationError,
    InvalidTargetError,
    MissingMethodError,
    UnknownDefinitionError,
    UnknownParameterError,
    UnknownServiceError,
)
from dicompose.loaders import AbstractLoader, MappingLoader
from dicompose.lock_mode import LockMode
from dicompose.parameters import ParameterStore
from dicompose.references import Reference, TaggedReference
from dicompose.settings import ContainerSettings

__all__ = [
    "AbstractLoader",
    "AlreadyComposedError",
    "ArgumentIndexOutOfRangeError",
    "CircularReferenceError",
    "CompilerPass",
    "Container",
    "ContainerCompiledError",
    "ContainerCompilingError",
    "ContainerSettings",
    "CyclicParameterError",
    "Definition",
    "DicomposeError",
    "InterpolationDepthError",
    "InvalidRegistrationError",
    "InvalidTargetError",
    "LockMode",
    "MappingLoader",
    "MissingMethodError",
    "MutableContainerBuilder",
    "ParameterStore",
    "Reference",
    "ResolvedContainer",
    "TaggedReference",
    "UnknownDefinitionError",
    "UnknownParameterError",
    "UnknownServiceError",
]
