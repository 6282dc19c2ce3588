"""Tests for the exception hierarchy."""

import pytest

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


@pytest.mark.parametrize(
    "exc",
    [
        AlreadyComposedError("composed"),
        ArgumentIndexOutOfRangeError(5, 2),
        CircularReferenceError("a", ["a", "b"]),
        ContainerCompiledError("set_definition"),
        ContainerCompilingError("compiling"),
        CyclicParameterError(["x", "y", "x"]),
        InterpolationDepthError("too deep"),
        InvalidRegistrationError("invalid"),
        InvalidTargetError("not callable"),
        MissingMethodError(object(), "run"),
        UnknownDefinitionError("svc"),
        UnknownParameterError("param"),
        UnknownServiceError("svc"),
    ],
)
def test_every_error_is_a_dicompose_error(exc: Exception) -> None:
    assert isinstance(exc, DicomposeError)
    assert isinstance(exc, Exception)


def test_cyclic_parameter_is_an_interpolation_depth_error() -> None:
    assert issubclass(CyclicParameterError, InterpolationDepthError)


class TestMessages:
    def test_argument_index_out_of_range(self) -> None:
        assert str(ArgumentIndexOutOfRangeError(5, 2)) == "Argument index #5 is out of range 0~1."

    def test_circular_reference_chain(self) -> None:
        exc = CircularReferenceError("a", ["a", "b", "c"])

        assert exc.chain == ["a", "b", "c", "a"]
        assert str(exc).endswith("a -> b -> c -> a")

    def test_unknown_parameter_direct_lookup(self) -> None:
        assert "Requested parameter 'x' does not exist." in str(UnknownParameterError("x"))

    def test_unknown_parameter_inside_interpolation(self) -> None:
        exc = UnknownParameterError("inner", referenced_by="outer")

        assert str(exc) == "Parameter 'outer' references a non-existing parameter 'inner'."

    def test_missing_method_names_service_type(self) -> None:
        class Mailer:
            pass

        assert "Mailer" in str(MissingMethodError(Mailer(), "send"))
        assert "'send'" in str(MissingMethodError(Mailer(), "send"))

    def test_container_compiled_names_operation(self) -> None:
        assert "'load'" in str(ContainerCompiledError("load"))

    def test_invalid_target_names_type(self) -> None:
        assert "got str" in str(InvalidTargetError("pkg.Class"))
