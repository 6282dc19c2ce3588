"""Compiler passes: inject command line arguments into tagged services.

Services tagged ``argv.constructor`` get ``sys.argv`` as their first
constructor argument; services tagged ``argv.setter`` get it through a method
call. The definitions only declare the slot; the pass fills it in.
"""

from __future__ import annotations

import sys

from dicompose import CompilerPass, Container, MutableContainerBuilder


class ArgvPass(CompilerPass):
    def compile(self, container: MutableContainerBuilder) -> None:
        for service_id in container.find_tagged_service_ids("argv.constructor"):
            container.get_definition(service_id).replace_argument(0, sys.argv)
        for service_id in container.find_tagged_service_ids("argv.setter"):
            container.get_definition(service_id).add_method_call(
                "set_command_line_arguments",
                [sys.argv],
            )


class ArgvAware:
    def __init__(self, args: list[str] | None) -> None:
        self.constructor_args = args
        self.setter_args: list[str] | None = None

    def set_command_line_arguments(self, args: list[str]) -> None:
        self.setter_args = args


def main() -> None:
    container = Container()
    container.register("by_constructor", ArgvAware, None).add_tag("argv.constructor")
    container.register("by_setter", ArgvAware, None).add_tag("argv.setter")
    container.add_compiler_pass(ArgvPass)

    print(f"constructor={container.get('by_constructor').constructor_args == sys.argv}")  # => constructor=True
    print(f"setter={container.get('by_setter').setter_args == sys.argv}")  # => setter=True


if __name__ == "__main__":
    main()
