"""Errors: circular references report the full resolution chain."""

from __future__ import annotations

from dicompose import CircularReferenceError, Container, Reference


class Node:
    def __init__(self, peer: Node) -> None:
        self.peer = peer


def main() -> None:
    container = Container()
    container.register("a", Node, Reference("b"))
    container.register("b", Node, Reference("c"))
    container.register("c", Node, Reference("a"))

    try:
        container.get("a")
    except CircularReferenceError as error:
        print(f"chain={' -> '.join(error.chain)}")  # => chain=a -> b -> c -> a


if __name__ == "__main__":
    main()
