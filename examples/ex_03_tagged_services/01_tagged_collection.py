"""Tagged collections: inject every service carrying a tag.

A ``TaggedReference`` compiles to the list of tagged services in the order
their definitions were registered. The same document shape can be loaded with
``MappingLoader``.
"""

from __future__ import annotations

from dicompose import Container, MappingLoader


class Plugin:
    def __init__(self, name: str) -> None:
        self.name = name


class PluginRegistry:
    def __init__(self, plugins: list[Plugin]) -> None:
        self.plugins = plugins


def main() -> None:
    container = Container()
    container.load(
        MappingLoader(),
        {
            "services": {
                "plugin.auth": {"target": Plugin, "arguments": ["auth"], "tags": ["plugin"]},
                "plugin.cache": {"target": Plugin, "arguments": ["cache"], "tags": ["plugin"]},
                "unrelated": {"target": Plugin, "arguments": ["unrelated"]},
                "registry": {"target": PluginRegistry, "arguments": [{"!tagged": "plugin"}]},
            },
        },
    )

    registry = container.get("registry")

    print(f"plugins={[plugin.name for plugin in registry.plugins]}")  # => plugins=['auth', 'cache']
    print(f"shared={registry.plugins[0] is container.get('plugin.auth')}")  # => shared=True


if __name__ == "__main__":
    main()
