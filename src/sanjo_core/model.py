"""Data model for parsed sanjo trees: classes and their values."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Union


DEFAULT_CLASS_NAME = "default"

Data = Union[str, tuple[str, ...]]


# ---------------------------------------------------------------------------
# Value
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Value:
    """A key paired with either a single string or an ordered list of strings."""

    key: str
    data: Data

    @property
    def is_list(self) -> bool:
        return isinstance(self.data, tuple)

    @property
    def items(self) -> tuple[str, ...]:
        """The data as a tuple; a scalar becomes a single element."""
        if isinstance(self.data, tuple):
            return self.data
        return (self.data,)

    def __str__(self) -> str:
        if isinstance(self.data, tuple):
            return "[" + ", ".join(self.data) + "]"
        return self.data


# ---------------------------------------------------------------------------
# ClassNode
# ---------------------------------------------------------------------------

@dataclass
class ClassNode:
    """A named class owning its values and child classes.

    The parent is a plain back reference kept out of equality and repr;
    ownership flows from a parent to its ``children``.
    """

    name: str
    children: list[ClassNode] = field(default_factory=list)
    values: dict[str, Value] = field(default_factory=dict)
    _parent: ClassNode | None = field(
        default=None, init=False, repr=False, compare=False
    )

    @classmethod
    def default(cls) -> ClassNode:
        """The implicit root class of a parse."""
        return cls(DEFAULT_CLASS_NAME)

    # -- Mutation (parser only) -----------------------------------------

    def add_child(self, node: ClassNode) -> None:
        node._parent = self
        self.children.append(node)

    def put_value(self, value: Value) -> None:
        self.values[value.key] = value

    # -- Read access ----------------------------------------------------

    @property
    def parent(self) -> ClassNode | None:
        return self._parent

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def level(self) -> int:
        """0 for the root, parent level + 1 otherwise."""
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    @property
    def path(self) -> str:
        """Dotted class names from the top-level class down; empty for the root."""
        parts: list[str] = []
        node: ClassNode | None = self
        while node is not None and not node.is_root:
            parts.append(node.name)
            node = node.parent
        return ".".join(reversed(parts))

    def child(self, name: str) -> ClassNode | None:
        for node in self.children:
            if node.name == name:
                return node
        return None

    def children_named(self, name: str) -> list[ClassNode]:
        return [node for node in self.children if node.name == name]

    def get(self, key: str, default: Value | None = None) -> Value | None:
        return self.values.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self.values

    def walk(self) -> Iterator[ClassNode]:
        """Depth-first pre-order traversal, starting with this node."""
        yield self
        for node in self.children:
            yield from node.walk()
