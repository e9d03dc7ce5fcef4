"""Getter resolution for parsed sanjo trees."""

from __future__ import annotations

from typing import Union

from .model import ClassNode, Value

Target = Union[ClassNode, Value, str]


def apply_getter(target: Target | None, accessor: str) -> Target | None:
    """Resolve a single getter accessor on a target.

    - ClassNode: value key first, then the first child class of that name
    - Value holding a list: 1-based integer index into its elements
    - None / scalar Value / str: returns None
    """
    if target is None:
        return None

    if isinstance(target, ClassNode):
        if accessor in target.values:
            return target.values[accessor]
        return target.child(accessor)

    if isinstance(target, Value) and target.is_list:
        try:
            idx = int(accessor) - 1
        except ValueError:
            return None
        if 0 <= idx < len(target.items):
            return target.items[idx]
        return None

    return None


def resolve(node: ClassNode, path: str) -> Target | None:
    """Follow a dotted path such as ``Server.Tls.cert`` or ``Server.ports.2``.

    An empty path returns *node* itself.
    """
    target: Target | None = node
    if not path:
        return target
    for accessor in path.split("."):
        target = apply_getter(target, accessor)
        if target is None:
            return None
    return target
