"""
Call-Site Validator
===================

Decides whether a call to the marker name can be rewritten. Recognition is by
literal name only: no import or binding resolution is attempted, so an
unrelated function that happens to share the marker's name is also checked.
"""

import ast
from dataclasses import dataclass, field
from typing import List, Tuple

from .errors import KeyKindViolation, PropertyKindViolation, ShapeViolation


@dataclass
class MarkerCall:
    """A validated marker call and the fields of its dict literal, in order."""
    node: ast.Call
    fields: List[Tuple[str, ast.expr]] = field(default_factory=list)
    lineno: int = 0
    col_offset: int = 0

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.fields)


def is_marker_call(node: ast.AST, marker_name: str) -> bool:
    """True for ``<marker_name>(...)`` with an unqualified callee."""
    return (
        isinstance(node, ast.Call)
        and isinstance(node.func, ast.Name)
        and node.func.id == marker_name
    )


def is_plain_key(key: ast.AST) -> bool:
    return (
        isinstance(key, ast.Constant)
        and isinstance(key.value, str)
        and key.value.isidentifier()
    )


def validate_call(node: ast.Call) -> MarkerCall:
    """
    Check the shape of a marker call.

    Raises ShapeViolation, PropertyKindViolation or KeyKindViolation for the
    first rule the call breaks. Never modifies the tree.
    """
    if len(node.args) != 1 or node.keywords or not isinstance(node.args[0], ast.Dict):
        raise ShapeViolation(node)

    literal = node.args[0]

    # {**rest} has a None key
    if any(key is None for key in literal.keys):
        raise PropertyKindViolation(node)

    if not all(is_plain_key(key) for key in literal.keys):
        raise KeyKindViolation(node)

    return MarkerCall(
        node=node,
        fields=[(key.value, value) for key, value in zip(literal.keys, literal.values)],
        lineno=getattr(node, 'lineno', 0),
        col_offset=getattr(node, 'col_offset', 0),
    )
