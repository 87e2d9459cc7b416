"""
Insertion-Point Selector
========================

Chooses the statement slot that receives a hoisted declaration. The decision
is taken over the anchor's ScopeKind, in this priority order:

1. GENERATOR: first statement of the generator's own body. Every live
   activation (each iterator, each pending coroutine) then owns its object.

       def gen(n):                        def gen(n):
           for i in range(n):      ->         _gen_ephemeral_obj0 = {'i': None}
               yield ephemeral({'i': i})      for i in range(n):
                                                  _gen_ephemeral_obj0['i'] = i
                                                  yield _gen_ephemeral_obj0

2. MODULE_ROOT: immediately before the statement containing the call.

3. STATEMENT_SCOPE: immediately before the anchor ``def``. For a nested
   ``def`` this lands inside the enclosing function, so one binding is made
   per execution of the outer function and shared by every call of the inner
   function value it produced.

4. EXPRESSION_SCOPE: immediately before the statement that embeds the anchor
   ``lambda``, with the same sharing as case 3.

Names bound in a class body are not visible to the functions, lambdas and
comprehensions defined in it, so for cases 2-4 a slot sitting directly in a
class body is moved up to the ``class`` statement itself, as many times as
needed.
"""

import ast
from dataclasses import dataclass
from enum import Enum

from .errors import EphemeralInternalError
from .scope import ScopeAnchor, ScopeKind
from .tree import SyntaxTree


class InsertionMode(Enum):
    BEFORE = 'before'      # splice before ``target`` in its statement list
    UNSHIFT = 'unshift'    # push onto the top of ``target.body``


@dataclass(frozen=True)
class InsertionPoint:
    mode: InsertionMode
    target: ast.AST


def select_insertion_point(
    tree: SyntaxTree, anchor: ScopeAnchor, call: ast.AST
) -> InsertionPoint:
    """Decide where the declaration for ``call``'s binding goes."""
    kind = anchor.kind

    if kind is ScopeKind.GENERATOR:
        return InsertionPoint(InsertionMode.UNSHIFT, anchor.node)

    if kind is ScopeKind.MODULE_ROOT:
        slot = tree.statement_of(call)
    elif kind is ScopeKind.STATEMENT_SCOPE:
        slot = anchor.node
    elif kind is ScopeKind.EXPRESSION_SCOPE:
        slot = tree.statement_of(anchor.node)
    else:
        raise EphemeralInternalError(f"Unknown scope kind {kind!r}")

    if slot is None:
        raise EphemeralInternalError(
            f"No statement encloses {type(call).__name__} at {tree.location(call)}"
        )
    return InsertionPoint(InsertionMode.BEFORE, _escape_class_bodies(tree, slot))


def _escape_class_bodies(tree: SyntaxTree, slot: ast.stmt) -> ast.stmt:
    parent = tree.parent(slot)
    while isinstance(parent, ast.ClassDef) and slot in parent.body:
        slot = parent
        parent = tree.parent(slot)
    return slot
