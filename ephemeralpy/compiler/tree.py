"""
Syntax Tree Host
================

The standard library ``ast`` module parses and prints Python source but has
no notion of a node's parent or of editing a tree in place. This module adds
the primitives the rewrite passes rely on:

- parent links, maintained across edits
- ancestor search by predicate (iteration over parent links)
- pre-order traversal in document order
- insert-before, unshift-into-body and replace edits
"""

import ast
from typing import Callable, Dict, Iterator, List, Optional, Tuple


class SyntaxTree:
    """
    A parsed module plus the parent map needed to edit it in place.

    Usage:
        >>> tree = SyntaxTree(ast.parse("x = f(1)"), filename="demo.py")
        >>> call = tree.root.body[0].value
        >>> tree.statement_of(call) is tree.root.body[0]
        True
    """

    def __init__(self, root: ast.Module, filename: str = '<unknown>'):
        if not isinstance(root, ast.Module):
            raise TypeError(f"Expected ast.Module, got {type(root).__name__}")
        self.root = root
        self.filename = filename
        self._parents: Dict[ast.AST, ast.AST] = {}
        self._link(root)

    # ---- Navigation ----

    def parent(self, node: ast.AST) -> Optional[ast.AST]:
        return self._parents.get(node)

    def ancestors(self, node: ast.AST) -> Iterator[ast.AST]:
        """Yield the ancestors of ``node``, nearest first."""
        current = self._parents.get(node)
        while current is not None:
            yield current
            current = self._parents.get(current)

    def find_ancestor(
        self, node: ast.AST, predicate: Callable[[ast.AST], bool]
    ) -> Optional[ast.AST]:
        """Return the nearest ancestor satisfying ``predicate``, if any."""
        for ancestor in self.ancestors(node):
            if predicate(ancestor):
                return ancestor
        return None

    def statement_of(self, node: ast.AST) -> Optional[ast.stmt]:
        """Return the nearest statement that contains ``node``."""
        return self.find_ancestor(node, lambda n: isinstance(n, ast.stmt))

    def traverse(self, visit: Callable[[ast.AST], Optional[List[ast.AST]]]):
        """
        Depth-first, pre-order walk from the root.

        ``visit`` returning None descends into the node's children. Returning
        a list skips the children and walks the listed nodes next instead,
        which is how freshly inserted nodes get visited.
        """
        stack: List[ast.AST] = [self.root]
        while stack:
            node = stack.pop()
            requeue = visit(node)
            if requeue is None:
                requeue = list(ast.iter_child_nodes(node))
            stack.extend(reversed(requeue))

    def location(self, node: ast.AST) -> Tuple[int, int]:
        return getattr(node, 'lineno', 0), getattr(node, 'col_offset', 0)

    # ---- Edits ----

    def insert_before(self, target: ast.stmt, new_nodes: List[ast.stmt]):
        """Splice ``new_nodes`` into the statement list holding ``target``."""
        parent = self._parents.get(target)
        if parent is None:
            raise ValueError("Cannot insert before the tree root")

        body, index = self._locate_in_list(parent, target)
        body[index:index] = new_nodes
        for node in new_nodes:
            self._attach(node, parent)

    def unshift(self, owner: ast.AST, new_nodes: List[ast.stmt]):
        """Insert ``new_nodes`` at the top of ``owner.body``, after a docstring."""
        body = owner.body
        index = 1 if _has_docstring(body) else 0
        body[index:index] = new_nodes
        for node in new_nodes:
            self._attach(node, owner)

    def replace(self, old: ast.AST, new: ast.AST):
        """Put ``new`` where ``old`` currently sits in its parent."""
        parent = self._parents.get(old)
        if parent is None:
            raise ValueError("Cannot replace the tree root")

        for field_name, value in ast.iter_fields(parent):
            if value is old:
                setattr(parent, field_name, new)
                break
            if isinstance(value, list) and any(item is old for item in value):
                index = next(i for i, item in enumerate(value) if item is old)
                value[index] = new
                break
        else:
            raise ValueError(f"{type(old).__name__} is not a child of its recorded parent")

        del self._parents[old]
        self._attach(new, parent)

    # ---- Internals ----

    def _locate_in_list(self, parent: ast.AST, target: ast.AST) -> Tuple[list, int]:
        for _, value in ast.iter_fields(parent):
            if isinstance(value, list):
                for i, item in enumerate(value):
                    if item is target:
                        return value, i
        raise ValueError(
            f"{type(target).__name__} is not held in a statement list of "
            f"{type(parent).__name__}"
        )

    def _attach(self, node: ast.AST, parent: ast.AST):
        self._parents[node] = parent
        self._link(node)

    def _link(self, top: ast.AST):
        for node in ast.walk(top):
            for child in ast.iter_child_nodes(node):
                self._parents[child] = node


def _has_docstring(body: List[ast.stmt]) -> bool:
    return bool(body) and isinstance(body[0], ast.Expr) \
        and isinstance(body[0].value, ast.Constant) \
        and isinstance(body[0].value.value, str)
