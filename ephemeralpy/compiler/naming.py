"""
Name Allocator
==============

Hands out the identifiers of hoisted bindings. Ordinals are counted per scope
anchor, starting at 0, and only ever go up.

The table is arena-shaped: every anchor gets a dense index the first time it
is seen (keyed by ``id()``, so no node is kept alive by the table) and its
next ordinal lives in a list at that index. The whole table belongs to one
run and is dropped with it.

Python closures see every enclosing scope, so a binding hoisted into an
inner block must never reuse a name an outer block already binds. The
allocator therefore skips any ordinal whose identifier is already taken in
the run, including names that appear in the source itself.
"""

import ast
from typing import Dict, Iterable, List, Set, Tuple


class NameAllocator:
    """
    Per-run ordinal table.

    Usage:
        >>> names = NameAllocator('_gen_ephemeral_obj')
        >>> names.allocate(func_node)
        (0, '_gen_ephemeral_obj0')
        >>> names.allocate(func_node)
        (1, '_gen_ephemeral_obj1')
    """

    def __init__(self, prefix: str, reserved: Iterable[str] = ()):
        self.prefix = prefix
        self._index: Dict[int, int] = {}
        self._next: List[int] = []
        self._taken: Set[str] = set(reserved)

    @classmethod
    def for_module(cls, prefix: str, root: ast.AST) -> 'NameAllocator':
        """Build an allocator that avoids every name already used in ``root``."""
        reserved = set()
        for node in ast.walk(root):
            if isinstance(node, ast.Name):
                reserved.add(node.id)
            elif isinstance(node, ast.arg):
                reserved.add(node.arg)
            elif isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
                reserved.add(node.name)
            elif isinstance(node, ast.alias):
                reserved.add((node.asname or node.name).split('.')[0])
        return cls(prefix, reserved)

    def allocate(self, anchor: ast.AST) -> Tuple[int, str]:
        """Return the next free ordinal for ``anchor`` and its identifier."""
        slot = self._slot(anchor)
        ordinal = self._next[slot]
        while self.identifier(ordinal) in self._taken:
            ordinal += 1

        name = self.identifier(ordinal)
        self._taken.add(name)
        self._next[slot] = ordinal + 1
        return ordinal, name

    def identifier(self, ordinal: int) -> str:
        return f'{self.prefix}{ordinal}'

    def __len__(self) -> int:
        return len(self._next)

    def _slot(self, anchor: ast.AST) -> int:
        key = id(anchor)
        slot = self._index.get(key)
        if slot is None:
            slot = len(self._next)
            self._index[key] = slot
            self._next.append(0)
        return slot
