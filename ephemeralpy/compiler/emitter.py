"""
Rewrite Emitter
===============

Applies the three edits that turn one validated marker call into reuse of a
hoisted dict:

    Before:
        def fn(arg):
            return ephemeral({'foo': arg, 'moo': 2})

    After:
        _gen_ephemeral_obj0 = {'foo': None, 'moo': None}
        def fn(arg):
            _gen_ephemeral_obj0['foo'] = arg
            _gen_ephemeral_obj0['moo'] = 2
            return _gen_ephemeral_obj0

When the call lives in a lambda or a comprehension there is no statement of
its own scope to put the mutations in front of, so they are folded into the
replacement expression instead, still in field order:

    f = lambda x: (_gen_ephemeral_obj0.__setitem__('foo', x) or _gen_ephemeral_obj0)

Every node is built before the first edit is made, so a site is either fully
rewritten or left exactly as it was.
"""

import ast
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from .errors import EphemeralInternalError
from .insertion import InsertionMode, InsertionPoint
from .scope import ScopeAnchor
from .tree import SyntaxTree
from .validator import MarkerCall

logger = logging.getLogger(__name__)

# Scopes that hold no statements, so mutations cannot precede the call there.
EXPRESSION_SCOPES = (
    ast.Lambda, ast.ListComp, ast.SetComp, ast.DictComp, ast.GeneratorExp,
)


@dataclass
class HoistedBinding:
    """The generated dict and the name it is bound to."""
    anchor: ScopeAnchor
    ordinal: int
    name: str
    field_names: Tuple[str, ...]
    insertion: InsertionPoint


@dataclass
class RewriteSite:
    """Everything emitted for one marker call."""
    binding: HoistedBinding
    declaration: ast.Assign
    mutations: List[ast.stmt] = field(default_factory=list)
    replacement: Optional[ast.expr] = None
    inline: bool = False

    @property
    def revisit(self) -> List[ast.AST]:
        """New nodes that carry the call's original value expressions."""
        if self.inline:
            return [self.replacement]
        return list(self.mutations)


class RewriteEmitter:
    """Builds and applies the declaration, mutations and replacement."""

    def __init__(self, tree: SyntaxTree, placeholder: Any = None):
        self.tree = tree
        self.placeholder = placeholder

    def emit(self, call: MarkerCall, binding: HoistedBinding) -> RewriteSite:
        for name, _ in call.fields:
            if not isinstance(name, str) or not name.isidentifier():
                raise EphemeralInternalError(
                    f"Unexpected key {name!r} for {binding.name}"
                )

        statement = self.tree.statement_of(call.node)
        if statement is None:
            raise EphemeralInternalError(f"No statement encloses the call for {binding.name}")
        inline = self.is_expression_embedded(call.node)

        site = RewriteSite(
            binding=binding,
            declaration=self.build_declaration(binding, statement),
            inline=inline,
        )
        if inline:
            site.replacement = self.build_inline_replacement(binding.name, call.fields)
        else:
            site.mutations = self.build_mutations(binding.name, call.fields, statement)
            site.replacement = ast.Name(id=binding.name, ctx=ast.Load())
        ast.copy_location(site.replacement, call.node)

        self._insert_declaration(site.declaration, binding.insertion)
        if site.mutations:
            self.tree.insert_before(statement, site.mutations)
        self.tree.replace(call.node, site.replacement)

        logger.debug(
            "hoisted %s %s for fields %s (%s)",
            binding.name, binding.insertion.mode.value,
            ', '.join(binding.field_names), binding.anchor.kind.value,
        )
        return site

    def is_expression_embedded(self, node: ast.AST) -> bool:
        """True if a lambda or comprehension sits between ``node`` and its statement."""
        boundary = self.tree.find_ancestor(
            node, lambda n: isinstance(n, ast.stmt) or isinstance(n, EXPRESSION_SCOPES)
        )
        return boundary is not None and not isinstance(boundary, ast.stmt)

    # ---- Node builders ----

    def build_declaration(self, binding: HoistedBinding, origin: ast.AST) -> ast.Assign:
        declaration = ast.Assign(
            targets=[ast.Name(id=binding.name, ctx=ast.Store())],
            value=ast.Dict(
                keys=[ast.Constant(value=name) for name in binding.field_names],
                values=[ast.Constant(value=self.placeholder) for _ in binding.field_names],
            ),
        )
        return ast.copy_location(declaration, origin)

    def build_mutations(
        self, name: str, fields: List[Tuple[str, ast.expr]], origin: ast.AST
    ) -> List[ast.stmt]:
        mutations = []
        for key, value in fields:
            target = ast.Subscript(
                value=ast.Name(id=name, ctx=ast.Load()),
                slice=ast.Constant(value=key),
                ctx=ast.Store(),
            )
            mutations.append(
                ast.copy_location(ast.Assign(targets=[target], value=value), origin)
            )
        return mutations

    def build_inline_replacement(
        self, name: str, fields: List[Tuple[str, ast.expr]]
    ) -> ast.expr:
        # dict.__setitem__ returns None, so each ``or`` falls through to the next
        setters = [
            ast.Call(
                func=ast.Attribute(
                    value=ast.Name(id=name, ctx=ast.Load()),
                    attr='__setitem__',
                    ctx=ast.Load(),
                ),
                args=[ast.Constant(value=key), value],
                keywords=[],
            )
            for key, value in fields
        ]
        reference = ast.Name(id=name, ctx=ast.Load())
        if not setters:
            return reference
        return ast.BoolOp(op=ast.Or(), values=setters + [reference])

    # ---- Edits ----

    def _insert_declaration(self, declaration: ast.Assign, point: InsertionPoint):
        if point.mode is InsertionMode.UNSHIFT:
            self.tree.unshift(point.target, [declaration])
        else:
            self.tree.insert_before(point.target, [declaration])
