"""
Scope Resolver
==============

Finds the scope anchor of a marker call: the nearest enclosing module or
function-like node (``def``, ``async def``, ``lambda``) whose body holds the
call. The match is purely structural; classes and comprehensions are walked
through, and no closure or binding analysis is performed.

Each anchor is tagged with the ScopeKind that drives insertion-point
selection:

    GENERATOR         def with its own yield, or any async def
    MODULE_ROOT       the module itself
    STATEMENT_SCOPE   any other def (a statement)
    EXPRESSION_SCOPE  a lambda (a value, not a statement)
"""

import ast
from dataclasses import dataclass
from enum import Enum

from .errors import EphemeralInternalError
from .tree import SyntaxTree

FUNCTION_TYPES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda)

# Nodes that open a new scope; yields inside them belong to someone else.
_NESTED_SCOPES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda, ast.ClassDef)


class ScopeKind(Enum):
    GENERATOR = 'generator'
    MODULE_ROOT = 'module_root'
    STATEMENT_SCOPE = 'statement_scope'
    EXPRESSION_SCOPE = 'expression_scope'


@dataclass(frozen=True)
class ScopeAnchor:
    node: ast.AST
    kind: ScopeKind


def is_scope_anchor(node: ast.AST) -> bool:
    return isinstance(node, ast.Module) or isinstance(node, FUNCTION_TYPES)


def is_suspendable(func: ast.AST) -> bool:
    """
    True when each call of ``func`` may leave a suspended activation behind:
    every coroutine, and every def whose own body yields.
    """
    if isinstance(func, ast.AsyncFunctionDef):
        return True
    if not isinstance(func, ast.FunctionDef):
        return False

    stack = list(func.body)
    while stack:
        node = stack.pop()
        if isinstance(node, (ast.Yield, ast.YieldFrom)):
            return True
        if isinstance(node, _NESTED_SCOPES):
            continue
        stack.extend(ast.iter_child_nodes(node))
    return False


def classify(node: ast.AST) -> ScopeKind:
    if is_suspendable(node):
        return ScopeKind.GENERATOR
    if isinstance(node, ast.Module):
        return ScopeKind.MODULE_ROOT
    if isinstance(node, ast.stmt):
        return ScopeKind.STATEMENT_SCOPE
    return ScopeKind.EXPRESSION_SCOPE


def runs_inside(func: ast.AST, child: ast.AST) -> bool:
    """
    True when ``child`` (a direct child of ``func``) is evaluated in the
    function's own scope. Decorators, defaults and annotations belong to the
    header and run in the enclosing scope when the ``def`` executes.
    """
    if isinstance(func, ast.Module):
        return True
    if isinstance(func, ast.Lambda):
        return child is func.body
    return any(stmt is child for stmt in func.body)


def resolve_scope(tree: SyntaxTree, node: ast.AST) -> ScopeAnchor:
    """Return the anchor of the nearest scope enclosing ``node``."""
    child = node
    for ancestor in tree.ancestors(node):
        if is_scope_anchor(ancestor) and runs_inside(ancestor, child):
            return ScopeAnchor(node=ancestor, kind=classify(ancestor))
        child = ancestor
    raise EphemeralInternalError(
        f"{type(node).__name__} is not attached to a module"
    )
