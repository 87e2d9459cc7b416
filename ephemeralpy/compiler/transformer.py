"""
Ephemeral Hoisting Pass
=======================

Rewrites calls to the ``ephemeral`` marker so that hot call sites reuse one
pre-declared dict instead of building a fresh one on every execution.

    Before:
        def fn(arg):
            if arg <= 0:
                return ephemeral({'foo': 0})
            return ephemeral({'foo': arg})

    After:
        _gen_ephemeral_obj0 = {'foo': None}
        _gen_ephemeral_obj1 = {'foo': None}
        def fn(arg):
            if arg <= 0:
                _gen_ephemeral_obj0['foo'] = 0
                return _gen_ephemeral_obj0
            _gen_ephemeral_obj1['foo'] = arg
            return _gen_ephemeral_obj1

One run covers one module. Each marker call goes through:

1. Call-site validation (validator.py) - bad shapes become diagnostics
2. Scope resolution (scope.py) - nearest module/def/lambda, tagged by kind
3. Name allocation (naming.py) - per-anchor ordinal, run-unique identifier
4. Insertion-point selection (insertion.py) - where the declaration goes
5. Emission (emitter.py) - declaration, mutations, replacement
"""

import ast
import inspect
import logging
import textwrap
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from .diagnostics import Diagnostic, DiagnosticReporter
from .emitter import HoistedBinding, RewriteEmitter, RewriteSite
from .errors import MarkerUsageError
from .insertion import select_insertion_point
from .naming import NameAllocator
from .scope import resolve_scope
from .tree import SyntaxTree
from .validator import is_marker_call, validate_call

logger = logging.getLogger(__name__)


class EphemeralTransformer:
    """
    Source-to-source rewriter for ``ephemeral({...})`` calls.

    Usage:
        >>> transformer = EphemeralTransformer()
        >>> print(transformer.transform_source(
        ...     "def fn(arg):\\n    return ephemeral({'foo': arg})\\n"))
        _gen_ephemeral_obj0 = {'foo': None}
        <BLANKLINE>
        def fn(arg):
            _gen_ephemeral_obj0['foo'] = arg
            return _gen_ephemeral_obj0
    """

    MARKER_NAME = 'ephemeral'
    NAME_PREFIX = '_gen_ephemeral_obj'
    DEFAULT_FILENAME = '<unknown>'
    DECORATOR_NAME = 'hoist'
    FACTORY_NAME = '__ephemeral_factory__'

    def __init__(
        self,
        marker_name: str = MARKER_NAME,
        prefix: str = NAME_PREFIX,
        filename: str = DEFAULT_FILENAME,
        placeholder: Any = None,
        enable_logging: bool = False,
    ):
        self.marker_name = marker_name
        self.prefix = prefix
        self.filename = filename
        self.placeholder = placeholder
        self.stats = defaultdict(int)
        self.diagnostics: List[Diagnostic] = []
        self.sites: List[RewriteSite] = []

        if enable_logging:
            logging.basicConfig(level=logging.DEBUG)

    def transform(self, tree: ast.Module, filename: Optional[str] = None) -> ast.Module:
        """
        Rewrite every marker call in ``tree``, in place.

        Returns the same tree. Calls that fail validation are left untouched
        and reported in ``self.diagnostics``.
        """
        host = SyntaxTree(tree, filename or self.filename)
        run = _Run(
            host=host,
            names=NameAllocator.for_module(self.prefix, tree),
            emitter=RewriteEmitter(host, self.placeholder),
            reporter=DiagnosticReporter(host.filename),
        )
        self.stats = defaultdict(int)
        self.sites = []

        def visit(node: ast.AST) -> Optional[List[ast.AST]]:
            if not is_marker_call(node, self.marker_name):
                return None
            site = self._rewrite_site(run, node)
            if site is None:
                return None
            return site.revisit

        host.traverse(visit)
        ast.fix_missing_locations(tree)

        self.diagnostics = run.reporter.diagnostics
        logger.debug(
            "%s: %d site(s) rewritten, %d rejected",
            host.filename, self.stats['sites_rewritten'], self.stats['sites_rejected'],
        )
        return tree

    def transform_source(self, source: str, filename: Optional[str] = None) -> str:
        """Rewrite Python source text and return the regenerated source."""
        filename = filename or self.filename
        tree = ast.parse(source, filename=filename)
        return ast.unparse(self.transform(tree, filename))

    def transform_function(self, func: Callable) -> Callable:
        """
        Rewrite a live function and return a new one built from the result.

        The ``hoist`` decorator and every decorator above it are dropped from
        the rewritten ``def``; Python applies those to the returned function
        itself. Decorators below ``hoist`` are kept and applied again.

        The rewritten module is wrapped in a factory function, so the hoisted
        declarations become closure cells of the new function while its
        globals stay the original module's live namespace.
        """
        target = inspect.unwrap(func)
        source = textwrap.dedent(inspect.getsource(target))
        tree = ast.parse(source)
        ast.increment_lineno(tree, target.__code__.co_firstlineno - 1)

        for node in tree.body:
            if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)) and node.name == target.__name__:
                node.decorator_list = self._decorators_below_hoist(node.decorator_list)

        self.transform(tree, inspect.getsourcefile(target) or self.filename)

        factory = ast.parse(f"def {self.FACTORY_NAME}():\n    return {target.__name__}").body[0]
        factory.body[:0] = tree.body
        tree.body = [factory]
        ast.fix_missing_locations(tree)
        code = compile(tree, f'<ephemeralpy:{target.__name__}>', 'exec')

        namespace = {}
        exec(code, target.__globals__, namespace)

        hoisted_func = namespace[self.FACTORY_NAME]()
        hoisted_func.__ephemeral_original__ = func
        hoisted_func.__ephemeral_hoisted__ = True
        hoisted_func.__ephemeral_stats__ = dict(self.stats)
        return hoisted_func

    def _decorators_below_hoist(self, decorators: List[ast.expr]) -> List[ast.expr]:
        for index in range(len(decorators) - 1, -1, -1):
            expr = decorators[index]
            if isinstance(expr, ast.Call):
                expr = expr.func
            name = expr.attr if isinstance(expr, ast.Attribute) else getattr(expr, 'id', None)
            if name == self.DECORATOR_NAME:
                return decorators[index + 1:]
        return []

    def _rewrite_site(self, run: '_Run', node: ast.Call) -> Optional[RewriteSite]:
        try:
            call = validate_call(node)
        except MarkerUsageError as exc:
            lineno, col_offset = run.host.location(node)
            run.reporter.report(lineno, col_offset, exc.kind, str(exc))
            self.stats['sites_rejected'] += 1
            return None

        anchor = resolve_scope(run.host, node)
        point = select_insertion_point(run.host, anchor, node)
        ordinal, name = run.names.allocate(anchor.node)
        binding = HoistedBinding(
            anchor=anchor,
            ordinal=ordinal,
            name=name,
            field_names=call.field_names,
            insertion=point,
        )
        site = run.emitter.emit(call, binding)

        self.sites.append(site)
        self.stats['sites_rewritten'] += 1
        self.stats['bindings_hoisted'] += 1
        if site.inline:
            self.stats['expression_rewrites'] += 1
        return site


@dataclass
class _Run:
    """State that lives for exactly one ``transform`` call."""
    host: SyntaxTree
    names: NameAllocator
    emitter: RewriteEmitter
    reporter: DiagnosticReporter


def hoist(func: Callable = None, **kwargs) -> Callable:
    """
    Decorator that rewrites the marker calls of a function at definition time.

    Usage:
        @hoist
        def step(x, y):
            return ephemeral({'x': x + 1, 'y': y - 1})

        @hoist(marker_name='temp')
        def step(x): ...
    """
    if func is None:
        return lambda f: hoist(f, **kwargs)
    return EphemeralTransformer(**kwargs).transform_function(func)
