"""
ephemeralpy: Allocation-Free Temporary Records for Python
=========================================================

A compile-time rewriter that turns ``ephemeral({...})`` dict literals at hot
call sites into reuse of one pre-declared dict per site. The fields are
refreshed with plain item assignments and the call becomes a reference to the
hoisted dict, so a loop that builds a temporary record on every iteration no
longer allocates one.

Core Components:
    - compiler: call-site validation, scope resolution, name allocation,
      insertion-point selection and rewrite emission over ``ast``
    - runtime: the ``ephemeral`` marker itself

Usage:
    >>> from ephemeralpy import ephemeral, hoist
    >>> @hoist
    ... def step(x, y):
    ...     return ephemeral({'x': x + 1, 'y': y - 1})
    >>> step(1, 2)
    {'x': 2, 'y': 1}

    $ python -m ephemeralpy module.py -o module_hoisted.py
"""

__version__ = "1.0.0"
__author__ = "ephemeralpy developers"

from ephemeralpy.runtime.marker import Ephemeral, ephemeral
from ephemeralpy.compiler.transformer import EphemeralTransformer, hoist
from ephemeralpy.compiler.diagnostics import Diagnostic
from ephemeralpy.compiler.errors import (
    EphemeralInternalError,
    KeyKindViolation,
    MarkerUsageError,
    PropertyKindViolation,
    ShapeViolation,
)
from ephemeralpy.compiler.scope import ScopeKind
