from ephemeralpy.compiler.diagnostics import Diagnostic
from ephemeralpy.compiler.errors import (
    EphemeralInternalError,
    KeyKindViolation,
    MarkerUsageError,
    PropertyKindViolation,
    ShapeViolation,
)
from ephemeralpy.compiler.scope import ScopeKind
from ephemeralpy.compiler.transformer import EphemeralTransformer, hoist

__all__ = [
    'Diagnostic',
    'EphemeralInternalError',
    'EphemeralTransformer',
    'KeyKindViolation',
    'MarkerUsageError',
    'PropertyKindViolation',
    'ScopeKind',
    'ShapeViolation',
    'hoist',
]
