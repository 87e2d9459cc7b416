"""
The ``ephemeral`` marker.

At runtime the marker is the identity: it hands back the dict it was given,
typed as a read-only Mapping so downstream code treats it as a value that is
only valid until the same call site runs again. The rewrite pass removes most
calls before they ever execute; the ones it leaves behind still behave
correctly through this function.
"""

from typing import Dict, Mapping, TypeVar

T = TypeVar('T')

Ephemeral = Mapping[str, T]


def ephemeral(obj: Dict[str, T]) -> Ephemeral[T]:
    """
    Mark a dict literal as a reusable temporary record.

    Read-only is a typing contract only: the dict is not frozen, so mutating
    the result of an unrewritten call is not prevented at runtime.

    Usage:
        >>> point = ephemeral({'x': 1, 'y': 2})
        >>> point['x']
        1
    """
    return obj
