"""Exceptions raised by the ephemeral rewrite pass."""


class MarkerUsageError(Exception):
    """
    A marker call the pass cannot rewrite.

    Always recoverable: the driver reports it as a diagnostic, leaves the call
    site untouched and moves on.
    """
    message = "ephemeral() cannot be rewritten."

    def __init__(self, node=None, message: str = None):
        self.node = node
        super().__init__(message or self.message)

    @property
    def kind(self) -> str:
        return type(self).__name__


class ShapeViolation(MarkerUsageError):
    message = "ephemeral() should have exactly 1 argument, consisting of a dict literal."


class PropertyKindViolation(MarkerUsageError):
    message = "ephemeral() should be called with a dict without spread values."


class KeyKindViolation(MarkerUsageError):
    message = "ephemeral() should be called with a dict with only plain identifier keys."


class EphemeralInternalError(RuntimeError):
    """An invariant the validator guarantees was found broken during emission."""
