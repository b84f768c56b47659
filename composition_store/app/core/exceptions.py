"""
Error taxonomy for the composition store.

``MissingFields`` and ``MissingIdentity`` derive from ``ValueError`` so
that API handlers can treat them like any other rejected input.
Backend failures derive from ``RuntimeError``.  A missing composition
is not an error at all: ``CompositionStore.get`` returns ``None``.
"""


class CompositionError(Exception):
    """Base class for all composition store errors."""


class MissingFields(CompositionError, ValueError):
    """Required input was absent or empty; nothing was written."""


class MissingIdentity(MissingFields):
    """The composition address was absent or malformed."""


class UnsupportedOperation(CompositionError):
    """The operation is not offered by the configured identity strategy."""


class StoreUnavailable(CompositionError, RuntimeError):
    """The backing database failed to execute a statement."""


class StartupFailure(CompositionError, RuntimeError):
    """The schema guard could not create or verify the backing table."""
