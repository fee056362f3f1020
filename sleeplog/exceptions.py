"""
exceptions.py
-------------
Exception hierarchy shared by every layer.

Repositories raise these; the SleepManager absorbs them into absent,
False or INVALID_ID results and keeps the instance on ``last_error``.
"""


class SleepLogError(Exception):
    """Base exception for all sleeplog errors."""


class StoreError(SleepLogError):
    """Raised when a statement against the store fails."""


class StoreUnavailableError(StoreError):
    """Raised when the store cannot be opened or no pooled connection is free."""


class NotFoundError(StoreError):
    """Raised when a single-row lookup matched zero rows."""


class ConstraintViolationError(StoreError):
    """Raised when a write violates a foreign-key or NOT NULL constraint."""


class InitializationError(StoreError):
    """Raised when the schema could not be created for a new store."""


class ValidationError(SleepLogError):
    """Raised when a caller-supplied value is malformed."""


class InvalidNightError(ValidationError):
    """Raised when a night is not a ``yyyy-mm-dd`` calendar date."""
