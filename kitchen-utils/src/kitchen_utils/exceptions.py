"""Exceptions for the kitchen-utils package."""


class KitchenUtilsError(Exception):
    """Base class for errors raised by kitchen-utils."""

    pass


class InvalidArgumentError(KitchenUtilsError, ValueError):
    """Raised when a caller passes an unusable argument (e.g. a ``None`` catalog)."""

    pass


class RuleTableError(KitchenUtilsError):
    """Raised when a bundled rule table is malformed."""

    pass
