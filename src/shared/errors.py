"""Error taxonomy shared by every marketplace package.

The base errors come from protean and carry ``messages`` as
``{field: [message, ...]}``; protean itself raises some of them with a
plain string, which the HTTP layer normalizes. The subclasses below add the
marketplace-specific cases.
"""

from protean.exceptions import (
    ExpectedVersionError,
    ObjectNotFoundError,
    ProteanException,
    ValidationError,
)

__all__ = [
    "ExpectedVersionError",
    "ForbiddenError",
    "InvalidAmountError",
    "InvalidTransitionError",
    "NoVendorError",
    "ObjectNotFoundError",
    "ProteanException",
    "ValidationError",
]


class ForbiddenError(ProteanException):
    """The acting user may not perform the requested mutation."""


class InvalidTransitionError(ValidationError):
    """Requested status is not reachable from the current status."""

    def __init__(self, current, requested, field="status"):
        self.current = current
        self.requested = requested
        super().__init__({field: [f"Cannot transition from {current} to {requested}"]})


class NoVendorError(ValidationError):
    """A product resolved during checkout has no owning vendor."""


class InvalidAmountError(ValidationError):
    """A monetary amount is missing or not positive."""
