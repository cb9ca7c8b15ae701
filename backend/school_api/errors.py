"""Domain exceptions raised by services.

Routers translate these into `HTTPException`s; services never deal with
status codes directly.
"""

from typing import List

from .schemas import FieldViolation


class NotFoundError(LookupError):
    """An id lookup or a name filter matched nothing."""


class ValidationFailure(ValueError):
    """A payload violated one or more field constraints."""

    def __init__(self, violations: List[FieldViolation]):
        self.violations = violations
        super().__init__("; ".join(f"{v.field}: {v.message}" for v in violations))


class InvalidSortProperty(ValueError):
    """A listing was requested with a sort key outside the whitelist."""


class InconsistentAssociation(RuntimeError):
    """An unlink was requested for a pair that is not linked on that side."""
