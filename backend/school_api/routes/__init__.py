"""HTTP routers for the `/students` and `/teachers` resources.

Controllers are intentionally thin: they parse path/body parameters,
delegate to services and translate domain exceptions with `http_error`.
"""

from fastapi import HTTPException

from ..config import settings
from ..errors import InconsistentAssociation, InvalidSortProperty, NotFoundError, ValidationFailure

DOMAIN_ERRORS = (NotFoundError, ValidationFailure, InvalidSortProperty, InconsistentAssociation)

# page * size must stay within a signed 64-bit SQL integer
MAX_PAGE_NUMBER = (2**63 - 1) // settings.MAX_PAGE_SIZE


def http_error(exc: Exception) -> HTTPException:
    """Map a domain exception onto the HTTP status the API reports."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, ValidationFailure):
        return HTTPException(
            status_code=400,
            detail={
                "message": "Validation failed",
                "violations": [v.model_dump() for v in exc.violations],
            },
        )
    if isinstance(exc, InvalidSortProperty):
        return HTTPException(status_code=400, detail=str(exc))
    # unlinking a pair that is not linked is reported as a server fault
    return HTTPException(status_code=500, detail=str(exc))
