# dependencies.py
from fastapi import HTTPException, Request, status
from jobboard.schemas.forms import FormOutcome
from jobboard.services.context import AppContext


FORM_ERROR_STATUS = {
    "validation": status.HTTP_400_BAD_REQUEST,
    "unauthenticated": status.HTTP_401_UNAUTHORIZED,
    "not_found": status.HTTP_404_NOT_FOUND,
    "already_exists": status.HTTP_409_CONFLICT,
    "write_failed": status.HTTP_502_BAD_GATEWAY,
    "partial_write": status.HTTP_502_BAD_GATEWAY,
    "not_ready": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def get_context(request: Request) -> AppContext:
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Application not started")
    return context


def raise_for_outcome(outcome: FormOutcome) -> FormOutcome:
    if outcome.ok:
        return outcome
    raise HTTPException(
        status_code=FORM_ERROR_STATUS.get(outcome.error or "", status.HTTP_400_BAD_REQUEST),
        detail=outcome.message,
        headers={"X-Form-Error": outcome.error or "unknown"},
    )
