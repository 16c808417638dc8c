# session.py
from fastapi import APIRouter, Depends, HTTPException, status
from jobboard.routers.dependencies import get_context
from jobboard.schemas.ui import SessionRead
from jobboard.services.context import AppContext


router = APIRouter()


def _session_read(context: AppContext) -> SessionRead:
    state = context.store.state
    return SessionRead(
        identity=state.identity,
        status=state.status,
        phase=state.phase,
        degraded=state.degraded,
        profile=state.profile,
    )


@router.get("", response_model=SessionRead)
async def read_session(context: AppContext = Depends(get_context)) -> SessionRead:
    return _session_read(context)


@router.post("/logout", response_model=SessionRead)
async def logout(context: AppContext = Depends(get_context)) -> SessionRead:
    if not await context.controller.sign_out():
        message = context.presenter.last_message()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE if context.store.state.degraded else status.HTTP_502_BAD_GATEWAY,
            detail=message.text if message else "Logout failed",
        )
    return _session_read(context)
