# ui.py
from fastapi import APIRouter, Depends, HTTPException, status
from jobboard.routers.dependencies import get_context, raise_for_outcome
from jobboard.schemas.forms import FormOutcome
from jobboard.schemas.ui import AuthForm, UIState
from jobboard.services.context import AppContext


router = APIRouter()


@router.get("/state", response_model=UIState)
async def read_ui_state(context: AppContext = Depends(get_context)) -> UIState:
    return context.presenter.snapshot()


@router.post("/pages/{page_id}", response_model=UIState)
async def switch_page(page_id: str, context: AppContext = Depends(get_context)) -> UIState:
    if not context.presenter.show_page(page_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")
    return context.presenter.snapshot()


@router.post("/auth-form/{form}", response_model=UIState)
async def switch_auth_form(form: AuthForm, context: AppContext = Depends(get_context)) -> UIState:
    context.presenter.toggle_auth_form(form)
    return context.presenter.snapshot()


@router.post("/locations/{location}/view", response_model=FormOutcome)
async def view_location(location: str, context: AppContext = Depends(get_context)) -> FormOutcome:
    return raise_for_outcome(context.intake.view_location(location))
