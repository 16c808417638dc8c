# forms.py
from typing import Any

from fastapi import APIRouter, Body, Depends
from jobboard.routers.dependencies import get_context, raise_for_outcome
from jobboard.schemas.forms import FormOutcome, LoginForm, RegisterForm
from jobboard.services.context import AppContext


router = APIRouter()


@router.post("/register", response_model=FormOutcome)
async def submit_register(form: RegisterForm, context: AppContext = Depends(get_context)) -> FormOutcome:
    outcome = await context.intake.register(form.email, form.password, form.full_name)
    return raise_for_outcome(outcome)


@router.post("/login", response_model=FormOutcome)
async def submit_login(form: LoginForm, context: AppContext = Depends(get_context)) -> FormOutcome:
    outcome = await context.intake.login(form.email, form.password)
    return raise_for_outcome(outcome)


@router.post("/jobseeker", response_model=FormOutcome)
async def submit_job_seeker(
    form: dict[str, Any] = Body(...),
    context: AppContext = Depends(get_context),
) -> FormOutcome:
    outcome = await context.intake.submit_job_seeker(form)
    return raise_for_outcome(outcome)


@router.post("/employer", response_model=FormOutcome)
async def submit_employer(
    form: dict[str, Any] = Body(...),
    context: AppContext = Depends(get_context),
) -> FormOutcome:
    outcome = await context.intake.submit_employer(form)
    return raise_for_outcome(outcome)
