# forms.py
from typing import Literal

from pydantic import BaseModel, ConfigDict


FormErrorKind = Literal[
    "validation",
    "unauthenticated",
    "not_ready",
    "already_exists",
    "not_found",
    "write_failed",
    "partial_write",
]


class RegisterForm(BaseModel):
    # Empty defaults so missing fields reach the handler's own validation message.
    email: str = ""
    password: str = ""
    full_name: str = ""

    model_config = ConfigDict(extra="ignore")


class LoginForm(BaseModel):
    email: str = ""
    password: str = ""

    model_config = ConfigDict(extra="ignore")


class FormOutcome(BaseModel):
    ok: bool
    message: str
    error: FormErrorKind | None = None
    reset_form: bool = False
    page: str | None = None
