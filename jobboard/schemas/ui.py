# ui.py
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from jobboard.schemas.profile import UserProfile


AuthForm = Literal["login", "register"]


class NavState(BaseModel):
    authenticated: bool = False
    display_name: str | None = None
    account_link_label: str = "Login / Register"
    account_link_action: Literal["open_auth", "logout"] = "open_auth"
    my_account_enabled: bool = False


class TransientMessage(BaseModel):
    text: str
    is_error: bool = False


class UIState(BaseModel):
    page: str
    auth_form: AuthForm = "login"
    nav: NavState = Field(default_factory=NavState)
    messages: list[TransientMessage] = Field(default_factory=list)
    render_count: int = 0


class SessionRead(BaseModel):
    identity: str | None = None
    status: str
    phase: str
    degraded: bool = False
    profile: UserProfile | None = None
