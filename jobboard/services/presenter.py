from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from jobboard.schemas.ui import AuthForm, NavState, TransientMessage, UIState
from jobboard.services.session_store import SessionState


logger = logging.getLogger(__name__)

KNOWN_PAGES = (
    "page-home",
    "page-auth",
    "page-jobseeker",
    "page-employer",
    "page-location",
    "page-account",
)


@dataclass
class _QueuedMessage:
    text: str
    is_error: bool
    expires_at: float


class UIPresenter:
    """Reflects session state into navigation and shows transient messages."""

    def __init__(
        self,
        *,
        landing_page: str = "page-home",
        auth_page: str = "page-auth",
        message_ttl_seconds: float = 3.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.landing_page = landing_page
        self.auth_page = auth_page
        self._ttl = message_ttl_seconds
        self._clock = clock
        self._page = landing_page
        self._auth_form: AuthForm = "login"
        self._nav = NavState()
        self._messages: list[_QueuedMessage] = []
        self._render_count = 0

    @property
    def current_page(self) -> str:
        return self._page

    @property
    def nav(self) -> NavState:
        return self._nav

    @property
    def render_count(self) -> int:
        return self._render_count

    def show_page(self, page_id: str) -> bool:
        if page_id not in KNOWN_PAGES:
            logger.error("presenter.page_not_found page_id=%s", page_id)
            return False
        self._page = page_id
        # The auth page always opens on the login form.
        if page_id == self.auth_page:
            self._auth_form = "login"
        return True

    def toggle_auth_form(self, form: AuthForm) -> None:
        self._auth_form = form

    def show_message(self, text: str, is_error: bool = False) -> None:
        level = logging.WARNING if is_error else logging.INFO
        logger.log(level, "presenter.message is_error=%s text=%s", is_error, text)
        now = self._prune()
        self._messages.append(_QueuedMessage(text=text, is_error=is_error, expires_at=now + self._ttl))

    def _prune(self) -> float:
        now = self._clock()
        self._messages = [m for m in self._messages if m.expires_at > now]
        return now

    def active_messages(self) -> list[TransientMessage]:
        self._prune()
        return [TransientMessage(text=m.text, is_error=m.is_error) for m in self._messages]

    def last_message(self) -> TransientMessage | None:
        self._prune()
        if not self._messages:
            return None
        m = self._messages[-1]
        return TransientMessage(text=m.text, is_error=m.is_error)

    def render(self, state: SessionState) -> None:
        profile = state.profile
        if state.is_authenticated:
            self._nav = NavState(
                authenticated=True,
                display_name=profile.display_name if profile else None,
                account_link_label=f"Logout ({(profile.email if profile else '') or 'User'})",
                account_link_action="logout",
                my_account_enabled=True,
            )
        else:
            self._nav = NavState()
        self._render_count += 1

    def snapshot(self) -> UIState:
        return UIState(
            page=self._page,
            auth_form=self._auth_form,
            nav=self._nav,
            messages=self.active_messages(),
            render_count=self._render_count,
        )
