from __future__ import annotations

from jobboard.schemas.profile import UserProfile
from jobboard.services.presenter import UIPresenter
from jobboard.services.session_store import SessionState, SessionStore


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def test_store_notifies_subscribers_in_order() -> None:
    store = SessionStore()
    calls: list[str] = []
    store.subscribe(lambda s: calls.append(f"a:{s.phase}"))
    unsubscribe = store.subscribe(lambda s: calls.append(f"b:{s.phase}"))

    store.update(identity="u1", status="authenticated")
    unsubscribe()
    store.update(profile=UserProfile(email="a@b.com"))

    assert calls == ["a:authenticated", "b:authenticated", "a:authenticated_with_profile"]


def test_state_phases() -> None:
    assert SessionState().phase == "unauthenticated"
    assert SessionState(identity="u1", status="authenticated").phase == "authenticated"
    # A stale profile never counts while signed out.
    assert SessionState(profile=UserProfile()).phase == "unauthenticated"


def test_render_reflects_authentication() -> None:
    presenter = UIPresenter()
    presenter.render(SessionState(identity="u1", status="authenticated", profile=UserProfile(email="a@b.com", full_name="A B")))
    assert presenter.nav.authenticated is True
    assert presenter.nav.account_link_label == "Logout (a@b.com)"
    assert presenter.nav.display_name == "A B"
    assert presenter.nav.my_account_enabled is True

    presenter.render(SessionState(identity="u1", status="authenticated"))
    assert presenter.nav.account_link_label == "Logout (User)"
    assert presenter.nav.display_name is None

    presenter.render(SessionState())
    assert presenter.nav.authenticated is False
    assert presenter.nav.account_link_label == "Login / Register"
    assert presenter.nav.my_account_enabled is False
    assert presenter.render_count == 3


def test_show_page_known_and_unknown() -> None:
    presenter = UIPresenter()
    presenter.toggle_auth_form("register")
    assert presenter.show_page("page-auth") is True
    assert presenter.snapshot().auth_form == "login"
    assert presenter.show_page("page-missing") is False
    assert presenter.current_page == "page-auth"


def test_messages_expire_after_ttl() -> None:
    clock = FakeClock()
    presenter = UIPresenter(message_ttl_seconds=3.0, clock=clock)
    presenter.show_message("Saved", is_error=False)
    clock.now += 1.0
    presenter.show_message("Broken", is_error=True)

    assert [m.text for m in presenter.active_messages()] == ["Saved", "Broken"]
    clock.now += 2.5
    messages = presenter.active_messages()
    assert [(m.text, m.is_error) for m in messages] == [("Broken", True)]
    clock.now += 1.0
    assert presenter.snapshot().messages == []


def test_expired_messages_are_dropped_without_polling() -> None:
    clock = FakeClock()
    presenter = UIPresenter(message_ttl_seconds=3.0, clock=clock)
    for i in range(50):
        presenter.show_message(f"message {i}")
        clock.now += 10.0

    assert len(presenter._messages) == 1
    assert presenter.last_message() is None
    presenter.show_message("Latest", is_error=True)
    assert len(presenter.active_messages()) == 1
    assert presenter.last_message().text == "Latest"
