from __future__ import annotations

from fastapi.testclient import TestClient

from conftest import documents_in


def test_health_reports_session_phase(client) -> None:
    r = client.get("/health/")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["session"] == "authenticated"

    db = client.get("/health/db")
    assert db.status_code == 200
    assert db.json()["active_subscriptions"] == 1


def test_session_starts_anonymous(client) -> None:
    r = client.get("/session")
    assert r.status_code == 200
    body = r.json()
    assert body["identity"] == "anon-1"
    assert body["status"] == "authenticated"
    assert body["profile"] is None


def test_register_login_flow(client) -> None:
    r = client.post("/forms/login", json={"email": "a@b.com", "password": "secret1"})
    assert r.status_code == 404
    assert r.json()["detail"] == "Login failed. Profile not found. Please register."
    assert r.headers["X-Form-Error"] == "not_found"

    r = client.post("/forms/register", json={"email": "a@b.com", "password": "secret1", "full_name": "A B"})
    assert r.status_code == 200
    assert r.json()["reset_form"] is True

    r = client.post("/forms/register", json={"email": "a@b.com", "password": "secret1", "full_name": "A B"})
    assert r.status_code == 409

    r = client.post("/forms/login", json={"email": "a@b.com", "password": "secret1"})
    assert r.status_code == 200
    assert r.json()["page"] == "page-home"

    session = client.get("/session").json()
    assert session["phase"] == "authenticated_with_profile"
    assert session["profile"]["fullName"] == "A B"
    assert session["profile"]["accountType"] == "Unspecified"

    ui = client.get("/ui/state").json()
    assert ui["nav"]["account_link_label"] == "Logout (a@b.com)"
    assert ui["nav"]["display_name"] == "A B"
    assert any(m["text"] == "Welcome back, A B!" for m in ui["messages"])


def test_register_validation_returns_400(client) -> None:
    r = client.post("/forms/register", json={"email": "a@b.com", "password": "123", "full_name": "A B"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Password must be at least 6 characters long."

    r = client.post("/forms/register", json={})
    assert r.status_code == 400
    assert r.json()["detail"] == "All registration fields are required."


def test_job_seeker_and_employer_forms(client, gateway, session_factory, settings) -> None:
    client.post("/forms/register", json={"email": "a@b.com", "password": "secret1", "full_name": "A B"})

    r = client.post("/forms/jobseeker", json={"fullName": "A B", "email": "a@b.com", "degree": "BSc"})
    assert r.status_code == 200
    assert client.get("/session").json()["profile"]["accountType"] == "JobSeeker"

    r = client.post(
        "/forms/employer",
        json={"companyName": "Acme", "secReg": "R-1", "jobTitle": "Welder", "salaryMin": 18000},
    )
    assert r.status_code == 200
    profile = client.get("/session").json()["profile"]
    assert profile["accountType"] == "Employer"
    assert profile["companyProfile"]["companyName"] == "Acme"

    from jobboard.services.paths import job_postings_path

    postings = documents_in(session_factory, job_postings_path(settings, "anon-1"))
    assert [p["jobTitle"] for p in postings] == ["Welder"]


def test_missing_employer_fields_write_nothing(client, gateway) -> None:
    r = client.post("/forms/employer", json={"companyName": "Acme", "jobTitle": "Welder"})
    assert r.status_code == 400
    assert r.headers["X-Form-Error"] == "validation"
    assert gateway.write_count == 0


def test_logout_then_forms_require_login(client, gateway) -> None:
    r = client.post("/session/logout")
    assert r.status_code == 200
    assert r.json()["status"] == "unauthenticated"

    r = client.post("/forms/jobseeker", json={"fullName": "A B", "email": "a@b.com", "degree": "BSc"})
    assert r.status_code == 401
    assert r.json()["detail"] == "You must be logged in to save your resume."
    assert gateway.write_count == 0

    ui = client.get("/ui/state").json()
    assert ui["nav"]["authenticated"] is False
    assert ui["nav"]["account_link_label"] == "Login / Register"

    r = client.post("/ui/locations/Cebu/view")
    assert r.status_code == 401
    assert client.get("/ui/state").json()["page"] == "page-auth"


def test_page_navigation(client) -> None:
    r = client.post("/ui/auth-form/register")
    assert r.status_code == 200
    assert r.json()["auth_form"] == "register"

    r = client.post("/ui/pages/page-auth")
    assert r.status_code == 200
    assert r.json()["page"] == "page-auth"
    assert r.json()["auth_form"] == "login"

    r = client.post("/ui/pages/page-nowhere")
    assert r.status_code == 404

    r = client.post("/ui/locations/Cebu/view")
    assert r.status_code == 200
    assert r.json()["message"] == "Redirecting to job board filtered by Cebu..."


def test_initial_token_signs_in_as_identity(gateway, identity_provider, settings) -> None:
    from jobboard.main import create_app
    from jobboard.utils.jwt_handler import create_custom_token

    signed_in = settings.model_copy(update={"initial_auth_token": create_custom_token("u1", settings=settings)})
    app = create_app(signed_in, gateway=gateway, identity_provider=identity_provider)
    with TestClient(app) as c:
        assert c.get("/session").json()["identity"] == "u1"


def test_degraded_app_still_serves_state(gateway, identity_provider, settings) -> None:
    from jobboard.main import create_app

    broken = settings.model_copy(update={"initial_auth_token": "not-a-token"})
    app = create_app(broken, gateway=gateway, identity_provider=identity_provider)
    with TestClient(app) as c:
        assert c.get("/health/").json()["status"] == "degraded"
        ui = c.get("/ui/state").json()
        assert ui["messages"][0]["text"] == "FATAL: Could not connect to the backend services."
        assert ui["messages"][0]["is_error"] is True

        r = c.post("/session/logout")
        assert r.status_code == 503

        r = c.post("/forms/register", json={"email": "a@b.com", "password": "secret1", "full_name": "A B"})
        assert r.status_code == 503
