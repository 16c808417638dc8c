from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping

from pydantic import ValidationError

from jobboard.config import Settings
from jobboard.db.documents import DocumentGateway
from jobboard.errors import ValidationFailure, WriteFailure
from jobboard.schemas.forms import FormErrorKind, FormOutcome
from jobboard.schemas.profile import CompanyProfile, JobPosting, UserProfile, advance_account_type, utc_now
from jobboard.services.paths import job_postings_path, profile_document_path
from jobboard.services.presenter import UIPresenter
from jobboard.services.session_controller import SessionController


logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
JOB_SEEKER_REQUIRED = ("fullName", "email", "degree")
EMPLOYER_REQUIRED = ("companyName", "secReg", "jobTitle", "salaryMin")


def _clean(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ",".join(_clean(v) for v in value).strip(",")
    return str(value).strip()


def serialize_form(form: Mapping[str, Any]) -> dict[str, Any]:
    """Flatten submitted form fields into a plain string mapping."""
    data: dict[str, Any] = {}
    for key, value in form.items():
        if value is None:
            value = ""
        elif isinstance(value, (list, tuple)):
            value = [str(v) for v in value]
        elif not isinstance(value, str):
            value = str(value)
        data[str(key)] = value
    return data


def require_fields(data: Mapping[str, Any], names: Iterable[str], message: str) -> None:
    missing = [name for name in names if not _clean(data.get(name))]
    if missing:
        raise ValidationFailure(message)


def parse_salary(value: Any, *, required: bool) -> int | None:
    # JSON bodies may carry 18000.0 for a whole number.
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raw = _clean(value)
    if not raw:
        if required:
            raise ValidationFailure("Please fill in all Company and Job Posting required fields.")
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValidationFailure("Salary values must be whole numbers.") from exc


class FormIntakeService:
    """Validation plus write for the registration, login, resume and employer forms."""

    def __init__(
        self,
        gateway: DocumentGateway,
        controller: SessionController,
        presenter: UIPresenter,
        settings: Settings,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._gateway = gateway
        self._controller = controller
        self._presenter = presenter
        self._settings = settings
        self._clock = clock

    def _fail(self, kind: FormErrorKind, message: str) -> FormOutcome:
        logger.info("intake.rejected kind=%s identity=%s", kind, self._controller.state.identity)
        self._presenter.show_message(message, is_error=True)
        return FormOutcome(ok=False, message=message, error=kind)

    def _succeed(self, message: str, *, reset_form: bool = True) -> FormOutcome:
        self._presenter.show_message(message, is_error=False)
        return FormOutcome(ok=True, message=message, reset_form=reset_form, page=self._presenter.current_page)

    async def register(self, email: str, password: str, full_name: str) -> FormOutcome:
        email, password, full_name = _clean(email), _clean(password), _clean(full_name)
        try:
            if not email or not password or not full_name:
                raise ValidationFailure("All registration fields are required.")
            if len(password) < MIN_PASSWORD_LENGTH:
                raise ValidationFailure(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")
        except ValidationFailure as exc:
            return self._fail("validation", str(exc))

        identity = self._controller.state.identity
        if not identity:
            return self._fail("not_ready", "Authentication service not ready. Try logging in first.")

        path = profile_document_path(self._settings, identity)
        try:
            if await self._gateway.read_document(path) is not None:
                return self._fail("already_exists", "Account already exists with this session. Please log in.")
            profile = UserProfile(
                email=email,
                full_name=full_name,
                account_type="Unspecified",
                registration_date=self._clock(),
                is_verified=False,
            )
            await self._gateway.write_document(path, profile.to_document(), merge=False)
        except WriteFailure:
            logger.exception("intake.register_failed identity=%s", identity)
            return self._fail("write_failed", "Registration failed. Data storage error.")

        logger.info("intake.registered identity=%s", identity)
        return self._succeed(f"Welcome, {full_name}! Your basic account is ready.")

    async def login(self, email: str, password: str) -> FormOutcome:
        email, password = _clean(email), _clean(password)
        if not email or not password:
            return self._fail("validation", "Email and Password are required.")

        identity = self._controller.state.identity
        if not identity:
            return self._fail("not_ready", "Authentication service not ready. Try again.")

        try:
            document = await self._gateway.read_document(profile_document_path(self._settings, identity))
        except WriteFailure:
            logger.exception("intake.login_failed identity=%s", identity)
            return self._fail("write_failed", "Login failed due to a database error.")
        if document is None:
            return self._fail("not_found", "Login failed. Profile not found. Please register.")

        try:
            profile = UserProfile.model_validate(document)
        except ValidationError:
            logger.exception("intake.login_invalid_profile identity=%s", identity)
            return self._fail("write_failed", "Login failed due to a database error.")

        if not self._controller.cache_profile(identity, profile):
            # The session changed while the profile was being read.
            return self._fail("not_ready", "Authentication service not ready. Try again.")
        self._presenter.show_page(self._presenter.landing_page)
        logger.info("intake.logged_in identity=%s", identity)
        return self._succeed(f"Welcome back, {profile.full_name or profile.email}!")

    async def submit_job_seeker(self, form: Mapping[str, Any]) -> FormOutcome:
        state = self._controller.state
        if not state.is_authenticated or not state.identity:
            return self._fail("unauthenticated", "You must be logged in to save your resume.")

        resume = serialize_form(form)
        try:
            require_fields(resume, JOB_SEEKER_REQUIRED, "Please fill in the required Personal and Educational fields.")
        except ValidationFailure as exc:
            return self._fail("validation", str(exc))

        current = state.profile.account_type if state.profile else None
        update = {
            "resumeData": resume,
            "accountType": advance_account_type(current, "JobSeeker"),
            "lastUpdated": self._clock().isoformat(),
        }
        try:
            await self._gateway.write_document(profile_document_path(self._settings, state.identity), update, merge=True)
        except WriteFailure:
            logger.exception("intake.job_seeker_failed identity=%s", state.identity)
            return self._fail("write_failed", "Failed to save resume profile. Database error.")

        logger.info("intake.job_seeker_saved identity=%s fields=%s", state.identity, len(resume))
        return self._succeed("Resume Profile saved successfully! You can now start applying.")

    async def submit_employer(self, form: Mapping[str, Any]) -> FormOutcome:
        state = self._controller.state
        if not state.is_authenticated or not state.identity:
            return self._fail("unauthenticated", "You must be logged in to register a company.")
        identity = state.identity

        data = serialize_form(form)
        try:
            require_fields(data, EMPLOYER_REQUIRED, "Please fill in all Company and Job Posting required fields.")
            salary_min = parse_salary(form.get("salaryMin"), required=True)
            salary_max = parse_salary(form.get("salaryMax"), required=False)
        except ValidationFailure as exc:
            return self._fail("validation", str(exc))

        now = self._clock()
        company_name = _clean(data.get("companyName"))
        company = CompanyProfile(
            company_name=company_name,
            sec_reg=_clean(data.get("secReg")),
            industry=_clean(data.get("industry")) or None,
            head_office_location=_clean(data.get("headOfficeLocation")) or None,
            company_mission=_clean(data.get("companyMission")) or None,
            employer_id=identity,
            is_verified=False,
            registration_date=now,
        )
        posting = JobPosting(
            job_title=_clean(data.get("jobTitle")),
            job_location=_clean(data.get("jobLocation")) or None,
            salary_min=salary_min,
            salary_max=salary_max,
            job_description=_clean(data.get("jobDescription")) or None,
            company_name=company_name,
            employer_id=identity,
            date_posted=now,
        )
        current = state.profile.account_type if state.profile else None
        update = {
            "companyProfile": company.to_document(),
            "accountType": advance_account_type(current, "Employer"),
            "lastUpdated": now.isoformat(),
        }

        try:
            await self._gateway.write_document(profile_document_path(self._settings, identity), update, merge=True)
        except WriteFailure:
            logger.exception("intake.employer_profile_failed identity=%s", identity)
            return self._fail("write_failed", "Failed to register company/post job. Database error.")

        # The profile merge is already committed; a failed append is reported, not rolled back.
        try:
            posting_id = await self._gateway.append_document(job_postings_path(self._settings, identity), posting.to_document())
        except WriteFailure:
            logger.exception("intake.partial_write identity=%s company=%s", identity, company_name)
            return self._fail(
                "partial_write",
                "Company profile saved, but the job posting could not be published. Please try again.",
            )

        logger.info("intake.employer_saved identity=%s posting_id=%s", identity, posting_id)
        return self._succeed(f"Company {company_name} registered and job posted successfully!")

    def view_location(self, location: str) -> FormOutcome:
        location = _clean(location)
        if self._controller.state.is_authenticated:
            return self._succeed(f"Redirecting to job board filtered by {location}...", reset_form=False)
        outcome = self._fail(
            "unauthenticated",
            f"Please log in first to view job listings in {location}. Redirecting to login.",
        )
        self._presenter.show_page(self._presenter.auth_page)
        return outcome.model_copy(update={"page": self._presenter.current_page})
