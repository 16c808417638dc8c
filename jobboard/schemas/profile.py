# profile.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


AccountType = Literal[
    "Unspecified",
    "JobSeeker",
    "Employer",
]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def advance_account_type(current: AccountType | None, target: AccountType) -> AccountType:
    """Return the account type after a submission.

    Profiles leave "Unspecified" once and never go back to it; moving between
    "JobSeeker" and "Employer" is a later submission of the other form.
    """
    if target == "Unspecified" and current not in (None, "Unspecified"):
        raise ValueError(f"account type cannot be reset from {current} to Unspecified")
    return target


class DocumentModel(BaseModel):
    """Base for models stored as camelCase documents."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CompanyProfile(DocumentModel):
    company_name: str
    sec_reg: str
    industry: str | None = None
    head_office_location: str | None = None
    company_mission: str | None = None
    employer_id: str
    is_verified: bool = False
    registration_date: datetime = Field(default_factory=utc_now)


class UserProfile(DocumentModel):
    # Stored documents may carry fields this client does not know about.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    email: str = ""
    full_name: str = ""
    account_type: AccountType = "Unspecified"
    registration_date: datetime | None = None
    is_verified: bool = False
    resume_data: dict[str, Any] | None = None
    company_profile: CompanyProfile | None = None
    last_updated: datetime | None = None

    @property
    def display_name(self) -> str | None:
        return self.full_name or self.email or None


class JobPosting(DocumentModel):
    job_title: str
    job_location: str | None = None
    salary_min: int
    salary_max: int | None = None
    job_description: str | None = None
    company_name: str
    employer_id: str
    date_posted: datetime = Field(default_factory=utc_now)
