from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, field_validator, model_validator

TalentType = Literal["existing", "prospect"]
ProspectStatus = Literal["available", "interviewing", "rejected", "inactive"]
TalentSource = Literal[
    "employee_referral",
    "direct_application",
    "active_sourcing",
    "linkedin_outreach",
    "job_board",
    "university_recruiting",
    "industry_event",
]

_URL_ADAPTER = TypeAdapter(HttpUrl)


class ProjectAssignment(BaseModel):
    project_name: str = ""
    reporting_manager: str = ""
    utilization_percentage: float = Field(default=0, ge=0, le=100)
    release_date: str | None = None


class ReferralContext(BaseModel):
    referred_by: str | None = None
    referred_for_opportunity: str | None = None


class TalentForm(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    talent_type: TalentType = "existing"
    talent_role: str = ""
    bio: str = ""
    education: str = ""
    work_experience: str = ""
    certifications: str = ""
    location: str = ""
    timezone: str = ""
    years_experience: float = Field(default=0, ge=0)
    remote_preference: bool = True
    availability_start_date: str = ""
    projects: list[ProjectAssignment] = Field(default_factory=list)
    prospect_status: ProspectStatus | None = None
    skills: str = ""
    source: TalentSource | None = None
    referred_for_opportunity: str | None = None
    linkedin_url: str = ""
    github_url: str = ""
    portfolio_url: str = ""
    resume_url: str = ""

    @field_validator("linkedin_url", "github_url", "portfolio_url", "resume_url")
    @classmethod
    def _validate_optional_url(cls, value: str) -> str:
        # Bare hosts such as "linkedin.com/in/x" get an https scheme.
        cleaned = (value or "").strip()
        if not cleaned:
            return ""
        if "://" not in cleaned:
            cleaned = f"https://{cleaned}"
        try:
            _URL_ADAPTER.validate_python(cleaned)
        except ValueError:
            return ""
        return cleaned

    def skills_list(self) -> list[str]:
        return [skill.strip() for skill in self.skills.split(",") if skill.strip()]


class SubmittableTalentForm(TalentForm):
    """The talent form as it must look when the user submits it."""

    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    talent_role: str = Field(min_length=1)

    @model_validator(mode="after")
    def _existing_needs_projects(self) -> "SubmittableTalentForm":
        if self.talent_type == "existing":
            valid = bool(self.projects) and all(
                project.project_name.strip() and project.reporting_manager.strip()
                for project in self.projects
            )
            if not valid:
                raise ValueError(
                    "At least one project with valid project name and reporting manager "
                    "is required for existing employees"
                )
        return self
