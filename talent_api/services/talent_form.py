from __future__ import annotations

from talent_api.schemas.resume import ParsedResumeData
from talent_api.schemas.talent import ReferralContext, SubmittableTalentForm, TalentForm

BULLET = "• "


def bullet_lines(items: list[str]) -> str:
    return "\n".join(f"{BULLET}{item}" for item in items if item.strip())


def prefill_talent_form(parsed: ParsedResumeData, referral: ReferralContext | None = None) -> TalentForm:
    """Build the review form shown under the resume upload.

    Resumes always come in as prospects; the role is left for the recruiter
    to pick.
    """
    referral_mode = referral is not None
    return TalentForm(
        first_name=parsed.first_name,
        last_name=parsed.last_name,
        email=parsed.email,
        talent_type="prospect",
        talent_role="",
        bio=parsed.bio,
        education=bullet_lines(parsed.education),
        work_experience=bullet_lines(parsed.work_experience),
        certifications=bullet_lines(parsed.certifications),
        location=parsed.location,
        timezone="",
        years_experience=parsed.years_experience,
        remote_preference=True,
        availability_start_date="",
        source="employee_referral" if referral_mode else "direct_application",
        skills=", ".join(parsed.skills),
        linkedin_url=parsed.linkedin_url,
        github_url=parsed.github_url,
        portfolio_url=parsed.portfolio_url,
        resume_url="",
        prospect_status="available" if referral_mode else None,
        referred_for_opportunity=referral.referred_for_opportunity if referral else None,
    )


def validate_for_submit(form: TalentForm) -> SubmittableTalentForm:
    return SubmittableTalentForm.model_validate(form.model_dump())
