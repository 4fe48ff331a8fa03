from __future__ import annotations

from pydantic import BaseModel, Field

from talent_api.schemas.talent import TalentForm


class ParsedResumeData(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    years_experience: float = 0
    skills: list[str] = Field(default_factory=list)
    bio: str = ""
    linkedin_url: str = ""
    github_url: str = ""
    portfolio_url: str = ""
    education: list[str] = Field(default_factory=list)
    work_experience: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)


class ResumeParseResult(BaseModel):
    filename: str
    source_type: str
    pages: int = 0
    ocr_used: bool = False
    model: str
    attempts: int = Field(ge=1)
    data: ParsedResumeData
    warnings: list[str] = Field(default_factory=list)


class ResumeParseResponse(ResumeParseResult):
    form: TalentForm
