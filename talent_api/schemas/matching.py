from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from talent_api.schemas.talent import ProspectStatus, TalentType

MatchMethod = Literal["rules", "ai"]


class EmployeeProject(BaseModel):
    project_name: str = ""
    utilization_percentage: float = Field(default=0, ge=0, le=100)


class TalentSnapshot(BaseModel):
    id: str
    first_name: str = ""
    last_name: str = ""
    talent_role: str = ""
    talent_type: TalentType = "prospect"
    prospect_status: ProspectStatus | None = None
    years_experience: float = Field(default=0, ge=0)
    skills: list[str] = Field(default_factory=list)
    bio: str | None = None
    work_experience: str | None = None
    education: str | None = None
    certifications: str | None = None
    location: str | None = None
    employee_projects: list[EmployeeProject] = Field(default_factory=list)

    def total_utilization(self) -> float:
        return sum(project.utilization_percentage for project in self.employee_projects)


class OpportunitySnapshot(BaseModel):
    id: str
    title: str = ""
    required_role: str = ""
    description: str = ""
    location: str | None = None
    start_date: str | None = None
    status: str = "open"


class MatchResult(BaseModel):
    score: int = Field(ge=0, le=100)
    explanation: str
    method: MatchMethod = "rules"


class ScoreRequest(BaseModel):
    talent: TalentSnapshot
    opportunity: OpportunitySnapshot
    use_ai: bool = False


class TalentMatch(BaseModel):
    talent: TalentSnapshot
    match: MatchResult


class OpportunityMatch(BaseModel):
    opportunity: OpportunitySnapshot
    match: MatchResult


class MatchTalentsRequest(BaseModel):
    opportunity: OpportunitySnapshot
    talents: list[TalentSnapshot] = Field(default_factory=list, max_length=500)
    use_ai: bool = False


class MatchOpportunitiesRequest(BaseModel):
    talent: TalentSnapshot
    opportunities: list[OpportunitySnapshot] = Field(default_factory=list, max_length=500)
    use_ai: bool = False
