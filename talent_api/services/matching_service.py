from __future__ import annotations

import logging
import re
from typing import Any

import httpx

from talent_api.ai.client import LLMCallError, ResilientChatClient
from talent_api.ai.types import ChatMessage
from talent_api.core.config import Settings, settings as default_settings
from talent_api.normalize.json_repair import JSONRecoveryError, recover_object
from talent_api.schemas.matching import (
    MatchResult,
    OpportunityMatch,
    OpportunitySnapshot,
    TalentMatch,
    TalentSnapshot,
)

logger = logging.getLogger(__name__)

TECH_KEYWORDS = (
    # frontend
    "react", "angular", "vue", "javascript", "typescript", "html", "css", "sass", "less", "webpack", "babel",
    # backend
    "node", "python", "java", "c#", "php", "ruby", "go", "rust", "spring", "hibernate",
    # databases
    "sql", "mongodb", "postgresql", "mysql", "redis", "elasticsearch", "oracle",
    # cloud and devops
    "aws", "azure", "gcp", "docker", "kubernetes", "jenkins", "ci/cd", "devops", "terraform",
    # testing
    "jest", "cypress", "selenium", "junit", "pytest", "testng",
    # methodologies
    "agile", "scrum", "kanban", "tdd", "bdd",
    "api", "rest", "graphql", "microservices", "machine learning", "ai", "data science", "analytics",
    "blockchain", "mobile", "ios", "android",
)

ROLE_RELATIONS: dict[str, tuple[str, ...]] = {
    "engineer": ("developer", "programmer", "software engineer"),
    "developer": ("engineer", "programmer", "software engineer"),
    "designer": ("ui designer", "ux designer", "graphic designer"),
    "qa": ("quality assurance", "tester", "test engineer"),
    "pm": ("product manager", "project manager", "program manager"),
    "data": ("data scientist", "data analyst", "data engineer"),
}

ROLE_KEYWORD_BONUSES = ("engineer", "developer", "backend", "frontend")

MATCH_SYSTEM_PROMPT = (
    "You are an expert talent acquisition AI. Analyze talent-opportunity matches with precision. "
    "CRITICAL: Return ONLY valid JSON with score (0-100) and detailed explanation. Do not include "
    "markdown formatting, backticks, or any other text. Just pure JSON."
)


def related_roles(role_a: str, role_b: str) -> bool:
    for key, related in ROLE_RELATIONS.items():
        if key in role_a and any(item in role_b for item in related):
            return True
        if key in role_b and any(item in role_a for item in related):
            return True
    return False


def _clamp_score(value: float) -> int:
    return max(0, min(100, int(round(value))))


def _skills_component(talent: TalentSnapshot, opportunity: OpportunitySnapshot, factors: list[str]) -> float:
    opportunity_text = opportunity.description.lower()
    talent_skills = [skill.lower() for skill in talent.skills]
    talent_text = " ".join(
        [
            (talent.bio or "").lower(),
            (talent.work_experience or "").lower(),
            (talent.education or "").lower(),
            (talent.certifications or "").lower(),
            " ".join(talent_skills),
        ]
    )
    relevant = 0
    matched = 0
    for keyword in TECH_KEYWORDS:
        if keyword not in opportunity_text:
            continue
        relevant += 1
        if keyword in talent_text or any(keyword in skill for skill in talent_skills):
            matched += 1
    if not relevant:
        factors.append("No specific skills mentioned in opportunity")
        return 0
    factors.append(f"{matched}/{relevant} relevant skills matched")
    return matched / relevant * 50


def _role_component(talent: TalentSnapshot, opportunity: OpportunitySnapshot, factors: list[str]) -> float:
    talent_role = talent.talent_role.lower()
    required_role = opportunity.required_role.lower()
    title = opportunity.title.lower()
    description = opportunity.description.lower()

    if talent_role == required_role:
        factors.append("Perfect role match")
        return 25
    if talent_role in required_role or required_role in talent_role:
        factors.append("Partial role match")
        return 20
    if related_roles(talent_role, required_role):
        factors.append("Related role match")
        return 10
    if talent_role and (talent_role in title or talent_role in description):
        factors.append("Role found in opportunity text")
        return 15
    for keyword in ROLE_KEYWORD_BONUSES:
        if keyword in talent_role and (keyword in title or keyword in description):
            factors.append(f"{keyword.capitalize()} role match")
            return 12
    factors.append("Role mismatch")
    return -5


def _location_component(talent: TalentSnapshot, opportunity: OpportunitySnapshot, factors: list[str]) -> float:
    if not talent.location or not opportunity.location:
        return 0
    talent_location = talent.location.lower()
    opportunity_location = opportunity.location.lower()
    if talent_location == opportunity_location:
        factors.append("Location match")
        return 5
    if talent_location in opportunity_location or opportunity_location in talent_location:
        factors.append("Similar location")
        return 3
    factors.append("Location mismatch")
    return 0


def _bio_component(talent: TalentSnapshot, opportunity: OpportunitySnapshot, factors: list[str]) -> float:
    if not talent.bio or not opportunity.description:
        return 0
    bio_words = talent.bio.lower().split()
    opportunity_words = opportunity.description.lower().split()
    opportunity_vocab = set(opportunity_words)
    common = [word for word in bio_words if word in opportunity_vocab and len(word) > 3]
    if not common:
        return 0
    factors.append(f"{len(common)} semantic matches in bio")
    return min(5, len(common) / max(len(bio_words), len(opportunity_words)) * 5)


def _availability_component(talent: TalentSnapshot, factors: list[str]) -> float:
    if talent.talent_type == "prospect":
        if talent.prospect_status == "available":
            factors.append("Available prospect")
            return 5
        return 0
    utilization = talent.total_utilization()
    if utilization >= 100:
        factors.append("Fully utilized")
        return -20
    if utilization >= 80:
        factors.append("Highly utilized")
        return -5
    factors.append("Available existing talent")
    return 3


def rule_based_match(talent: TalentSnapshot, opportunity: OpportunitySnapshot) -> MatchResult:
    """Deterministic score out of 100 built from weighted factors.

    Skills carry 50 points, role 25, experience 15, location and bio overlap
    5 each; availability adds or subtracts on top.
    """
    factors: list[str] = []
    score = _skills_component(talent, opportunity, factors)
    score += _role_component(talent, opportunity, factors)
    score += min(15, talent.years_experience / 8 * 15)
    factors.append(f"{talent.years_experience:g} years experience")
    score += _location_component(talent, opportunity, factors)
    score += _bio_component(talent, opportunity, factors)
    score += _availability_component(talent, factors)
    return MatchResult(score=_clamp_score(score), explanation="; ".join(factors), method="rules")


def build_match_prompt(talent: TalentSnapshot, opportunity: OpportunitySnapshot) -> str:
    return f"""Analyze the compatibility between this talent profile and job opportunity. Provide a match score (0-100) and detailed explanation.

TALENT PROFILE:
- Name: {talent.first_name} {talent.last_name}
- Role: {talent.talent_role}
- Experience: {talent.years_experience:g} years
- Skills: {", ".join(talent.skills)}
- Bio: {talent.bio or "Not provided"}
- Work Experience: {talent.work_experience or "Not provided"}
- Education: {talent.education or "Not provided"}
- Certifications: {talent.certifications or "Not provided"}
- Location: {talent.location or "Not specified"}
- Type: {talent.talent_type}
- Status: {talent.prospect_status or "Not specified"}

JOB OPPORTUNITY:
- Title: {opportunity.title}
- Required Role: {opportunity.required_role}
- Description: {opportunity.description}
- Location: {opportunity.location or "Not specified"}
- Start Date: {opportunity.start_date or "Not specified"}
- Status: {opportunity.status}

Consider these factors:
1. Skills alignment (40% weight)
2. Role compatibility (25% weight) - check role keywords in title, description, and required role
3. Experience level match (15% weight)
4. Location compatibility (10% weight)
5. Availability and timing (10% weight)

Return ONLY a JSON object with this exact format:
{{
  "score": 85,
  "explanation": "Strong match due to ..."
}}"""


def _ai_score(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return _clamp_score(value)
    if isinstance(value, str):
        match = re.search(r"-?\d+(?:\.\d+)?", value)
        if match:
            return _clamp_score(float(match.group(0)))
    return None


def available_talents(talents: list[TalentSnapshot]) -> list[TalentSnapshot]:
    available: list[TalentSnapshot] = []
    for talent in talents:
        if talent.talent_type == "prospect":
            if talent.prospect_status == "available":
                available.append(talent)
        elif talent.total_utilization() < 100:
            available.append(talent)
    return available


class MatchingService:
    def __init__(self, *, settings: Settings | None = None, http_client: httpx.AsyncClient | None = None):
        self._settings = settings or default_settings
        self._http_client = http_client

    async def ai_match(self, talent: TalentSnapshot, opportunity: OpportunitySnapshot) -> MatchResult:
        if not self._settings.openai_api_key:
            return rule_based_match(talent, opportunity)
        try:
            client = ResilientChatClient(
                self._settings.openai_api_key,
                settings=self._settings,
                http_client=self._http_client,
            )
            completion = await client.complete(
                [
                    ChatMessage(role="system", content=MATCH_SYSTEM_PROMPT),
                    ChatMessage(role="user", content=build_match_prompt(talent, opportunity)),
                ],
                max_tokens=self._settings.match_max_tokens,
                temperature=0.3,
            )
            payload = recover_object(completion.content)
        except (LLMCallError, JSONRecoveryError) as exc:
            logger.warning("ai_match_failed talent=%s opportunity=%s using=rules: %s", talent.id, opportunity.id, exc)
            return rule_based_match(talent, opportunity)

        score = _ai_score(payload.get("score"))
        explanation = str(payload.get("explanation") or "").strip()
        if score is None:
            logger.warning("ai_match_missing_score talent=%s opportunity=%s using=rules", talent.id, opportunity.id)
            return rule_based_match(talent, opportunity)
        return MatchResult(score=score, explanation=explanation or "AI match", method="ai")

    async def score(self, talent: TalentSnapshot, opportunity: OpportunitySnapshot, *, use_ai: bool) -> MatchResult:
        if use_ai:
            return await self.ai_match(talent, opportunity)
        return rule_based_match(talent, opportunity)

    async def match_talents_for_opportunity(
        self,
        opportunity: OpportunitySnapshot,
        talents: list[TalentSnapshot],
        *,
        use_ai: bool = False,
    ) -> list[TalentMatch]:
        matches = [
            TalentMatch(talent=talent, match=await self.score(talent, opportunity, use_ai=use_ai))
            for talent in available_talents(talents)
        ]
        matches.sort(key=lambda item: item.match.score, reverse=True)
        return matches

    async def match_opportunities_for_talent(
        self,
        talent: TalentSnapshot,
        opportunities: list[OpportunitySnapshot],
        *,
        use_ai: bool = False,
    ) -> list[OpportunityMatch]:
        matches = [
            OpportunityMatch(opportunity=opportunity, match=await self.score(talent, opportunity, use_ai=use_ai))
            for opportunity in opportunities
        ]
        matches.sort(key=lambda item: item.match.score, reverse=True)
        return matches
