from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from talent_api.ai.client import LLMCallError, ResilientChatClient
from talent_api.ai.types import ChatMessage
from talent_api.core.config import Settings, settings as default_settings
from talent_api.normalize.json_repair import JSONRecoveryError, recover_array
from talent_api.schemas.career import (
    CareerTip,
    CareerTipsResponse,
    Course,
    CourseRecommendationsResponse,
    UserProfile,
)
from talent_api.services import career_content

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", bound=BaseModel)

CAREER_SYSTEM_PROMPT = (
    "You are a career development AI assistant. Provide personalized career advice and course "
    "recommendations based on user profiles. CRITICAL: You must respond with ONLY a valid JSON array. "
    "Do not include any markdown formatting, explanations, or additional text. Just the raw JSON array."
)


def build_career_tips_prompt(profile: UserProfile) -> str:
    return f"""Based on the following user profile, provide 5 personalized career growth tips:

User Profile:
- Skills: {", ".join(profile.skills)}
- Work Experience: {profile.work_experience}
- Education: {profile.education}
- Name: {profile.name or "Not provided"}
- Email: {profile.email or "Not provided"}

Please provide tips that:
1. Build on their current skills and experience
2. Address gaps in their skill set
3. Are relevant to their career level
4. Include both technical and soft skills
5. Are actionable and specific
6. Consider current industry trends

For each tip, provide:
- Title (concise and actionable)
- Description (2-3 sentences explaining the tip)
- Category (Technical Skills, Soft Skills, Leadership, Career Development, Networking, etc.)
- Difficulty level (Beginner/Intermediate/Advanced)
- Relevance score (1-10 based on how relevant it is to their profile)

Format as JSON array with these exact fields: id, title, description, category, difficulty, relevance_score

Example format:
[
  {{
    "id": "tip-1",
    "title": "Master TypeScript for Better React Development",
    "description": "Learn TypeScript to write more maintainable and scalable React applications.",
    "category": "Technical Skills",
    "difficulty": "Intermediate",
    "relevance_score": 9
  }}
]"""


def build_course_prompt(profile: UserProfile) -> str:
    return f"""Based on the following user profile, recommend EXACTLY 10 relevant online courses from YouTube and Udemy only:

User Profile:
- Skills: {", ".join(profile.skills)}
- Work Experience: {profile.work_experience}
- Education: {profile.education}

CRITICAL: You MUST return exactly 10 courses. Do not return fewer than 10 courses.

IMPORTANT: Only recommend courses from YouTube and Udemy platforms.

Please recommend courses that:
1. Build on their current skills (skill-building courses)
2. Introduce new technologies they don't know (upskilling courses)
3. Are appropriate for their experience level
4. Include both free (YouTube) and paid (Udemy) options
5. Lead to career advancement opportunities

For each course, provide:
- Title, Provider (YouTube or Udemy only), URL, Thumbnail URL
- Duration (e.g., "20 hours"), Rating (1-5)
- Skills covered (array of specific skills)
- Difficulty level (Beginner/Intermediate/Advanced)
- Relevance score (1-10)
- Whether it's upskilling (true if the course introduces new skills)

Format as JSON array with these exact fields: id, title, provider, url, thumbnail, duration, rating, skills, difficulty, relevance_score, is_upskill

Example format:
[
  {{
    "id": "course-1",
    "title": "Complete React Developer Course",
    "provider": "Udemy",
    "url": "https://www.udemy.com/course/react-the-complete-guide-incl-redux/",
    "thumbnail": "https://img-c.udemycdn.com/course/750x422/1362070_b9a1_2.jpg",
    "duration": "40 hours",
    "rating": 4.8,
    "skills": ["React", "JavaScript", "Redux", "Hooks"],
    "difficulty": "Intermediate",
    "relevance_score": 9,
    "is_upskill": false
  }}
]

Return ONLY the JSON array, no other text."""


def coerce_items(raw_items: list[Any], model: type[ItemT], id_prefix: str) -> list[ItemT]:
    items: list[ItemT] = []
    for index, raw in enumerate(raw_items, start=1):
        if not isinstance(raw, dict):
            continue
        candidate = dict(raw)
        candidate["id"] = str(candidate.get("id") or f"{id_prefix}-{index}")
        try:
            items.append(model.model_validate(candidate))
        except ValidationError as exc:
            logger.debug("career_item_dropped id=%s errors=%s", candidate["id"], exc.error_count())
    return items


class CareerAdvisor:
    def __init__(self, *, settings: Settings | None = None, http_client: httpx.AsyncClient | None = None):
        self._settings = settings or default_settings
        self._http_client = http_client

    async def _ask(self, prompt: str) -> list[Any]:
        client = ResilientChatClient(
            self._settings.openai_api_key,
            settings=self._settings,
            http_client=self._http_client,
        )
        completion = await client.complete(
            [
                ChatMessage(role="system", content=CAREER_SYSTEM_PROMPT),
                ChatMessage(role="user", content=prompt),
            ],
            max_tokens=self._settings.career_max_tokens,
            temperature=self._settings.llm_temperature,
        )
        return recover_array(completion.content)

    def _log_failure(self, kind: str, exc: Exception) -> None:
        if isinstance(exc, LLMCallError) and exc.code == "quota_exceeded":
            logger.warning("career_%s_credit_limit_exceeded using=fallback", kind)
        else:
            logger.warning("career_%s_failed using=fallback: %s", kind, exc)

    async def career_tips(self, profile: UserProfile) -> CareerTipsResponse:
        if not self._settings.openai_api_key:
            await career_content.simulated_delay(self._settings.mock_delay_s)
            return CareerTipsResponse(source="mock", tips=career_content.mock_career_tips())
        try:
            tips = coerce_items(await self._ask(build_career_tips_prompt(profile)), CareerTip, "tip")
        except (LLMCallError, JSONRecoveryError) as exc:
            self._log_failure("tips", exc)
            return CareerTipsResponse(source="fallback", tips=career_content.fallback_career_tips())
        if not tips:
            logger.warning("career_tips_empty_after_coercion using=fallback")
            return CareerTipsResponse(source="fallback", tips=career_content.fallback_career_tips())
        return CareerTipsResponse(source="ai", tips=tips)

    async def course_recommendations(self, profile: UserProfile) -> CourseRecommendationsResponse:
        if not self._settings.openai_api_key:
            await career_content.simulated_delay(self._settings.mock_delay_s)
            return CourseRecommendationsResponse(source="mock", courses=career_content.mock_courses())
        try:
            courses = coerce_items(await self._ask(build_course_prompt(profile)), Course, "course")
        except (LLMCallError, JSONRecoveryError) as exc:
            self._log_failure("courses", exc)
            return CourseRecommendationsResponse(source="fallback", courses=career_content.fallback_courses())
        if not courses:
            logger.warning("career_courses_empty_after_coercion using=fallback")
            return CourseRecommendationsResponse(source="fallback", courses=career_content.fallback_courses())
        if len(courses) < 10:
            logger.warning("career_courses_short count=%s expected=10", len(courses))
        return CourseRecommendationsResponse(source="ai", courses=courses)


async def get_career_tips(profile: UserProfile, *, settings: Settings | None = None) -> CareerTipsResponse:
    return await CareerAdvisor(settings=settings).career_tips(profile)


async def get_course_recommendations(
    profile: UserProfile,
    *,
    settings: Settings | None = None,
) -> CourseRecommendationsResponse:
    return await CareerAdvisor(settings=settings).course_recommendations(profile)
