from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

Difficulty = Literal["Beginner", "Intermediate", "Advanced"]
ContentSource = Literal["ai", "mock", "fallback"]


class UserProfile(BaseModel):
    skills: list[str] = Field(default_factory=list, max_length=200)
    work_experience: str = Field(default="", max_length=20000)
    education: str = Field(default="", max_length=10000)
    name: str | None = Field(default=None, max_length=200)
    email: str | None = Field(default=None, max_length=200)


class CareerTip(BaseModel):
    id: str
    title: str
    description: str = ""
    category: str = "Career Development"
    difficulty: Difficulty = "Beginner"
    relevance_score: float = Field(default=5, ge=0, le=10)


class Course(BaseModel):
    id: str
    title: str
    provider: str = ""
    url: str = ""
    thumbnail: str = ""
    duration: str = ""
    rating: float = Field(default=0, ge=0, le=5)
    skills: list[str] = Field(default_factory=list)
    difficulty: Difficulty = "Beginner"
    relevance_score: float = Field(default=5, ge=0, le=10)
    is_upskill: bool = False


class CareerTipsResponse(BaseModel):
    source: ContentSource
    tips: list[CareerTip]


class CourseRecommendationsResponse(BaseModel):
    source: ContentSource
    courses: list[Course]
