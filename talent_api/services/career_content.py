from __future__ import annotations

import asyncio

from talent_api.schemas.career import CareerTip, Course

_UDEMY_THUMB = "https://img-c.udemycdn.com/course/750x422/1362070_b9a1_2.jpg"


def _youtube_thumb(video_id: str) -> str:
    return f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"


# Minimal single-item sets served when the AI call or JSON recovery fails.
_FALLBACK_TIPS = (
    CareerTip(
        id="fallback-tip-1",
        title="Continuous Learning",
        description="Stay updated with the latest technologies and best practices in your field.",
        category="Career Development",
        difficulty="Beginner",
        relevance_score=5,
    ),
)

_FALLBACK_COURSES = (
    Course(
        id="fallback-course-1",
        title="JavaScript Fundamentals",
        provider="YouTube",
        url="https://www.youtube.com/watch?v=PkZNo7MFNFg",
        thumbnail=_youtube_thumb("PkZNo7MFNFg"),
        duration="15 hours",
        rating=4.6,
        skills=["JavaScript", "Programming"],
        difficulty="Beginner",
        relevance_score=5,
        is_upskill=False,
    ),
    Course(
        id="fallback-course-2",
        title="Web Development Bootcamp",
        provider="Udemy",
        url="https://www.udemy.com/course/the-complete-web-developer-bootcamp/",
        thumbnail=_UDEMY_THUMB,
        duration="50 hours",
        rating=4.7,
        skills=["HTML", "CSS", "JavaScript"],
        difficulty="Beginner",
        relevance_score=5,
        is_upskill=False,
    ),
)

# Demo sets served when no API key is configured at all.
_MOCK_TIPS = (
    CareerTip(
        id="mock-tip-1",
        title="Master Modern JavaScript Frameworks",
        description=(
            "Focus on learning React, Vue, or Angular to stay competitive in the frontend "
            "development market. These skills are in high demand."
        ),
        category="Technical Skills",
        difficulty="Intermediate",
        relevance_score=8,
    ),
    CareerTip(
        id="mock-tip-2",
        title="Build Your Professional Network",
        description=(
            "Connect with other developers on LinkedIn, attend meetups, and contribute to open "
            "source projects to expand your professional network."
        ),
        category="Networking",
        difficulty="Beginner",
        relevance_score=7,
    ),
)

_MOCK_COURSES = (
    Course(
        id="mock-course-1",
        title="Complete Web Development Bootcamp 2024",
        provider="Udemy",
        url="https://www.udemy.com/course/the-complete-web-developer-bootcamp/",
        thumbnail=_UDEMY_THUMB,
        duration="50 hours",
        rating=4.7,
        skills=["HTML", "CSS", "JavaScript", "React"],
        difficulty="Beginner",
        relevance_score=8,
        is_upskill=True,
    ),
    Course(
        id="mock-course-2",
        title="JavaScript Fundamentals - Complete Tutorial",
        provider="YouTube",
        url="https://www.youtube.com/watch?v=PkZNo7MFNFg",
        thumbnail=_youtube_thumb("PkZNo7MFNFg"),
        duration="15 hours",
        rating=4.6,
        skills=["JavaScript", "Programming", "ES6"],
        difficulty="Beginner",
        relevance_score=7,
        is_upskill=False,
    ),
    Course(
        id="mock-course-3",
        title="React - The Complete Guide (incl Hooks, React Router, Redux)",
        provider="Udemy",
        url="https://www.udemy.com/course/react-the-complete-guide-incl-redux/",
        thumbnail=_UDEMY_THUMB,
        duration="40 hours",
        rating=4.7,
        skills=["React", "JavaScript", "Redux", "Hooks"],
        difficulty="Intermediate",
        relevance_score=9,
        is_upskill=True,
    ),
    Course(
        id="mock-course-4",
        title="Node.js, Express, MongoDB & More: The Complete Bootcamp 2023",
        provider="Udemy",
        url="https://www.udemy.com/course/nodejs-express-mongodb-bootcamp/",
        thumbnail=_UDEMY_THUMB,
        duration="63 hours",
        rating=4.8,
        skills=["Node.js", "Express", "MongoDB", "REST APIs"],
        difficulty="Intermediate",
        relevance_score=8,
        is_upskill=True,
    ),
    Course(
        id="mock-course-5",
        title="Python for Data Science and Machine Learning Bootcamp",
        provider="Udemy",
        url="https://www.udemy.com/course/python-for-data-science-and-machine-learning-bootcamp/",
        thumbnail=_UDEMY_THUMB,
        duration="25 hours",
        rating=4.6,
        skills=["Python", "Data Science", "Machine Learning", "Pandas"],
        difficulty="Intermediate",
        relevance_score=7,
        is_upskill=True,
    ),
    Course(
        id="mock-course-6",
        title="AWS Certified Solutions Architect - Associate 2023",
        provider="Udemy",
        url="https://www.udemy.com/course/aws-certified-solutions-architect-associate/",
        thumbnail=_UDEMY_THUMB,
        duration="30 hours",
        rating=4.5,
        skills=["AWS", "Cloud Computing", "Architecture", "DevOps"],
        difficulty="Advanced",
        relevance_score=8,
        is_upskill=True,
    ),
    Course(
        id="mock-course-7",
        title="Docker and Kubernetes: The Complete Guide",
        provider="Udemy",
        url="https://www.udemy.com/course/docker-and-kubernetes-the-complete-guide/",
        thumbnail=_UDEMY_THUMB,
        duration="20 hours",
        rating=4.7,
        skills=["Docker", "Kubernetes", "DevOps", "Containerization"],
        difficulty="Intermediate",
        relevance_score=7,
        is_upskill=True,
    ),
    Course(
        id="mock-course-8",
        title="Complete SQL and Database Bootcamp 2023",
        provider="Udemy",
        url="https://www.udemy.com/course/complete-sql-database-bootcamp-zero-to-mastery/",
        thumbnail=_UDEMY_THUMB,
        duration="35 hours",
        rating=4.6,
        skills=["SQL", "Database", "PostgreSQL", "Data Analysis"],
        difficulty="Beginner",
        relevance_score=6,
        is_upskill=False,
    ),
    Course(
        id="mock-course-9",
        title="Git and GitHub - Complete Git Guide",
        provider="YouTube",
        url="https://www.youtube.com/watch?v=RGOj5yH7evk",
        thumbnail=_youtube_thumb("RGOj5yH7evk"),
        duration="8 hours",
        rating=4.8,
        skills=["Git", "GitHub", "Version Control", "Collaboration"],
        difficulty="Beginner",
        relevance_score=9,
        is_upskill=False,
    ),
    Course(
        id="mock-course-10",
        title="System Design Interview - An Insider Guide",
        provider="YouTube",
        url="https://www.youtube.com/watch?v=ZgdS0OUmnzs",
        thumbnail=_youtube_thumb("ZgdS0OUmnzs"),
        duration="12 hours",
        rating=4.9,
        skills=["System Design", "Architecture", "Scalability", "Interview Prep"],
        difficulty="Advanced",
        relevance_score=8,
        is_upskill=True,
    ),
)


def fallback_career_tips() -> list[CareerTip]:
    return [tip.model_copy(deep=True) for tip in _FALLBACK_TIPS]


def fallback_courses() -> list[Course]:
    return [course.model_copy(deep=True) for course in _FALLBACK_COURSES]


def mock_career_tips() -> list[CareerTip]:
    return [tip.model_copy(deep=True) for tip in _MOCK_TIPS]


def mock_courses() -> list[Course]:
    return [course.model_copy(deep=True) for course in _MOCK_COURSES]


async def simulated_delay(seconds: float) -> None:
    if seconds > 0:
        await asyncio.sleep(seconds)
