from fastapi import APIRouter, Depends, Request

from talent_api.core.rate_limit import rate_limit
from talent_api.schemas.career import CareerTipsResponse, CourseRecommendationsResponse, UserProfile
from talent_api.services.career_service import CareerAdvisor

router = APIRouter()


def get_career_advisor() -> CareerAdvisor:
    return CareerAdvisor()


@router.post("/career/tips", response_model=CareerTipsResponse)
@rate_limit()
async def career_tips(request: Request, payload: UserProfile, advisor: CareerAdvisor = Depends(get_career_advisor)):
    _ = request
    return await advisor.career_tips(payload)


@router.post("/career/courses", response_model=CourseRecommendationsResponse)
@rate_limit()
async def career_courses(
    request: Request,
    payload: UserProfile,
    advisor: CareerAdvisor = Depends(get_career_advisor),
):
    _ = request
    return await advisor.course_recommendations(payload)
