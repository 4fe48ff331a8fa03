from fastapi import APIRouter, Depends, Request

from talent_api.core.rate_limit import rate_limit
from talent_api.schemas.matching import (
    MatchOpportunitiesRequest,
    MatchResult,
    MatchTalentsRequest,
    OpportunityMatch,
    ScoreRequest,
    TalentMatch,
)
from talent_api.services.matching_service import MatchingService

router = APIRouter()


def get_matching_service() -> MatchingService:
    return MatchingService()


@router.post("/matching/score", response_model=MatchResult)
@rate_limit()
async def score_match(request: Request, payload: ScoreRequest, service: MatchingService = Depends(get_matching_service)):
    _ = request
    return await service.score(payload.talent, payload.opportunity, use_ai=payload.use_ai)


@router.post("/matching/talents", response_model=list[TalentMatch])
@rate_limit()
async def match_talents(
    request: Request,
    payload: MatchTalentsRequest,
    service: MatchingService = Depends(get_matching_service),
):
    _ = request
    return await service.match_talents_for_opportunity(payload.opportunity, payload.talents, use_ai=payload.use_ai)


@router.post("/matching/opportunities", response_model=list[OpportunityMatch])
@rate_limit()
async def match_opportunities(
    request: Request,
    payload: MatchOpportunitiesRequest,
    service: MatchingService = Depends(get_matching_service),
):
    _ = request
    return await service.match_opportunities_for_talent(payload.talent, payload.opportunities, use_ai=payload.use_ai)
