from .career import CareerTip, CareerTipsResponse, Course, CourseRecommendationsResponse, UserProfile
from .matching import MatchResult, OpportunitySnapshot, TalentSnapshot
from .resume import ParsedResumeData, ResumeParseResponse, ResumeParseResult
from .talent import ReferralContext, SubmittableTalentForm, TalentForm

__all__ = [
    "CareerTip",
    "CareerTipsResponse",
    "Course",
    "CourseRecommendationsResponse",
    "UserProfile",
    "MatchResult",
    "OpportunitySnapshot",
    "TalentSnapshot",
    "ParsedResumeData",
    "ResumeParseResult",
    "ResumeParseResponse",
    "ReferralContext",
    "SubmittableTalentForm",
    "TalentForm",
]
