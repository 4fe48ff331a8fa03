import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from talent_api.api.v1.health import router as health_router
from talent_api.api.v1.resumes import router as resumes_router
from talent_api.api.v1.career import router as career_router
from talent_api.api.v1.matching import router as matching_router
from talent_api.core.cors import cors_allow_origin_regex, cors_allowed_origins
from talent_api.core.rate_limit import limiter
from talent_api.core.config import settings

logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s %(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="Talent Intake API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allowed_origins(),
    allow_origin_regex=cors_allow_origin_regex(),
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(resumes_router, prefix="/v1", tags=["Resumes"])
app.include_router(career_router, prefix="/v1", tags=["Career"])
app.include_router(matching_router, prefix="/v1", tags=["Matching"])
