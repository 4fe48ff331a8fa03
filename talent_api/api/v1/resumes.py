import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status

from talent_api.ai.client import LLMCallError
from talent_api.core.rate_limit import rate_limit
from talent_api.normalize.json_repair import JSONRecoveryError
from talent_api.parsing.extract import TextExtractionError
from talent_api.parsing.files import ResumeFileError
from talent_api.parsing.models import UploadedResume
from talent_api.schemas.resume import ResumeParseResponse
from talent_api.schemas.talent import ReferralContext
from talent_api.services.resume_service import ResumeParser
from talent_api.services.talent_form import prefill_talent_form

logger = logging.getLogger(__name__)

router = APIRouter()

READ_CHUNK_BYTES = 1024 * 64


def get_resume_parser() -> ResumeParser:
    return ResumeParser()


async def _read_capped(file: UploadFile, limit: int) -> tuple[bytes, int]:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(READ_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > limit:
            # The validator reports the size; the rest of the body is never buffered.
            break
        chunks.append(chunk)
    return b"".join(chunks), total


def _llm_status(exc: LLMCallError) -> int:
    if exc.code == "missing_api_key":
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_502_BAD_GATEWAY


@router.post("/resumes/parse", response_model=ResumeParseResponse)
@rate_limit()
async def parse_resume_upload(
    request: Request,
    file: UploadFile = File(...),
    referral_mode: bool = Form(default=False),
    referred_for_opportunity: str | None = Form(default=None),
    parser: ResumeParser = Depends(get_resume_parser),
):
    _ = request
    content, size = await _read_capped(file, parser.max_upload_bytes)
    upload = UploadedResume(
        filename=file.filename or "resume",
        content_type=file.content_type,
        size=size,
        content=content,
    )

    try:
        result = await parser.parse(upload)
    except (ResumeFileError, TextExtractionError) as exc:
        logger.info("resume_upload_rejected file=%s code=%s", upload.filename, exc.code)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except LLMCallError as exc:
        logger.warning("resume_llm_failed file=%s code=%s", upload.filename, exc.code)
        raise HTTPException(status_code=_llm_status(exc), detail=str(exc)) from exc
    except JSONRecoveryError as exc:
        logger.warning("resume_json_unrecoverable file=%s", upload.filename)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    referral = None
    if referral_mode:
        referral = ReferralContext(referred_for_opportunity=referred_for_opportunity or None)
    form = prefill_talent_form(result.data, referral)
    return ResumeParseResponse(**result.model_dump(), form=form)
