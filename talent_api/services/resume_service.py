from __future__ import annotations

import asyncio
import logging

import httpx

from talent_api.ai.client import ResilientChatClient, require_api_key
from talent_api.ai.types import ChatMessage
from talent_api.core.config import Settings, settings as default_settings
from talent_api.normalize.json_repair import recover_json
from talent_api.normalize.normalize_resume import normalize_resume_payload
from talent_api.parsing.extract import ResumeTextExtractor
from talent_api.parsing.files import validate_resume_file
from talent_api.parsing.models import UploadedResume
from talent_api.schemas.resume import ResumeParseResult

logger = logging.getLogger(__name__)

RESUME_SYSTEM_PROMPT = (
    "You are an expert at parsing resumes and extracting structured information. Always return valid JSON."
)

RESUME_PROMPT_TEMPLATE = """Parse this resume and return ONLY valid JSON in this exact format:
{{
  "firstName": "string",
  "lastName": "string",
  "email": "string",
  "phone": "string",
  "location": "string",
  "yearsExperience": number,
  "skills": ["string"],
  "links": {{ "linkedin": "string", "github": "string", "portfolio": "string" }},
  "sections": {{
    "bioText": "string",
    "experience": [{{"title": "string", "company": "string", "startDate": "string", "endDate": "string", "duration": "string", "description": "string"}}],
    "education": ["string"],
    "certifications": ["string"]
  }}
}}

IMPORTANT: Return ONLY the JSON object. No explanations, no markdown, no code blocks. Just the raw JSON.

Resume:
{resume_text}"""


def truncate_resume_text(text: str, budget: int) -> str:
    if len(text) <= budget:
        return text
    return text[:budget] + "..."


def build_resume_messages(text: str, *, char_budget: int) -> list[ChatMessage]:
    prompt = RESUME_PROMPT_TEMPLATE.format(resume_text=truncate_resume_text(text, char_budget))
    return [
        ChatMessage(role="system", content=RESUME_SYSTEM_PROMPT),
        ChatMessage(role="user", content=prompt),
    ]


class ResumeParser:
    """Upload to structured resume data: validate, extract, ask the model, recover, normalize."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        extractor: ResumeTextExtractor | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._settings = settings or default_settings
        self._extractor = extractor or ResumeTextExtractor(settings=self._settings)
        self._http_client = http_client

    @property
    def max_upload_bytes(self) -> int:
        return self._settings.resume_max_upload_bytes

    async def parse(self, upload: UploadedResume) -> ResumeParseResult:
        cfg = self._settings
        kind = validate_resume_file(upload, max_bytes=cfg.resume_max_upload_bytes)
        api_key = require_api_key(cfg)

        extracted = await asyncio.to_thread(self._extractor.extract, upload.content, kind)
        logger.info(
            "resume_text_extracted file=%s kind=%s chars=%s ocr=%s",
            upload.filename,
            kind,
            len(extracted.text),
            extracted.ocr_used,
        )

        client = ResilientChatClient(api_key, settings=cfg, http_client=self._http_client)
        completion = await client.complete(
            build_resume_messages(extracted.text, char_budget=cfg.resume_prompt_char_budget),
            max_tokens=cfg.resume_max_tokens,
            temperature=cfg.llm_temperature,
        )
        recovered = recover_json(completion.content, "object")
        data = normalize_resume_payload(recovered.value)
        logger.info(
            "resume_parsed file=%s model=%s attempts=%s skills=%s",
            upload.filename,
            completion.model,
            completion.attempts,
            len(data.skills),
        )
        return ResumeParseResult(
            filename=upload.filename,
            source_type=extracted.source_type,
            pages=extracted.pages,
            ocr_used=extracted.ocr_used,
            model=completion.model,
            attempts=completion.attempts,
            data=data,
            warnings=list(extracted.warnings),
        )


async def parse_resume(upload: UploadedResume, *, settings: Settings | None = None) -> ResumeParseResult:
    return await ResumeParser(settings=settings).parse(upload)
