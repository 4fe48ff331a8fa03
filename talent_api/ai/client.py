from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Sequence

import httpx
from openai import APIError, APIStatusError, AsyncOpenAI, DefaultAsyncHttpxClient
from openai.types.chat import ChatCompletion

from talent_api.ai.config import is_openrouter_key, resolve_candidates
from talent_api.ai.types import ChatMessage, CompletionResult, ModelCandidate
from talent_api.core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "API key not configured. Please add OPENAI_API_KEY to your .env file."
QUOTA_MESSAGE = "API quota exceeded. Please check your API credits."
NO_MODEL_MESSAGE = "No working models found. Please try again or contact support."
_QUOTA_MARKERS = ("quota", "credit", "payment", "insufficient_quota")


class LLMCallError(RuntimeError):
    def __init__(self, message: str, *, code: str = "llm_unavailable", status_code: int | None = None):
        super().__init__(message)
        self.code = code
        self.status_code = status_code


@dataclass(frozen=True)
class AttemptFailure:
    model: str
    status_code: int | None
    body: Any
    message: str

    def error_text(self) -> str:
        if isinstance(self.body, (dict, list)):
            body_text = json.dumps(self.body, ensure_ascii=False)
        else:
            body_text = str(self.body or "")
        return f"{body_text} {self.message}".strip()


def require_api_key(settings: Settings | None = None) -> str:
    cfg = settings or default_settings
    if not cfg.openai_api_key:
        raise LLMCallError(MISSING_KEY_MESSAGE, code="missing_api_key")
    return cfg.openai_api_key


def classify_failure(failure: AttemptFailure | None, *, openrouter: bool) -> LLMCallError:
    """Map the last failed attempt onto one user-facing error."""
    if failure is None:
        return LLMCallError("All models failed. Last error: Unknown error", code="all_models_failed")

    status = failure.status_code
    if status == 401:
        provider = "OpenRouter" if openrouter else "OpenAI"
        return LLMCallError(f"Invalid {provider} API key.", code="invalid_api_key", status_code=status)

    text = failure.error_text().lower()
    if status in {402, 429} or any(marker in text for marker in _QUOTA_MARKERS):
        return LLMCallError(QUOTA_MESSAGE, code="quota_exceeded", status_code=status)
    if status == 404:
        return LLMCallError(NO_MODEL_MESSAGE, code="no_working_model", status_code=status)
    return LLMCallError(
        f"All models failed. Last error: {failure.message or 'Unknown error'}",
        code="all_models_failed",
        status_code=status,
    )


class ResilientChatClient:
    """Chat completions over an ordered list of model candidates.

    Candidates are tried one after another with a single request each; the
    first successful response wins. SDK retries are disabled so the number
    of HTTP calls equals the number of candidates tried.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._settings = settings or default_settings
        self._api_key = api_key or require_api_key(self._settings)
        self._http_client = http_client
        self.candidates: tuple[ModelCandidate, ...] = resolve_candidates(self._api_key, self._settings)
        self.openrouter = is_openrouter_key(self._api_key, self._settings)

    def _sdk_client(self, candidate: ModelCandidate, http_client: httpx.AsyncClient) -> AsyncOpenAI:
        kwargs: dict[str, Any] = {
            "api_key": self._api_key,
            "base_url": candidate.base_url,
            "max_retries": 0,
            "http_client": http_client,
        }
        if self._settings.llm_timeout_s is not None:
            kwargs["timeout"] = self._settings.llm_timeout_s
        if candidate.provider == "openrouter":
            kwargs["default_headers"] = {"X-Title": self._settings.llm_app_title}
        return AsyncOpenAI(**kwargs)

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        *,
        max_tokens: int,
        temperature: float | None = None,
    ) -> CompletionResult:
        if self._http_client is not None:
            return await self._complete_with(self._http_client, messages, max_tokens, temperature)
        async with DefaultAsyncHttpxClient() as http_client:
            return await self._complete_with(http_client, messages, max_tokens, temperature)

    async def _complete_with(
        self,
        http_client: httpx.AsyncClient,
        messages: Sequence[ChatMessage],
        max_tokens: int,
        temperature: float | None,
    ) -> CompletionResult:
        payload = [{"role": m.role, "content": m.content} for m in messages]
        temp = self._settings.llm_temperature if temperature is None else temperature
        last_failure: AttemptFailure | None = None
        response = None
        answered_by: ModelCandidate | None = None
        attempts = 0

        for candidate in self.candidates:
            attempts += 1
            logger.info("llm_attempt model=%s provider=%s attempt=%s", candidate.model, candidate.provider, attempts)
            try:
                response = await self._sdk_client(candidate, http_client).chat.completions.create(
                    model=candidate.model,
                    messages=payload,
                    temperature=temp,
                    max_tokens=max_tokens,
                )
                if not isinstance(response, ChatCompletion) or not getattr(response, "choices", None):
                    last_failure = AttemptFailure(
                        model=candidate.model,
                        status_code=None,
                        body=str(response)[:200],
                        message="Unexpected response format",
                    )
                    logger.warning("llm_model_bad_response model=%s type=%s", candidate.model, type(response).__name__)
                    response = None
                    continue
                answered_by = candidate
                break
            except APIStatusError as exc:
                last_failure = AttemptFailure(
                    model=candidate.model,
                    status_code=exc.status_code,
                    body=exc.body,
                    message=exc.message,
                )
                logger.warning("llm_model_failed model=%s status=%s", candidate.model, exc.status_code)
            except (APIError, httpx.HTTPError) as exc:
                last_failure = AttemptFailure(model=candidate.model, status_code=None, body=None, message=str(exc))
                logger.warning("llm_model_failed model=%s error=%s", candidate.model, exc)

        if response is None or answered_by is None:
            error = classify_failure(last_failure, openrouter=self.openrouter)
            logger.error("llm_all_models_failed attempts=%s code=%s", attempts, error.code)
            raise error

        content = response.choices[0].message.content
        if self._settings.ai_debug:
            logger.debug("llm_response model=%s content=%r", answered_by.model, content)
        if not content:
            raise LLMCallError("No response from AI", code="empty_response")
        logger.info("llm_model_succeeded model=%s attempts=%s", answered_by.model, attempts)
        return CompletionResult(content=content, model=answered_by.model, attempts=attempts)
