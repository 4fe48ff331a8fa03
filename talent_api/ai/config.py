from __future__ import annotations

from talent_api.ai.types import ModelCandidate
from talent_api.core.config import Settings


def is_openrouter_key(api_key: str, settings: Settings) -> bool:
    return api_key.startswith(settings.openrouter_key_prefix)


def resolve_candidates(api_key: str, settings: Settings) -> tuple[ModelCandidate, ...]:
    """Ordered model candidates for a key.

    Aggregator keys fan out over the configured free-tier list; any other
    key talks to the provider directly with a single default model.
    """
    if is_openrouter_key(api_key, settings):
        return tuple(
            ModelCandidate(provider="openrouter", base_url=settings.openrouter_base_url, model=model)
            for model in settings.openrouter_models
        )
    return (
        ModelCandidate(
            provider="openai",
            base_url=settings.openai_base_url,
            model=settings.openai_default_model,
        ),
    )
