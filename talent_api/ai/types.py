from dataclasses import dataclass
from typing import Literal


Role = Literal["system", "user", "assistant"]
Provider = Literal["openrouter", "openai"]


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


@dataclass(frozen=True)
class ModelCandidate:
    provider: Provider
    base_url: str
    model: str


@dataclass(frozen=True)
class CompletionResult:
    content: str
    model: str
    attempts: int
