from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Literal

logger = logging.getLogger(__name__)

Shape = Literal["object", "array"]
Strategy = Callable[[str], "str | None"]

_LEADING_FENCE_RE = re.compile(r"^```[A-Za-z0-9_-]*\s*")
_TRAILING_FENCE_RE = re.compile(r"\s*```\s*$")
_LEADING_LABEL_RE = re.compile(r"^(?:json|response|data|result)\s*:\s*", re.IGNORECASE)
_JSON_LABEL_ARRAY_RE = re.compile(r"json\s*:\s*(\[.*\])", re.IGNORECASE | re.DOTALL)
_FENCED_ARRAY_RE = re.compile(r"```(?:json)?\s*(\[.*?\])\s*```", re.IGNORECASE | re.DOTALL)
_ANY_ARRAY_RE = re.compile(r"(\[[\s\S]*?\])")
_ID_FRAGMENT_RE = re.compile(r"\{[^{}]*\"id\"[^{}]*\}")
_KEYED_FRAGMENT_RE = re.compile(
    r"\{[^{}]*(?:\"id\"|\"title\"|\"description\"|\"provider\"|\"url\"|\"thumbnail\"|"
    r"\"duration\"|\"rating\"|\"skills\"|\"difficulty\")[^{}]*\}"
)
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")
_UNQUOTED_KEY_RE = re.compile(r"([{,]\s*)([A-Za-z_]\w*)\s*:")
_UNQUOTED_VALUE_RE = re.compile(r"(\"\s*:\s*)([^\"\s,{\[\]}][^,}\]]*?)(\s*[,}\]])")
_JSON_LITERAL_RE = re.compile(r"^(?:true|false|null|-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)$")

DIAGNOSTIC_MARKERS = ("id", "title", "provider", "url", "thumbnail", "description")


class JSONRecoveryError(ValueError):
    def __init__(self, message: str, *, diagnostics: dict[str, Any]):
        super().__init__(message)
        self.code = "invalid_ai_response"
        self.diagnostics = diagnostics


@dataclass(frozen=True)
class RecoveredJSON:
    value: Any
    strategy: str


def strip_code_fences(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _LEADING_FENCE_RE.sub("", cleaned, count=1)
        cleaned = _TRAILING_FENCE_RE.sub("", cleaned)
    return cleaned.strip()


def _strip_labels(text: str) -> str:
    cleaned = strip_code_fences(text)
    return _LEADING_LABEL_RE.sub("", cleaned, count=1).strip()


def _trim_between(text: str, opening: str, closing: str) -> str | None:
    start = text.find(opening)
    end = text.rfind(closing)
    if start == -1 or end <= start:
        return None
    return text[start : end + 1]


def fenced(text: str) -> str | None:
    return strip_code_fences(text) or None


def fenced_with_labels(text: str) -> str | None:
    return _strip_labels(text) or None


def object_span(text: str) -> str | None:
    return _trim_between(strip_code_fences(text), "{", "}")


def array_span(text: str) -> str | None:
    return _trim_between(_strip_labels(text), "[", "]")


def labelled_array(text: str) -> str | None:
    match = _JSON_LABEL_ARRAY_RE.search(text)
    return match.group(1) if match else None


def fenced_array(text: str) -> str | None:
    match = _FENCED_ARRAY_RE.search(text)
    return match.group(1) if match else None


def first_bracket_span(text: str) -> str | None:
    match = _ANY_ARRAY_RE.search(text)
    return match.group(1) if match else None


def _stitch(pattern: re.Pattern[str], text: str) -> str | None:
    fragments = pattern.findall(text)
    if not fragments:
        return None
    return "[" + ",".join(fragments) + "]"


def stitched_id_fragments(text: str) -> str | None:
    return _stitch(_ID_FRAGMENT_RE, text)


def stitched_keyed_fragments(text: str) -> str | None:
    return _stitch(_KEYED_FRAGMENT_RE, text)


def _quote_bare_value(match: re.Match[str]) -> str:
    prefix, value, tail = match.group(1), match.group(2).strip(), match.group(3)
    if _JSON_LITERAL_RE.match(value):
        return f"{prefix}{value}{tail}"
    return f'{prefix}"{value}"{tail}'


def repaired_array(text: str) -> str | None:
    fixed = _UNQUOTED_KEY_RE.sub(r'\1"\2":', text)
    fixed = _UNQUOTED_VALUE_RE.sub(_quote_bare_value, fixed)
    fixed = _TRAILING_COMMA_RE.sub(r"\1", fixed)
    return _trim_between(fixed, "[", "]")


OBJECT_STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("fenced", fenced),
    ("object_span", object_span),
)

ARRAY_STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("fenced", fenced_with_labels),
    ("array_span", array_span),
    ("labelled_array", labelled_array),
    ("fenced_array", fenced_array),
    ("first_bracket_span", first_bracket_span),
    ("stitched_id_fragments", stitched_id_fragments),
    ("stitched_keyed_fragments", stitched_keyed_fragments),
    ("repaired_array", repaired_array),
)


def _shape_ok(value: Any, shape: Shape) -> bool:
    if shape == "object":
        return isinstance(value, dict)
    return isinstance(value, list) and len(value) > 0


def diagnose(text: str) -> dict[str, Any]:
    content = text or ""
    report: dict[str, Any] = {
        "content_length": len(content),
        "has_brackets": "[" in content and "]" in content,
        "has_braces": "{" in content and "}" in content,
    }
    for marker in DIAGNOSTIC_MARKERS:
        report[f"has_{marker}"] = f'"{marker}"' in content
    return report


def recover_json(text: str, shape: Shape) -> RecoveredJSON:
    """Pull one JSON value of the wanted shape out of free-form model output.

    Strategies run in priority order; the first candidate that parses and
    has the right shape wins. Raises JSONRecoveryError when none does.
    """
    strategies = OBJECT_STRATEGIES if shape == "object" else ARRAY_STRATEGIES
    content = text or ""
    for name, strategy in strategies:
        try:
            candidate = strategy(content)
            if not candidate:
                continue
            value = json.loads(candidate)
        except (ValueError, re.error) as exc:
            logger.debug("json_recovery_strategy_failed strategy=%s: %s", name, exc)
            continue
        if _shape_ok(value, shape):
            if name != strategies[0][0]:
                logger.info("json_recovery_strategy_used strategy=%s shape=%s", name, shape)
            return RecoveredJSON(value=value, strategy=name)
        logger.debug("json_recovery_wrong_shape strategy=%s shape=%s", name, shape)

    diagnostics = diagnose(content)
    logger.error("json_recovery_failed shape=%s diagnostics=%s preview=%r", shape, diagnostics, content[:500])
    if shape == "object":
        message = "Invalid response format from AI"
    else:
        message = (
            "Invalid AI response format - could not extract valid JSON array from response. "
            f"Content length: {diagnostics['content_length']}, "
            f"Contains JSON markers: {diagnostics['has_brackets']}"
        )
    raise JSONRecoveryError(message, diagnostics=diagnostics)


def recover_object(text: str) -> dict[str, Any]:
    return recover_json(text, "object").value


def recover_array(text: str) -> list[Any]:
    return recover_json(text, "array").value
