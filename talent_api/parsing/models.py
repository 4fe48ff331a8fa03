from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class UploadedResume(BaseModel):
    filename: str = ""
    content_type: str | None = None
    size: int = Field(default=0, ge=0)
    content: bytes = b""

    @classmethod
    def from_bytes(cls, filename: str, content: bytes, content_type: str | None = None) -> "UploadedResume":
        return cls(filename=filename, content_type=content_type, size=len(content), content=content)


class ExtractedText(BaseModel):
    text: str
    source_type: str
    pages: int = 0
    ocr_used: bool = False
    warnings: list[str] = Field(default_factory=list)

    @field_validator("source_type")
    @classmethod
    def _validate_source_type(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in {"pdf", "txt"}:
            raise ValueError("source_type must be one of: pdf, txt")
        return normalized
