from __future__ import annotations

from typing import Literal

from talent_api.core.config import settings
from talent_api.parsing.models import UploadedResume

ResumeKind = Literal["pdf", "txt"]

RESUME_CONTENT_TYPES: dict[str, ResumeKind] = {
    "application/pdf": "pdf",
    "text/plain": "txt",
}

RESUME_EXTENSIONS: dict[str, ResumeKind] = {
    "pdf": "pdf",
    "txt": "txt",
}


class ResumeFileError(ValueError):
    def __init__(self, message: str, *, code: str = "invalid_file"):
        super().__init__(message)
        self.code = code


def _normalize_content_type(content_type: str | None) -> str:
    if not content_type:
        return ""
    return content_type.split(";")[0].strip().lower()


def extension_from_filename(filename: str) -> str:
    name = (filename or "").strip().lower()
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[-1]


def resolve_resume_kind(filename: str, content_type: str | None) -> ResumeKind | None:
    declared = RESUME_CONTENT_TYPES.get(_normalize_content_type(content_type))
    if declared:
        return declared
    return RESUME_EXTENSIONS.get(extension_from_filename(filename))


def validate_resume_file(upload: UploadedResume, *, max_bytes: int | None = None) -> ResumeKind:
    """Check type and size of an uploaded resume.

    The declared content type wins; the filename extension is only consulted
    when the browser sent no type or an unrelated one. Nothing is read from
    the payload here.
    """
    kind = resolve_resume_kind(upload.filename, upload.content_type)
    if kind is None:
        raise ResumeFileError("Please upload a PDF or TXT file", code="unsupported_type")

    limit = settings.resume_max_upload_bytes if max_bytes is None else max_bytes
    if upload.size > limit:
        raise ResumeFileError(
            f"File size must be less than {limit // (1024 * 1024)}MB",
            code="file_too_large",
        )
    return kind
