from __future__ import annotations

import codecs
import logging

from pypdf.errors import FileNotDecryptedError, PdfReadError, WrongPasswordError

from talent_api.core.config import Settings, settings as default_settings
from talent_api.parsing.models import ExtractedText
from talent_api.parsing.ocr import PdfOcr, PdfPasswordError
from talent_api.parsing.pdf import extract_text_layer

logger = logging.getLogger(__name__)

INVALID_PDF_MESSAGE = "Invalid PDF file. Please ensure the file is not corrupted."
PASSWORD_PDF_MESSAGE = "PDF is password-protected. Please remove the password and try again."
IMAGE_ONLY_PDF_MESSAGE = (
    "No text content found in PDF. The PDF might be image-based. Please convert to text format."
)
GENERIC_PDF_MESSAGE = (
    "Failed to extract text from PDF. Please try a different file or convert to text format."
)
UNSUPPORTED_TYPE_MESSAGE = "Unsupported file type. Please use a text file (.txt) or PDF file."


class TextExtractionError(RuntimeError):
    def __init__(self, message: str, *, code: str = "extraction_failed"):
        super().__init__(message)
        self.code = code


def classify_pdf_error(exc: BaseException) -> TextExtractionError:
    if isinstance(exc, TextExtractionError):
        return exc
    message = str(exc).lower()
    if isinstance(exc, (FileNotDecryptedError, WrongPasswordError, PdfPasswordError)) or "password" in message:
        return TextExtractionError(PASSWORD_PDF_MESSAGE, code="password_protected")
    if isinstance(exc, PdfReadError) or "invalid" in message:
        return TextExtractionError(INVALID_PDF_MESSAGE, code="invalid_pdf")
    return TextExtractionError(GENERIC_PDF_MESSAGE, code="extraction_failed")


def decode_text(content: bytes) -> str:
    if content.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        return content.decode("utf-16")
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return content.decode("latin-1")


class ResumeTextExtractor:
    def __init__(self, ocr: PdfOcr | None = None, *, settings: Settings | None = None):
        self._ocr = ocr or PdfOcr(settings=settings or default_settings)

    def extract(self, content: bytes, kind: str) -> ExtractedText:
        if kind == "txt":
            return ExtractedText(text=decode_text(content), source_type="txt")
        if kind == "pdf":
            return self._extract_pdf(content)
        raise TextExtractionError(UNSUPPORTED_TYPE_MESSAGE, code="unsupported_type")

    def _extract_pdf(self, content: bytes) -> ExtractedText:
        try:
            text, pages = extract_text_layer(content)
        except Exception as exc:  # noqa: BLE001 - OCR gets one last attempt before classification
            logger.warning("resume_pdf_open_failed size=%s: %s", len(content), exc)
            recovered = self._last_resort_ocr(content)
            if recovered is not None:
                return recovered
            raise classify_pdf_error(exc) from exc

        if text.strip():
            logger.info("resume_pdf_text_layer pages=%s chars=%s", pages, len(text))
            return ExtractedText(text=text.strip(), source_type="pdf", pages=pages)

        logger.warning("resume_pdf_no_text_layer pages=%s falling_back=ocr", pages)
        try:
            ocr_text, ocr_pages = self._ocr.extract(content)
        except Exception as exc:  # noqa: BLE001
            logger.warning("resume_pdf_ocr_failed pages=%s: %s", pages, exc)
            raise classify_pdf_error(exc) from exc

        if not ocr_text.strip():
            raise TextExtractionError(IMAGE_ONLY_PDF_MESSAGE, code="image_only")
        logger.info("resume_pdf_ocr_text pages=%s chars=%s", ocr_pages, len(ocr_text))
        return ExtractedText(
            text=ocr_text.strip(),
            source_type="pdf",
            pages=ocr_pages,
            ocr_used=True,
            warnings=["No selectable text layer; text was recovered with OCR."],
        )

    def _last_resort_ocr(self, content: bytes) -> ExtractedText | None:
        try:
            ocr_text, ocr_pages = self._ocr.extract(content)
        except Exception as exc:  # noqa: BLE001
            logger.warning("resume_pdf_last_resort_ocr_failed: %s", exc)
            return None
        if not ocr_text.strip():
            return None
        return ExtractedText(
            text=ocr_text.strip(),
            source_type="pdf",
            pages=ocr_pages,
            ocr_used=True,
            warnings=["PDF text layer could not be read; text was recovered with OCR."],
        )
