from __future__ import annotations

import logging
from typing import Any, Iterator, Protocol

import fitz  # PyMuPDF
import pytesseract
from PIL import Image

from talent_api.core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class PdfPasswordError(RuntimeError):
    pass


class PageRasterizer(Protocol):
    def render(self, content: bytes) -> Iterator[Any]: ...


class TextRecognizer(Protocol):
    def recognize(self, image: Any) -> str: ...


class PyMuPDFRasterizer:
    """Renders PDF pages to Pillow images, one page at a time."""

    def __init__(self, scale: float = 2.0):
        self._scale = scale

    def render(self, content: bytes) -> Iterator[Image.Image]:
        with fitz.open(stream=content, filetype="pdf") as document:
            if document.needs_pass:
                raise PdfPasswordError("PDF is password protected")
            matrix = fitz.Matrix(self._scale, self._scale)
            for page in document:
                pix = page.get_pixmap(matrix=matrix)
                mode = "RGBA" if pix.alpha else "RGB"
                image = Image.frombytes(mode, (pix.width, pix.height), pix.samples)
                if mode == "RGBA":
                    image = image.convert("RGB")
                yield image


class TesseractRecognizer:
    def __init__(self, lang: str = "eng", tesseract_cmd: str | None = None):
        self._lang = lang
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def recognize(self, image: Any) -> str:
        return pytesseract.image_to_string(image, lang=self._lang) or ""


class PdfOcr:
    def __init__(
        self,
        rasterizer: PageRasterizer | None = None,
        recognizer: TextRecognizer | None = None,
        *,
        settings: Settings | None = None,
    ):
        cfg = settings or default_settings
        self._rasterizer = rasterizer or PyMuPDFRasterizer(scale=cfg.ocr_scale)
        self._recognizer = recognizer or TesseractRecognizer(lang=cfg.ocr_lang, tesseract_cmd=cfg.tesseract_cmd)

    def extract(self, content: bytes) -> tuple[str, int]:
        page_texts: list[str] = []
        # The rasterizer yields lazily so only one page bitmap is alive at a time.
        for index, image in enumerate(self._rasterizer.render(content), start=1):
            page_text = self._recognizer.recognize(image)
            logger.debug("resume_ocr_page page=%s chars=%s", index, len(page_text))
            page_texts.append(page_text)
        return "\n".join(page_texts), len(page_texts)
