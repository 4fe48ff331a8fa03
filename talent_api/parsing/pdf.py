from __future__ import annotations

import logging
from io import BytesIO

from pypdf import PdfReader

logger = logging.getLogger(__name__)


def _page_runs(page_text: str) -> list[str]:
    return [run.strip() for run in page_text.splitlines() if run.strip()]


def extract_text_layer(content: bytes) -> tuple[str, int]:
    """Return the selectable text of every page and the page count.

    Runs inside a page are space-joined, pages are newline-joined. Errors
    from opening or decoding the document propagate to the caller.
    """
    reader = PdfReader(BytesIO(content))
    page_texts: list[str] = []
    for index, page in enumerate(reader.pages, start=1):
        page_text = " ".join(_page_runs(page.extract_text() or ""))
        logger.debug("resume_pdf_page_text page=%s chars=%s", index, len(page_text))
        page_texts.append(page_text)
    return "\n".join(page_texts), len(page_texts)
