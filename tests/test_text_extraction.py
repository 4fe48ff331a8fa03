import sys
import unittest
from io import BytesIO
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import fitz  # noqa: E402
from pypdf import PdfWriter  # noqa: E402

from talent_api.parsing.extract import (  # noqa: E402
    IMAGE_ONLY_PDF_MESSAGE,
    INVALID_PDF_MESSAGE,
    ResumeTextExtractor,
    TextExtractionError,
    classify_pdf_error,
    decode_text,
)
from talent_api.parsing.ocr import PdfOcr, PdfPasswordError  # noqa: E402
from talent_api.parsing.pdf import extract_text_layer  # noqa: E402


def blank_pdf(pages: int) -> bytes:
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=612, height=792)
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def text_pdf(*page_lines: str) -> bytes:
    document = fitz.open()
    for line in page_lines:
        page = document.new_page()
        page.insert_text((72, 72), line, fontsize=12)
    data = document.tobytes()
    document.close()
    return data


class FakeRasterizer:
    def __init__(self, pages: int):
        self.pages = pages
        self.render_calls = 0

    def render(self, content):
        self.render_calls += 1
        for index in range(self.pages):
            yield f"page-{index + 1}"


class FakeRecognizer:
    def __init__(self, texts):
        self.texts = dict(texts)
        self.calls = []

    def recognize(self, image):
        self.calls.append(image)
        return self.texts.get(image, "")


class FailingRasterizer:
    def render(self, content):
        raise RuntimeError("cannot open document")
        yield  # pragma: no cover


def extractor_with(rasterizer, recognizer):
    return ResumeTextExtractor(ocr=PdfOcr(rasterizer=rasterizer, recognizer=recognizer))


class PlainTextTests(unittest.TestCase):
    def test_txt_passthrough_is_exact(self):
        content = "Jane Doe\n  Senior Engineer  \n"
        extracted = extractor_with(FakeRasterizer(0), FakeRecognizer({})).extract(content.encode("utf-8"), "txt")
        self.assertEqual(extracted.text, content)
        self.assertEqual(extracted.source_type, "txt")
        self.assertFalse(extracted.ocr_used)

    def test_decode_falls_back_for_non_utf8_bytes(self):
        self.assertEqual(decode_text("Zürich".encode("latin-1")), "Zürich")
        self.assertEqual(decode_text("Zürich".encode("utf-16")), "Zürich")

    def test_unknown_kind_is_rejected(self):
        with self.assertRaises(TextExtractionError) as ctx:
            extractor_with(FakeRasterizer(0), FakeRecognizer({})).extract(b"x", "docx")
        self.assertEqual(ctx.exception.code, "unsupported_type")


class PdfExtractionTests(unittest.TestCase):
    def test_text_layer_is_used_without_ocr(self):
        rasterizer = FakeRasterizer(1)
        recognizer = FakeRecognizer({"page-1": "should not be used"})
        extracted = extractor_with(rasterizer, recognizer).extract(text_pdf("Jane Doe Python Engineer"), "pdf")

        self.assertIn("Jane Doe", extracted.text)
        self.assertEqual(extracted.pages, 1)
        self.assertFalse(extracted.ocr_used)
        self.assertEqual(rasterizer.render_calls, 0)
        self.assertEqual(recognizer.calls, [])

    def test_pages_are_newline_joined(self):
        text, pages = extract_text_layer(text_pdf("First page", "Second page"))
        self.assertEqual(pages, 2)
        self.assertEqual(text.split("\n"), ["First page", "Second page"])

    def test_image_only_pdf_runs_ocr_once_per_page(self):
        rasterizer = FakeRasterizer(2)
        recognizer = FakeRecognizer({"page-1": "Jane Doe", "page-2": "Python, SQL"})
        extracted = extractor_with(rasterizer, recognizer).extract(blank_pdf(2), "pdf")

        self.assertEqual(extracted.text, "Jane Doe\nPython, SQL")
        self.assertTrue(extracted.ocr_used)
        self.assertEqual(extracted.pages, 2)
        self.assertEqual(rasterizer.render_calls, 1)
        self.assertEqual(recognizer.calls, ["page-1", "page-2"])
        self.assertTrue(extracted.warnings)

    def test_blank_ocr_result_is_image_only_error(self):
        rasterizer = FakeRasterizer(1)
        with self.assertRaises(TextExtractionError) as ctx:
            extractor_with(rasterizer, FakeRecognizer({"page-1": "   "})).extract(blank_pdf(1), "pdf")
        self.assertEqual(ctx.exception.code, "image_only")
        self.assertEqual(str(ctx.exception), IMAGE_ONLY_PDF_MESSAGE)
        self.assertEqual(rasterizer.render_calls, 1)

    def test_corrupt_bytes_are_reported_as_invalid_pdf(self):
        with self.assertRaises(TextExtractionError) as ctx:
            extractor_with(FailingRasterizer(), FakeRecognizer({})).extract(b"this is not a pdf", "pdf")
        self.assertEqual(ctx.exception.code, "invalid_pdf")
        self.assertEqual(str(ctx.exception), INVALID_PDF_MESSAGE)

    def test_unreadable_text_layer_can_be_rescued_by_ocr(self):
        recognizer = FakeRecognizer({"page-1": "Recovered text"})
        extracted = extractor_with(FakeRasterizer(1), recognizer).extract(b"garbage", "pdf")
        self.assertEqual(extracted.text, "Recovered text")
        self.assertTrue(extracted.ocr_used)


class PdfErrorClassificationTests(unittest.TestCase):
    def test_password_errors(self):
        self.assertEqual(classify_pdf_error(PdfPasswordError("locked")).code, "password_protected")
        self.assertEqual(classify_pdf_error(RuntimeError("file requires a password")).code, "password_protected")

    def test_invalid_and_generic_errors(self):
        self.assertEqual(classify_pdf_error(ValueError("Invalid xref table")).code, "invalid_pdf")
        self.assertEqual(classify_pdf_error(RuntimeError("boom")).code, "extraction_failed")


if __name__ == "__main__":
    unittest.main()
