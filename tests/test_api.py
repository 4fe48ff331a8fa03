import asyncio
import json
import os
import sys
import unittest
from io import BytesIO
from pathlib import Path

# Keep API tests deterministic: no real key, no throttling.
os.environ["OPENAI_API_KEY"] = ""
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fastapi.testclient import TestClient  # noqa: E402
from pypdf import PdfWriter  # noqa: E402

from llm_fakes import ScriptedLLM, make_settings  # noqa: E402
from talent_api.api.v1.career import get_career_advisor  # noqa: E402
from talent_api.api.v1.matching import get_matching_service  # noqa: E402
from talent_api.api.v1.resumes import get_resume_parser  # noqa: E402
from talent_api.main import app  # noqa: E402
from talent_api.parsing.extract import ResumeTextExtractor  # noqa: E402
from talent_api.parsing.ocr import PdfOcr  # noqa: E402
from talent_api.services.career_service import CareerAdvisor  # noqa: E402
from talent_api.services.matching_service import MatchingService  # noqa: E402
from talent_api.services.resume_service import ResumeParser  # noqa: E402

MODEL_ANSWER = json.dumps(
    {
        "firstName": "Jane",
        "lastName": "Doe",
        "email": "jane@example.com",
        "phone": "+49 30 1234",
        "location": "Berlin",
        "yearsExperience": "6+",
        "skills": ["Python", "FastAPI", "PostgreSQL"],
        "links": {"linkedin": "linkedin.com/in/janedoe", "github": "https://github.com/janedoe"},
        "sections": {
            "bioText": "Backend engineer focused on APIs.",
            "experience": [
                {"title": "Backend Engineer", "company": "Acme", "duration": "2019 - 2024", "description": "Billing APIs."}
            ],
            "education": ["BSc Computer Science"],
            "certifications": ["AWS SAA"],
        },
    }
)


def blank_pdf(pages: int) -> bytes:
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=612, height=792)
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


class PageImages:
    def __init__(self, pages: int):
        self.pages = pages

    def render(self, content):
        for index in range(self.pages):
            yield index


class PageReader:
    def __init__(self, texts):
        self.texts = list(texts)
        self.calls = 0

    def recognize(self, image):
        self.calls += 1
        return self.texts[image]


class ApiTestCase(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()


class HealthApiTests(ApiTestCase):
    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy"})


class ResumeApiTests(ApiTestCase):
    def _install_parser(self, llm: ScriptedLLM, reader: PageReader, pages: int, **setting_overrides):
        cfg = make_settings(**setting_overrides)
        http_client = llm.client()
        self.addCleanup(lambda: asyncio.run(http_client.aclose()))
        extractor = ResumeTextExtractor(ocr=PdfOcr(rasterizer=PageImages(pages), recognizer=reader))
        parser = ResumeParser(settings=cfg, extractor=extractor, http_client=http_client)
        app.dependency_overrides[get_resume_parser] = lambda: parser

    def test_scanned_pdf_referral_flow_prefills_form(self):
        llm = ScriptedLLM(
            {
                "model-a": (401, {"error": {"message": "No auth credentials found"}}),
                "model-b": MODEL_ANSWER,
            }
        )
        reader = PageReader(["Jane Doe\nBackend Engineer", "Python FastAPI PostgreSQL"])
        self._install_parser(llm, reader, pages=2, openai_api_key="sk-or-test")

        response = self.client.post(
            "/v1/resumes/parse",
            files={"file": ("jane.pdf", blank_pdf(2), "application/pdf")},
            data={"referral_mode": "true", "referred_for_opportunity": "opp-42"},
        )

        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(reader.calls, 2)
        self.assertEqual(llm.models_called, ["model-a", "model-b"])
        self.assertTrue(body["ocr_used"])
        self.assertEqual(body["pages"], 2)
        self.assertEqual(body["model"], "model-b")
        self.assertEqual(body["attempts"], 2)
        self.assertEqual(body["data"]["years_experience"], 6)

        form = body["form"]
        self.assertEqual(form["first_name"], "Jane")
        self.assertEqual(form["talent_type"], "prospect")
        self.assertEqual(form["source"], "employee_referral")
        self.assertEqual(form["prospect_status"], "available")
        self.assertEqual(form["referred_for_opportunity"], "opp-42")
        self.assertEqual(form["skills"], "Python, FastAPI, PostgreSQL")
        self.assertEqual(form["work_experience"], "• Backend Engineer at Acme (2019 - 2024)\nBilling APIs.")
        self.assertEqual(form["linkedin_url"], "https://linkedin.com/in/janedoe")

        prompt = llm.calls[-1]["body"]["messages"][1]["content"]
        self.assertIn("Jane Doe\nBackend Engineer\nPython FastAPI PostgreSQL", prompt)

    def test_text_resume_direct_application(self):
        llm = ScriptedLLM({"model-a": "Here is the JSON:\n" + MODEL_ANSWER})
        self._install_parser(llm, PageReader([]), pages=0, openai_api_key="sk-or-test")

        response = self.client.post(
            "/v1/resumes/parse",
            files={"file": ("jane.txt", b"Jane Doe, Python developer", "text/plain")},
        )

        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertFalse(body["ocr_used"])
        self.assertEqual(body["source_type"], "txt")
        self.assertEqual(body["form"]["source"], "direct_application")
        self.assertIsNone(body["form"]["prospect_status"])

    def test_missing_key_fails_before_any_work(self):
        llm = ScriptedLLM({"model-a": MODEL_ANSWER})
        reader = PageReader(["text"])
        self._install_parser(llm, reader, pages=1, openai_api_key=None)

        response = self.client.post(
            "/v1/resumes/parse",
            files={"file": ("jane.pdf", blank_pdf(1), "application/pdf")},
        )

        self.assertEqual(response.status_code, 503)
        self.assertIn("API key not configured", response.json()["detail"])
        self.assertEqual(llm.calls, [])
        self.assertEqual(reader.calls, 0)

    def test_unsupported_type_is_rejected(self):
        llm = ScriptedLLM({})
        self._install_parser(llm, PageReader([]), pages=0, openai_api_key="sk-or-test")
        response = self.client.post(
            "/v1/resumes/parse",
            files={"file": ("cv.docx", b"PK\x03\x04", "application/vnd.openxmlformats-officedocument.wordprocessingml.document")},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Please upload a PDF or TXT file")
        self.assertEqual(llm.calls, [])

    def test_oversized_upload_is_rejected(self):
        llm = ScriptedLLM({})
        self._install_parser(
            llm,
            PageReader([]),
            pages=0,
            openai_api_key="sk-or-test",
            resume_max_upload_bytes=1024 * 1024,
        )
        response = self.client.post(
            "/v1/resumes/parse",
            files={"file": ("big.txt", b"a" * (1024 * 1024 + 1), "text/plain")},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "File size must be less than 1MB")

    def test_image_only_pdf_without_ocr_text(self):
        llm = ScriptedLLM({"model-a": MODEL_ANSWER})
        self._install_parser(llm, PageReader(["  "]), pages=1, openai_api_key="sk-or-test")
        response = self.client.post(
            "/v1/resumes/parse",
            files={"file": ("scan.pdf", blank_pdf(1), "application/pdf")},
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("No text content found in PDF", response.json()["detail"])
        self.assertEqual(llm.calls, [])

    def test_all_models_failing_is_a_bad_gateway(self):
        llm = ScriptedLLM({name: (404, {"error": {"message": "missing"}}) for name in ("model-a", "model-b", "model-c")})
        self._install_parser(llm, PageReader([]), pages=0, openai_api_key="sk-or-test")
        response = self.client.post(
            "/v1/resumes/parse",
            files={"file": ("jane.txt", b"Jane Doe", "text/plain")},
        )
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["detail"], "No working models found. Please try again or contact support.")

    def test_unreadable_model_answer_is_a_bad_gateway(self):
        llm = ScriptedLLM({"model-a": "I am unable to parse this resume."})
        self._install_parser(llm, PageReader([]), pages=0, openai_api_key="sk-or-test")
        response = self.client.post(
            "/v1/resumes/parse",
            files={"file": ("jane.txt", b"Jane Doe", "text/plain")},
        )
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["detail"], "Invalid response format from AI")


class CareerApiTests(ApiTestCase):
    def test_mock_tips_and_courses_without_key(self):
        advisor = CareerAdvisor(settings=make_settings())
        app.dependency_overrides[get_career_advisor] = lambda: advisor
        profile = {"skills": ["React"], "work_experience": "2 years", "education": "BSc"}

        tips = self.client.post("/v1/career/tips", json=profile)
        courses = self.client.post("/v1/career/courses", json=profile)

        self.assertEqual(tips.status_code, 200)
        self.assertEqual(tips.json()["source"], "mock")
        self.assertEqual(len(tips.json()["tips"]), 2)
        self.assertEqual(courses.status_code, 200)
        self.assertEqual(len(courses.json()["courses"]), 10)


class MatchingApiTests(ApiTestCase):
    def setUp(self):
        service = MatchingService(settings=make_settings())
        app.dependency_overrides[get_matching_service] = lambda: service
        self.opportunity = {
            "id": "opp-1",
            "title": "Frontend Developer",
            "required_role": "Frontend Developer",
            "description": "React and typescript dashboards.",
        }
        self.talent = {
            "id": "t-1",
            "talent_role": "Frontend Developer",
            "talent_type": "prospect",
            "prospect_status": "available",
            "years_experience": 4,
            "skills": ["React", "TypeScript"],
        }

    def test_score(self):
        response = self.client.post(
            "/v1/matching/score",
            json={"talent": self.talent, "opportunity": self.opportunity, "use_ai": True},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["method"], "rules")
        self.assertTrue(0 <= body["score"] <= 100)

    def test_talents_are_ranked_and_filtered(self):
        other = dict(self.talent, id="t-2", skills=["Excel"], talent_role="Accountant")
        busy = dict(self.talent, id="t-3", prospect_status="rejected")
        response = self.client.post(
            "/v1/matching/talents",
            json={"opportunity": self.opportunity, "talents": [other, busy, self.talent]},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual([item["talent"]["id"] for item in response.json()], ["t-1", "t-2"])

    def test_opportunities_are_ranked(self):
        other = dict(self.opportunity, id="opp-2", title="Data Analyst", required_role="Analyst", description="Excel.")
        response = self.client.post(
            "/v1/matching/opportunities",
            json={"talent": self.talent, "opportunities": [other, self.opportunity]},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual([item["opportunity"]["id"] for item in response.json()], ["opp-1", "opp-2"])

    def test_invalid_payload_is_rejected(self):
        response = self.client.post("/v1/matching/score", json={"talent": {}, "opportunity": {}})
        self.assertEqual(response.status_code, 422)


if __name__ == "__main__":
    unittest.main()
