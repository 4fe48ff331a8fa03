import os
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from talent_api.core.config import DEFAULT_OPENROUTER_MODELS, load_settings  # noqa: E402


class SettingsTests(unittest.TestCase):
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            cfg = load_settings()
        self.assertIsNone(cfg.openai_api_key)
        self.assertEqual(cfg.openrouter_models, tuple(DEFAULT_OPENROUTER_MODELS))
        self.assertEqual(cfg.resume_max_upload_bytes, 10 * 1024 * 1024)
        self.assertEqual(cfg.resume_prompt_char_budget, 3000)
        self.assertEqual(cfg.llm_temperature, 0.1)
        self.assertIsNone(cfg.llm_timeout_s)
        self.assertEqual(cfg.ocr_lang, "eng")

    def test_environment_overrides(self):
        env = {
            "OPENAI_API_KEY": "  sk-or-xyz  ",
            "OPENROUTER_MODELS": "a/one, ,b/two",
            "MOCK_DELAY_S": "0",
            "LLM_TIMEOUT_S": "12.5",
            "RATE_LIMIT_ENABLED": "false",
            "RESUME_MAX_TOKENS": "not-a-number",
        }
        with patch.dict(os.environ, env, clear=True):
            cfg = load_settings()
        self.assertEqual(cfg.openai_api_key, "sk-or-xyz")
        self.assertEqual(cfg.openrouter_models, ("a/one", "b/two"))
        self.assertEqual(cfg.mock_delay_s, 0.0)
        self.assertEqual(cfg.llm_timeout_s, 12.5)
        self.assertFalse(cfg.rate_limit_enabled)
        self.assertEqual(cfg.resume_max_tokens, 500)


if __name__ == "__main__":
    unittest.main()
