import os
import unittest
from unittest.mock import patch

from llm_wordchain import config


class ConfigLookupTests(unittest.TestCase):
    def test_yaml_takes_precedence_over_env(self):
        with patch.dict(config._cfg, {"WORDCHAIN_MODEL": "yaml-model"}, clear=True), \
                patch.dict(os.environ, {"WORDCHAIN_MODEL": "env-model"}):
            self.assertEqual(config._get("WORDCHAIN_MODEL", "default"), "yaml-model")

    def test_env_then_default(self):
        with patch.dict(config._cfg, {}, clear=True), patch.dict(os.environ, {"WORDCHAIN_TEMPERATURE": "0.3"}):
            self.assertEqual(config._get("WORDCHAIN_TEMPERATURE", 0.7, cast=float), 0.3)
        with patch.dict(config._cfg, {}, clear=True), patch.dict(os.environ, {}, clear=True):
            self.assertEqual(config._get("WORDCHAIN_TEMPERATURE", 0.7, cast=float), 0.7)

    def test_timeout_is_optional(self):
        self.assertIsNone(config._optional_float(None))
        self.assertIsNone(config._optional_float(""))
        self.assertEqual(config._optional_float("12"), 12.0)

    def test_blank_yaml_value_falls_through_to_env(self):
        for blank in ("", None):
            with patch.dict(config._cfg, {"WORDCHAIN_LLM_API_KEY": blank}, clear=True), \
                    patch.dict(os.environ, {"WORDCHAIN_LLM_API_KEY": "sk-real"}):
                self.assertEqual(config._get("WORDCHAIN_LLM_API_KEY", ""), "sk-real")

    def test_example_settings_do_not_blank_the_api_key(self):
        example = config._load_yaml(os.path.join(config._repo_root(), "settings.example.yml"))
        self.assertIn("WORDCHAIN_MODEL", example)
        with patch.dict(config._cfg, example, clear=True), \
                patch.dict(os.environ, {"WORDCHAIN_LLM_API_KEY": "sk-real"}):
            self.assertEqual(config._get("WORDCHAIN_LLM_API_KEY", ""), "sk-real")


if __name__ == "__main__":
    unittest.main()
