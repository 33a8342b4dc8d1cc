"""
Configuration and environment loading for LLM Word Chain.

- Loads settings.yml (YAML) from repo root if present; falls back to environment variables.
- Exposes SETTINGS with keys used across the project (API key, gateway URL, model, tuning knobs).
"""
from dataclasses import dataclass
import os
from typing import Any, Callable

import yaml
from dotenv import load_dotenv

load_dotenv()


def _repo_root() -> str:
    # this file: src/llm_wordchain/config.py → repo root is two levels up
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))


def _load_yaml(path: str) -> dict:
    if not os.path.isfile(path):
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return data if isinstance(data, dict) else {}


_cfg = _load_yaml(os.path.join(_repo_root(), "settings.yml"))


def _get(name: str, default: Any, cast: Callable[[Any], Any] | None = None) -> Any:
    val = _cfg.get(name)
    if val is not None and val != "":
        return cast(val) if cast else val
    env = os.environ.get(name)
    if env is not None and env != "":
        return cast(env) if cast else env
    return default


def _optional_float(val: Any) -> float | None:
    return float(val) if val not in (None, "") else None


@dataclass(frozen=True)
class Settings:
    # Auth / endpoint (Vercel AI Gateway, OpenAI-compatible wire format)
    llm_api_key: str
    api_base: str
    model: str

    # Tuning knobs
    temperature: float
    responses_timeout_s: float | None  # None keeps the SDK default
    session_ttl_s: int


SETTINGS = Settings(
    llm_api_key=_get("WORDCHAIN_LLM_API_KEY", _get("AI_GATEWAY_API_KEY", "")),
    api_base=_get("WORDCHAIN_LLM_BASE_URL", _get("AI_GATEWAY_BASE_URL", "https://ai-gateway.vercel.sh/v1")),
    model=_get("WORDCHAIN_MODEL", "google/gemini-2.5-flash"),
    temperature=float(_get("WORDCHAIN_TEMPERATURE", 0.7, cast=float)),
    responses_timeout_s=_get("WORDCHAIN_RESPONSES_TIMEOUT_S", None, cast=_optional_float),
    session_ttl_s=int(_get("WORDCHAIN_SESSION_TTL_S", 3600, cast=int)),
)
