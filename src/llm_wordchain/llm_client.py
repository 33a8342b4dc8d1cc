from __future__ import annotations
"""
LLM client facade over the Vercel AI Gateway (OpenAI-compatible transport; configurable base URL).

The rest of the code should not care which SDK is in use. This module talks to
the Gateway with `model` + `messages` and returns raw text responses. One attempt
per call: errors propagate to the caller, which decides how to report them.
"""
from functools import lru_cache
from typing import Any, Dict, List, Optional
import logging

from openai import OpenAI

from .config import SETTINGS

log = logging.getLogger("llm_client")


def _build_client(http_client=None) -> OpenAI:
    # max_retries=0: the SDK retries twice by default
    return OpenAI(
        api_key=SETTINGS.llm_api_key or None,
        base_url=SETTINGS.api_base or None,
        max_retries=0,
        http_client=http_client,
    )


@lru_cache(maxsize=1)
def _client() -> OpenAI:
    # Built on first use so importing the package never requires an API key.
    return _build_client()


def _request_kwargs(model: Optional[str], temperature: Optional[float]) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {"model": model or SETTINGS.model}
    if temperature is not None:
        kwargs["temperature"] = temperature
    if SETTINGS.responses_timeout_s is not None:
        kwargs["timeout"] = SETTINGS.responses_timeout_s
    return kwargs


# ------------------------- Chat wrappers -------------------------
def complete_text(messages: List[Dict[str, str]], model: Optional[str] = None, temperature: Optional[float] = None) -> str:
    """Send a chat conversation and return the assistant's free-text reply ('' if none)."""
    rsp = _client().chat.completions.create(messages=messages, **_request_kwargs(model, temperature))
    return _extract_text(rsp).strip()


def complete_json(
    messages: List[Dict[str, str]],
    schema: Dict[str, Any],
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    schema_name: str = "response",
) -> str:
    """Send a chat conversation constrained to a JSON schema and return the raw JSON text."""
    rsp = _client().chat.completions.create(
        messages=messages,
        response_format={
            "type": "json_schema",
            "json_schema": {"name": schema_name, "schema": schema},
        },
        **_request_kwargs(model, temperature),
    )
    return _extract_text(rsp).strip()


def _extract_text(rsp) -> str:
    try:
        if hasattr(rsp, "choices") and rsp.choices:
            msg = rsp.choices[0].message
            content = getattr(msg, "content", None)
            if isinstance(content, str):
                return content
            if isinstance(content, list):
                parts = []
                for c in content:
                    if isinstance(c, dict):
                        if c.get("type") == "text" and isinstance(c.get("text"), str):
                            parts.append(c["text"])
                        continue
                    t = getattr(c, "text", None)
                    if isinstance(t, str):
                        parts.append(t)
                if parts:
                    return "\n".join(parts)
    except (AttributeError, IndexError, TypeError):
        log.exception("Failed to extract text from response")
    return ""
