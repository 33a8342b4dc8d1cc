from __future__ import annotations
"""Remote judge: asks the model to validate the user's word and play a counter-word."""
import json
import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .config import SETTINGS
from .llm_client import complete_json, complete_text
from .models import Verdict
from .prompting import RESPONSE_SCHEMA, PromptConfig, build_turn_messages, build_welcome_messages

log = logging.getLogger("judge")

CONNECTION_FAILURE_REASON = "AI 연결에 문제가 발생했습니다. 다시 시도해주세요."
WELCOME_EMPTY_FALLBACK = "안녕하세요! 끝말잇기 한 판 어때요?"
WELCOME_ERROR_FALLBACK = "안녕하세요! 끝말잇기 시작해볼까요?"


def failure_verdict() -> Verdict:
    return Verdict(valid=False, reason=CONNECTION_FAILURE_REASON, win=False)


def _strip_code_fence(raw: str) -> str:
    raw = raw.strip()
    if raw.startswith("```") and raw.endswith("```"):
        inner = raw.split("\n", 1)
        if len(inner) == 2:
            return inner[1].rsplit("\n", 1)[0].strip()
    return raw


def parse_verdict(raw: str) -> Verdict:
    """Parse the judge's raw JSON text. Raises ValueError on empty or malformed replies."""
    cleaned = _strip_code_fence(raw or "")
    if not cleaned:
        raise ValueError("No response from AI")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ValueError(f"judge reply is not JSON: {exc}") from exc
    return Verdict.from_dict(data)


@dataclass
class RemoteJudge:
    model: Optional[str] = None
    temperature: Optional[float] = None
    prompt_cfg: PromptConfig = field(default_factory=PromptConfig)

    def label(self) -> str:
        return self.model or SETTINGS.model

    def judge(self, candidate: str, prior_word: Optional[str], history: Sequence[str]) -> Verdict:
        """Validate the candidate and get the model's reply; never raises."""
        messages = build_turn_messages(candidate, prior_word, history, self.prompt_cfg)
        temperature = SETTINGS.temperature if self.temperature is None else self.temperature
        try:
            raw = complete_json(
                messages,
                RESPONSE_SCHEMA,
                model=self.label(),
                temperature=temperature,
                schema_name="word_chain_verdict",
            )
            verdict = parse_verdict(raw)
        except Exception:  # noqa: BLE001
            log.exception("Judge call failed for %r", candidate)
            return failure_verdict()
        log.info("Judge verdict for %r: valid=%s word=%s win=%s", candidate, verdict.valid, verdict.word, verdict.win)
        return verdict

    def welcome(self) -> str:
        try:
            text = complete_text(build_welcome_messages(self.prompt_cfg), model=self.label())
        except Exception:  # noqa: BLE001
            log.exception("Welcome request failed")
            return WELCOME_ERROR_FALLBACK
        return text or WELCOME_EMPTY_FALLBACK
