"""
Turn engine: pure transitions over GameState.

- check_candidate: the two local guards (length, repeat) before any remote call.
- resolve_verdict: fold one judge Verdict into the next state and chat messages.
- submit: guards + judge + resolution in one step, for callers that do not
  need to release a lock around the remote call.
- start / restart: game (re)initialisation.

Word legality itself (dictionary, starting character, 두음법칙) is entirely
the judge's call; nothing here second-guesses it.
"""
from __future__ import annotations

import re
from typing import List, Optional, Protocol, Sequence, Tuple

from .models import EndReason, GameState, Message, Sender, TurnResult, Verdict

MIN_WORD_LENGTH = 2

TOO_SHORT_TEXT = "두 글자 이상의 단어를 입력해주세요!"
DUPLICATE_TEXT = "'{word}'(은)는 이미 사용된 단어입니다."
INVALID_DEFAULT_TEXT = "유효하지 않은 단어입니다."
SURRENDER_DEFAULT_TEXT = "제가 졌습니다! 대단하시네요 🎉"
AI_TURN_DEFAULT_TEXT = "제 턴입니다!"
RESTART_TEXT = "새 게임을 시작합니다! 단어를 입력해주세요."

_WS_RE = re.compile(r"\s+")


class GameNotActiveError(RuntimeError):
    """Raised when a word is submitted to a game that is not being played."""


class Judge(Protocol):
    def judge(self, candidate: str, prior_word: Optional[str], history: Sequence[str]) -> Verdict: ...


def normalize_candidate(raw: str) -> str:
    """Trim and drop all whitespace: '  이 름 ' -> '이름'."""
    return _WS_RE.sub("", raw or "")


def initial_state() -> GameState:
    return GameState()


def start(state: GameState, welcome_text: str) -> TurnResult:
    """Welcome received: the game is on."""
    return TurnResult(state.evolve(is_playing=True), [Message(welcome_text, Sender.AI)])


def restart() -> TurnResult:
    return TurnResult(GameState(is_playing=True), [Message(RESTART_TEXT, Sender.SYSTEM)])


def check_candidate(raw: str, state: GameState) -> Tuple[Optional[str], List[Message]]:
    """Run the local guards.

    Returns (word, [USER message]) when the word should go to the judge, or
    (None, [SYSTEM message]) when it was rejected locally.
    """
    if not state.is_playing:
        raise GameNotActiveError("game is not in progress")
    word = normalize_candidate(raw)
    if len(word) < MIN_WORD_LENGTH:
        return None, [Message(TOO_SHORT_TEXT, Sender.SYSTEM)]
    if word in state.history:
        return None, [Message(DUPLICATE_TEXT.format(word=word), Sender.SYSTEM)]
    return word, [Message(word, Sender.USER, word=word)]


def resolve_verdict(word: str, state: GameState, verdict: Verdict) -> TurnResult:
    if not verdict.valid:
        # turn not consumed; the player may retry
        return TurnResult(state, [Message(verdict.reason or INVALID_DEFAULT_TEXT, Sender.AI)])

    if verdict.win:
        ended = state.evolve(is_playing=False, end_reason=EndReason.PLAYER_WIN)
        return TurnResult(ended, [Message(verdict.reason or SURRENDER_DEFAULT_TEXT, Sender.AI)])

    if verdict.word:
        ai_word = verdict.word
        nxt = state.evolve(
            history=state.history | {word, ai_word},
            last_word=ai_word,
            last_char=verdict.normalized_start_char or ai_word[-1],
            turn_count=state.turn_count + 1,
        )
        msg = Message(verdict.reason or AI_TURN_DEFAULT_TEXT, Sender.AI, word=ai_word, definition=verdict.definition)
        return TurnResult(nxt, [msg])

    # valid, but the judge neither played nor surrendered: no-op turn
    if verdict.reason:
        return TurnResult(state, [Message(verdict.reason, Sender.AI)])
    return TurnResult(state, [])


def submit(raw: str, state: GameState, judge: Judge) -> TurnResult:
    word, messages = check_candidate(raw, state)
    if word is None:
        return TurnResult(state, messages)
    verdict = judge.judge(word, state.last_word, sorted(state.history))
    resolved = resolve_verdict(word, state, verdict)
    return TurnResult(resolved.state, messages + resolved.messages)
