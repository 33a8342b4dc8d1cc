"""
Data types shared by the turn engine, the remote judge and the session layer.

- GameState: immutable snapshot of one game; transitions build a new one.
- Message: one chat line (USER / AI / SYSTEM); append-only.
- Verdict: structured judge response for a single turn.
- Phase: the session's turn-exchange state machine.
"""
from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional


class Sender(str, Enum):
    USER = "USER"
    AI = "AI"
    SYSTEM = "SYSTEM"


class EndReason(str, Enum):
    PLAYER_WIN = "PLAYER_WIN"


class Phase(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    AWAITING_INPUT = "AWAITING_INPUT"
    AWAITING_JUDGEMENT = "AWAITING_JUDGEMENT"
    ENDED = "ENDED"


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Message:
    text: str
    sender: Sender
    word: Optional[str] = None
    definition: Optional[str] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: int = field(default_factory=_now_ms)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "sender": self.sender.value,
            "timestamp": self.timestamp,
            "word": self.word,
            "definition": self.definition,
        }


@dataclass(frozen=True)
class GameState:
    is_playing: bool = False
    history: FrozenSet[str] = frozenset()
    last_word: Optional[str] = None
    last_char: Optional[str] = None
    turn_count: int = 0
    end_reason: Optional[EndReason] = None

    def evolve(self, **changes) -> "GameState":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isPlaying": self.is_playing,
            "history": sorted(self.history),
            "lastWord": self.last_word,
            "lastChar": self.last_char,
            "turnCount": self.turn_count,
            "endReason": self.end_reason.value if self.end_reason else None,
        }


@dataclass(frozen=True)
class Verdict:
    valid: bool
    word: Optional[str] = None
    definition: Optional[str] = None
    reason: Optional[str] = None
    win: Optional[bool] = None
    normalized_start_char: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Verdict":
        """Build a Verdict from the judge's JSON payload; raise ValueError on a malformed one."""
        if not isinstance(data, dict):
            raise ValueError(f"verdict must be a JSON object, got {type(data).__name__}")
        valid = data.get("valid")
        if not isinstance(valid, bool):
            raise ValueError("verdict is missing boolean 'valid'")
        win = data.get("win")
        start_char = data.get("normalizedStartChar") or data.get("dueumLastChar")
        return cls(
            valid=valid,
            word=_clean_str(data.get("word")),
            definition=_clean_str(data.get("definition")),
            reason=_clean_str(data.get("reason")),
            win=win if isinstance(win, bool) else None,
            normalized_start_char=_single_char(start_char),
        )


def _clean_str(val: Any) -> Optional[str]:
    if not isinstance(val, str):
        return None
    val = val.strip()
    return val or None


def _single_char(val: Any) -> Optional[str]:
    # anything but one character ("름→음", "음 (두음법칙)") is dropped
    val = _clean_str(val)
    return val if val is not None and len(val) == 1 else None


@dataclass
class TurnResult:
    """New state plus the messages a transition appends."""

    state: GameState
    messages: List[Message] = field(default_factory=list)
