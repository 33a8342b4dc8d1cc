from __future__ import annotations
"""
In-memory game sessions: one per browser game.

A session owns the GameState, the append-only chat log and the loading flag
that keeps at most one judge call in flight. The lock is only held while the
state is read or replaced, never across the remote call.
"""
import logging
import threading
import time
import uuid
from typing import Dict, List, Optional

from . import engine
from .engine import GameNotActiveError
from .judge import RemoteJudge
from .models import GameState, Message, Phase


class SessionBusyError(RuntimeError):
    """Raised when a session is asked to act while a judge call is in flight."""


class GameSession:
    def __init__(self, judge: RemoteJudge, session_id: Optional[str] = None):
        self.log = logging.getLogger("GameSession")
        self.id = session_id or f"game_{int(time.time())}_{uuid.uuid4().hex[:6]}"
        self.judge = judge
        self.state: GameState = engine.initial_state()
        self.messages: List[Message] = []
        self.is_loading = False
        self.started = False
        self.created_at = time.time()
        self.updated_at = self.created_at
        self._lock = threading.Lock()

    # --------------- State machine ---------------
    @property
    def phase(self) -> Phase:
        if not self.started:
            return Phase.NOT_STARTED
        if self.is_loading:
            return Phase.AWAITING_JUDGEMENT
        if not self.state.is_playing:
            return Phase.ENDED
        return Phase.AWAITING_INPUT

    def _append(self, messages: List[Message]) -> None:
        self.messages.extend(messages)
        self.updated_at = time.time()

    def _claim(self) -> None:
        if self.is_loading:
            raise SessionBusyError("a judge request is already in flight")
        self.is_loading = True

    # --------------- Actions ---------------
    def start(self) -> None:
        """Fetch the welcome line and open the game. No-op once started."""
        with self._lock:
            if self.started:
                return
            self._claim()
        try:
            welcome = self.judge.welcome()
        finally:
            with self._lock:
                self.is_loading = False
        with self._lock:
            result = engine.start(self.state, welcome)
            self.state = result.state
            self.started = True
            self._append(result.messages)

    def submit(self, text: str) -> List[Message]:
        """Play one human turn; returns the messages appended by it."""
        with self._lock:
            if self.is_loading:
                raise SessionBusyError("a judge request is already in flight")
            if not self.started:
                raise GameNotActiveError("game has not started yet")
            state = self.state
            word, messages = engine.check_candidate(text, state)
            self._append(messages)
            if word is None:
                self.log.info("Session %s rejected %r locally", self.id, text)
                return list(messages)
            self.is_loading = True

        try:
            verdict = self.judge.judge(word, state.last_word, sorted(state.history))
            with self._lock:
                result = engine.resolve_verdict(word, self.state, verdict)
                self.state = result.state
                self._append(result.messages)
        finally:
            with self._lock:
                self.is_loading = False

        if not self.state.is_playing:
            self.log.info("Session %s ended: %s after %d turns", self.id, self.state.end_reason, self.state.turn_count)
        return messages + result.messages

    def restart(self) -> None:
        with self._lock:
            if self.is_loading:
                raise SessionBusyError("cannot restart while a judge request is in flight")
            result = engine.restart()
            self.state = result.state
            self.started = True
            self.messages = []
            self._append(result.messages)

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "id": self.id,
                "phase": self.phase.value,
                "isLoading": self.is_loading,
                "model": self.judge.label(),
                "requiredChar": self.state.last_char if self.state.is_playing else None,
                "state": self.state.to_dict(),
                "messages": [m.to_dict() for m in self.messages],
            }


class SessionStore:
    """Thread-safe registry of live sessions with idle expiry."""

    def __init__(self):
        self._sessions: Dict[str, GameSession] = {}
        self._lock = threading.Lock()

    def create(self, judge: RemoteJudge, session_id: Optional[str] = None) -> GameSession:
        session = GameSession(judge, session_id=session_id)
        with self._lock:
            self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> Optional[GameSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def drop(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def cleanup_stale(self, max_age_s: float) -> List[str]:
        """Drop sessions idle for longer than max_age_s; returns their ids."""
        now = time.time()
        with self._lock:
            expired = [sid for sid, sess in self._sessions.items() if now - sess.updated_at > max_age_s and not sess.is_loading]
            for sid in expired:
                self._sessions.pop(sid, None)
        return expired

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
