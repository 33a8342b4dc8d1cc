"""
Minimal Flask API that wires the word-chain turn engine into the browser UI.

Endpoints:
- GET    /                          -> chat page (static)
- GET    /health                    -> liveness probe
- GET    /api/info                  -> game rules and settings shown in the menu
- POST   /api/games                 -> start a game (fetches the welcome line)
- GET    /api/games/<id>            -> current snapshot (state + messages)
- POST   /api/games/<id>/words      -> submit a word and receive the AI reply
- POST   /api/games/<id>/restart    -> start over in the same session
- DELETE /api/games/<id>            -> leave the game (drop the session)

Sessions live in memory only and expire after WORDCHAIN_SESSION_TTL_S of inactivity.
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from flask import Flask, jsonify, request, send_from_directory

from .config import SETTINGS
from .engine import GameNotActiveError, MIN_WORD_LENGTH
from .judge import RemoteJudge
from .session import SessionBusyError, SessionStore

WEBUI_DIR = Path(__file__).resolve().parent / "webui"

app = Flask(__name__, static_folder=str(WEBUI_DIR), static_url_path="/static")

STORE = SessionStore()
JUDGE = RemoteJudge()

GAME_RULES = [
    f"{MIN_WORD_LENGTH}글자 이상의 명사만 사용할 수 있습니다.",
    "두음법칙이 자동으로 적용됩니다. (예: 름 > 음)",
    "표준국어대사전에 등재된 명사만 사용 가능합니다.",
    "한 번 사용한 단어는 다시 사용할 수 없습니다.",
]


def _error(code: str, message: str, status: int):
    return jsonify({"error": code, "message": message}), status


def _cleanup_stale_sessions():
    expired = STORE.cleanup_stale(SETTINGS.session_ttl_s)
    if expired:
        logging.info("Dropped %d idle game sessions", len(expired))


@app.route("/")
def index():
    return send_from_directory(str(WEBUI_DIR), "index.html")


@app.route("/health")
def health():
    return jsonify({"ok": True})


@app.route("/api/info", methods=["GET"])
def game_info():
    return jsonify(
        {
            "title": "AI 끝말잇기",
            "model": JUDGE.label(),
            "difficulty": "보통",
            "min_word_length": MIN_WORD_LENGTH,
            "rules": GAME_RULES,
        }
    )


@app.route("/api/games", methods=["POST"])
def create_game():
    _cleanup_stale_sessions()
    session = STORE.create(JUDGE)
    session.start()
    logging.info("Started game session %s", session.id)
    return jsonify(session.snapshot()), 201


@app.route("/api/games/<game_id>", methods=["GET"])
def get_game(game_id: str):
    session = STORE.get(game_id)
    if not session:
        return _error("not_found", f"Unknown game '{game_id}'.", 404)
    return jsonify(session.snapshot())


@app.route("/api/games/<game_id>/words", methods=["POST"])
def submit_word(game_id: str):
    _cleanup_stale_sessions()
    session = STORE.get(game_id)
    if not session:
        return _error("not_found", f"Unknown game '{game_id}'.", 404)
    data = request.get_json(silent=True) or {}
    word = data.get("word")
    if not isinstance(word, str):
        return _error("word_required", "Request body must include a 'word' string.", 400)
    try:
        appended = session.submit(word)
    except SessionBusyError as exc:
        return _error("session_busy", str(exc), 409)
    except GameNotActiveError as exc:
        return _error("game_not_active", str(exc), 409)
    payload = session.snapshot()
    payload["appended"] = [m.to_dict() for m in appended]
    return jsonify(payload)


@app.route("/api/games/<game_id>/restart", methods=["POST"])
def restart_game(game_id: str):
    session = STORE.get(game_id)
    if not session:
        return _error("not_found", f"Unknown game '{game_id}'.", 404)
    try:
        session.restart()
    except SessionBusyError as exc:
        return _error("session_busy", str(exc), 409)
    return jsonify(session.snapshot())


@app.route("/api/games/<game_id>", methods=["DELETE"])
def leave_game(game_id: str):
    if not STORE.drop(game_id):
        return _error("not_found", f"Unknown game '{game_id}'.", 404)
    return jsonify({"status": "deleted", "id": game_id})


@app.after_request
def add_cors_headers(response):
    response.headers["Access-Control-Allow-Origin"] = request.headers.get("Origin", "*")
    response.headers["Access-Control-Allow-Credentials"] = "true"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, DELETE, OPTIONS"
    # Prevent caching so the UI always sees the freshest game state
    response.headers["Cache-Control"] = "no-store, max-age=0"
    return response


@app.route("/api/<path:path>", methods=["OPTIONS"])
def cors_preflight(path: str):
    return app.make_response(("", 204))


def main():
    parser = argparse.ArgumentParser(description="LLM word chain (끝말잇기) web server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    if not SETTINGS.llm_api_key:
        logging.warning("No API key configured; set WORDCHAIN_LLM_API_KEY or AI_GATEWAY_API_KEY")
    app.run(host=args.host, port=args.port, debug=args.debug, threaded=True)


if __name__ == "__main__":
    main()
