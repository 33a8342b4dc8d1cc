import json
import unittest
from unittest.mock import patch

from llm_wordchain import server
from llm_wordchain.session import SessionStore


def _reply(**payload) -> str:
    return json.dumps(payload, ensure_ascii=False)


class ServerTests(unittest.TestCase):
    def setUp(self):
        self.store_patch = patch.object(server, "STORE", SessionStore())
        self.store_patch.start()
        self.addCleanup(self.store_patch.stop)
        self.client = server.app.test_client()

    def _create(self) -> dict:
        with patch("llm_wordchain.judge.complete_text", return_value="끝말잇기 한 판 해요!"):
            rsp = self.client.post("/api/games")
        self.assertEqual(rsp.status_code, 201)
        return rsp.get_json()

    def test_create_game_returns_welcome_snapshot(self):
        snap = self._create()
        self.assertEqual(snap["phase"], "AWAITING_INPUT")
        self.assertTrue(snap["state"]["isPlaying"])
        self.assertEqual(snap["messages"][0]["text"], "끝말잇기 한 판 해요!")
        self.assertEqual(snap["messages"][0]["sender"], "AI")

    def test_word_round_trip_and_restart(self):
        game_id = self._create()["id"]
        reply = _reply(valid=True, word="이름", definition="사람을 부르는 말", reason="좋은 단어네요")
        with patch("llm_wordchain.judge.complete_json", return_value=reply):
            rsp = self.client.post(f"/api/games/{game_id}/words", json={"word": "름이"})
        self.assertEqual(rsp.status_code, 200)
        body = rsp.get_json()
        self.assertEqual(body["state"]["turnCount"], 1)
        self.assertEqual(body["requiredChar"], "름")
        self.assertEqual([m["sender"] for m in body["appended"]], ["USER", "AI"])

        rsp = self.client.post(f"/api/games/{game_id}/words", json={"word": "이름"})
        body = rsp.get_json()
        self.assertEqual(body["appended"][0]["sender"], "SYSTEM")
        self.assertEqual(body["state"]["turnCount"], 1)

        rsp = self.client.post(f"/api/games/{game_id}/restart")
        body = rsp.get_json()
        self.assertEqual(body["state"]["turnCount"], 0)
        self.assertEqual(len(body["messages"]), 1)

    def test_surrender_then_submission_conflicts(self):
        game_id = self._create()["id"]
        with patch("llm_wordchain.judge.complete_json", return_value=_reply(valid=True, win=True, reason="항복!")):
            body = self.client.post(f"/api/games/{game_id}/words", json={"word": "늄늄"}).get_json()
        self.assertEqual(body["phase"], "ENDED")
        self.assertEqual(body["state"]["endReason"], "PLAYER_WIN")

        rsp = self.client.post(f"/api/games/{game_id}/words", json={"word": "사과"})
        self.assertEqual(rsp.status_code, 409)
        self.assertEqual(rsp.get_json()["error"], "game_not_active")

    def test_missing_word_and_unknown_game(self):
        game_id = self._create()["id"]
        rsp = self.client.post(f"/api/games/{game_id}/words", json={})
        self.assertEqual(rsp.status_code, 400)
        self.assertEqual(rsp.get_json()["error"], "word_required")
        self.assertEqual(self.client.get("/api/games/nope").status_code, 404)
        self.assertEqual(self.client.post("/api/games/nope/words", json={"word": "사과"}).status_code, 404)

    def test_leave_game_drops_session(self):
        game_id = self._create()["id"]
        self.assertEqual(self.client.delete(f"/api/games/{game_id}").status_code, 200)
        self.assertEqual(self.client.get(f"/api/games/{game_id}").status_code, 404)

    def test_chat_page_wires_ime_guard_info_and_leave(self):
        rsp = self.client.get("/")
        self.assertEqual(rsp.status_code, 200)
        page = rsp.get_data(as_text=True)
        rsp.close()
        self.assertIn('addEventListener("keydown"', page)
        self.assertIn("e.isComposing", page)
        self.assertIn('call("GET", "/api/info")', page)
        self.assertIn('call("DELETE", `/api/games/${gameId}`)', page)

    def test_info_and_cors_headers(self):
        rsp = self.client.get("/api/info")
        self.assertEqual(rsp.status_code, 200)
        self.assertIn("rules", rsp.get_json())
        self.assertEqual(rsp.headers["Cache-Control"], "no-store, max-age=0")
        preflight = self.client.options("/api/games", headers={"Origin": "http://localhost:5173"})
        self.assertLess(preflight.status_code, 300)
        self.assertEqual(preflight.headers["Access-Control-Allow-Origin"], "http://localhost:5173")
        self.assertIn("DELETE", preflight.headers["Access-Control-Allow-Methods"])


if __name__ == "__main__":
    unittest.main()
