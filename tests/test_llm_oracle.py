import random
import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import chess

from llmchess_arena import llm_client
from llmchess_arena.errors import OracleFailure
from llmchess_arena.llm_oracle import LLMOracle, parse_move_reply
from llmchess_arena.models import Color
from llmchess_arena.oracle import MoveRequest
from llmchess_arena.prompting import build_move_messages, build_move_prompt
from llmchess_arena.random_oracle import RandomOracle


def _request(**kw):
    kw.setdefault("position", chess.STARTING_FEN)
    kw.setdefault("color", Color.WHITE)
    kw.setdefault("legal_moves", ["e4", "d4", "Nf3"])
    return MoveRequest(**kw)


def _chat_response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class PromptTests(unittest.TestCase):
    def test_first_move_prompt(self):
        prompt = build_move_prompt(_request())
        self.assertIn("You are playing chess as white", prompt)
        self.assertIn(f"Current position (FEN): {chess.STARTING_FEN}", prompt)
        self.assertIn("This is the first move.", prompt)
        self.assertIn("Legal moves: e4, d4, Nf3", prompt)
        self.assertNotIn("IMPORTANT", prompt)
        self.assertIn('{"move": "your_move", "reasoning": "brief explanation"}', prompt)

    def test_recent_moves_and_error_context(self):
        prompt = build_move_prompt(_request(recent_moves=["e4", "e5"], error_context='"Ke2" is illegal.'))
        self.assertIn("Recent moves: e4, e5", prompt)
        self.assertIn('IMPORTANT: "Ke2" is illegal.\n\n', prompt)

    def test_messages(self):
        messages = build_move_messages(_request())
        self.assertEqual([m["role"] for m in messages], ["system", "user"])


class ParseReplyTests(unittest.TestCase):
    def test_plain_json(self):
        proposal = parse_move_reply('{"move": "e4", "reasoning": "centre"}')
        self.assertEqual((proposal.move_text, proposal.rationale), ("e4", "centre"))

    def test_fenced_json_with_prose(self):
        text = 'Sure!\n```json\n{"move": " Nf3 ", "reasoning": "develop"}\n```'
        self.assertEqual(parse_move_reply(text).move_text, "Nf3")

    def test_rejects_incomplete_replies(self):
        self.assertIsNone(parse_move_reply(""))
        self.assertIsNone(parse_move_reply("e4"))
        self.assertIsNone(parse_move_reply('{"move": "e4"}'))
        self.assertIsNone(parse_move_reply('{"move": 4, "reasoning": "x"}'))
        self.assertIsNone(parse_move_reply('{"move": "e4", "reasoning": '))


class RandomOracleTests(unittest.TestCase):
    def test_picks_a_legal_move(self):
        request = _request()
        proposal = RandomOracle(random.Random(0)).request_move("w", request)
        self.assertIn(proposal.move_text, request.legal_moves)
        self.assertEqual(proposal.rationale, "Random legal move.")


class LLMOracleTests(unittest.TestCase):
    def test_requests_participant_model(self):
        with patch("llmchess_arena.llm_client.complete", return_value='{"move": "d4", "reasoning": "solid"}') as complete:
            proposal = LLMOracle(timeout_s=5).request_move("openai/gpt-5.1-thinking", _request())
        self.assertEqual(proposal.move_text, "d4")
        _, kwargs = complete.call_args
        self.assertEqual(kwargs["model"], "openai/gpt-5.1-thinking")
        self.assertEqual(kwargs["timeout_s"], 5)

    def test_unparseable_reply_is_a_failure(self):
        with patch("llmchess_arena.llm_client.complete", return_value="I would play e4"):
            with self.assertRaises(OracleFailure):
                LLMOracle().request_move("m", _request())

    def test_transport_error_is_a_failure(self):
        client = MagicMock()
        client.chat.completions.create.side_effect = TimeoutError("read timeout")
        with patch("llmchess_arena.llm_client._client", return_value=client):
            with self.assertRaises(OracleFailure):
                llm_client.complete([{"role": "user", "content": "hi"}], model="m")

    def test_empty_reply_is_a_failure(self):
        client = MagicMock()
        client.chat.completions.create.return_value = _chat_response("")
        with patch("llmchess_arena.llm_client._client", return_value=client):
            with self.assertRaises(OracleFailure):
                llm_client.complete([{"role": "user", "content": "hi"}], model="m")

    def test_reply_text(self):
        client = MagicMock()
        client.chat.completions.create.return_value = _chat_response('  {"move": "e4", "reasoning": "x"}\n')
        with patch("llmchess_arena.llm_client._client", return_value=client):
            text = llm_client.complete([{"role": "user", "content": "hi"}], model="m", timeout_s=3)
        self.assertEqual(text, '{"move": "e4", "reasoning": "x"}')
        self.assertEqual(client.chat.completions.create.call_args.kwargs["timeout"], 3)


if __name__ == "__main__":
    unittest.main()
