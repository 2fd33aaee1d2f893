import random
import unittest

from llmchess_arena.errors import ConfigError
from llmchess_arena.matchmaker import Matchmaker
from llmchess_arena.memory_store import InMemoryStore
from llmchess_arena.models import STARTING_FEN, Contest, ContestStatus, GameResult
from llmchess_arena.termination import terminate
from tests.fakes import participants


def engaged_ids(store):
    ids = []
    for c in store.list_contests(ContestStatus.ACTIVE):
        ids.extend([c.white_id, c.black_id])
    return ids


class MatchmakerTests(unittest.TestCase):
    def test_full_policy_pairs_everyone_once(self):
        store = InMemoryStore(participants("a", "b", "c", "d", "e", "f"))
        created = Matchmaker(store, policy="full", rng=random.Random(7)).run()

        self.assertEqual(len(created), 3)
        ids = engaged_ids(store)
        self.assertEqual(sorted(ids), ["a", "b", "c", "d", "e", "f"])
        for c in created:
            self.assertNotEqual(c.white_id, c.black_id)
            self.assertEqual(c.position, STARTING_FEN)
            self.assertEqual(c.move_log, "")
            self.assertEqual(c.status, ContestStatus.ACTIVE)

    def test_engaged_participants_are_skipped(self):
        store = InMemoryStore(participants("a", "b", "c", "d"))
        store.insert_contest(Contest(white_id="a", black_id="b"))
        created = Matchmaker(store, rng=random.Random(1)).run()

        self.assertEqual(len(created), 1)
        self.assertEqual({created[0].white_id, created[0].black_id}, {"c", "d"})
        self.assertEqual(len(engaged_ids(store)), len(set(engaged_ids(store))))

    def test_nothing_to_do_when_all_engaged(self):
        store = InMemoryStore(participants("a", "b", "c"))
        store.insert_contest(Contest(white_id="a", black_id="b"))
        self.assertEqual(Matchmaker(store).run(), [])

    def test_completed_contests_free_participants(self):
        store = InMemoryStore(participants("a", "b"))
        contest = store.insert_contest(Contest(white_id="a", black_id="b"))
        terminate(store, contest.id, GameResult.DRAW)
        created = Matchmaker(store).run()
        self.assertEqual(len(created), 1)

    def test_policies_pair_the_same_number(self):
        for policy in ("full", "adjacent"):
            for n in range(2, 8):
                store = InMemoryStore(participants(*"abcdefg"[:n]))
                created = Matchmaker(store, policy=policy, rng=random.Random(n)).run()
                self.assertEqual(len(created), n // 2, f"{policy} with {n} idle")

    def test_adjacent_policy_leaves_odd_one_waiting(self):
        store = InMemoryStore(participants("a", "b", "c", "d", "e"))
        created = Matchmaker(store, policy="adjacent", rng=random.Random(3)).run()
        self.assertEqual(len(created), 2)
        ids = engaged_ids(store)
        self.assertEqual(len(ids), 4)
        self.assertEqual(len(set(ids)), 4)

    def test_repeated_runs_keep_engagement_invariant(self):
        store = InMemoryStore(participants(*"abcdefg"))
        mm = Matchmaker(store, rng=random.Random(11))
        for _ in range(3):
            mm.run()
            ids = engaged_ids(store)
            self.assertEqual(len(ids), len(set(ids)))
        self.assertEqual(len(store.list_contests(ContestStatus.ACTIVE)), 3)

    def test_colors_vary(self):
        whites = set()
        for seed in range(20):
            store = InMemoryStore(participants("a", "b"))
            whites.add(Matchmaker(store, rng=random.Random(seed)).run()[0].white_id)
        self.assertEqual(whites, {"a", "b"})

    def test_unknown_policy(self):
        with self.assertRaises(ConfigError):
            Matchmaker(InMemoryStore(), policy="swiss")


if __name__ == "__main__":
    unittest.main()
