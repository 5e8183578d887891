from ledgervote.crypto.wallet import Wallet
from ledgervote.engine import ElectionEngine
from ledgervote.errors import (
    QuorumNotMet, SessionNotActive, SessionStillActive, NotAuthorized, ArithmeticOverflow
)
from ledgervote.finalizer import pick_index, winner_share_bps
from unittest import TestCase


class FixedEntropy:
    SEED = 7

    def __init__(self, *args):
        pass

    def seed(self):
        return self.SEED


class ExplodingEntropy:
    def __init__(self, *args):
        pass

    def seed(self):
        raise AssertionError('Tie-break seed requested without a tie.')


class ElectionFixture:
    def make_engine(self, entropy_class=None):
        self.admin = Wallet().verifying_key
        if entropy_class is None:
            return ElectionEngine(owner=self.admin)
        return ElectionEngine(owner=self.admin, entropy_class=entropy_class)

    def register(self, engine, n):
        candidates = [Wallet().verifying_key for _ in range(n)]
        for c in candidates:
            engine.register_candidate(c)
        return candidates

    def vote(self, engine, candidate, weight):
        voter = Wallet().verifying_key
        if weight > 0:
            engine.stake(voter, weight)
        engine.cast_weighted_vote(voter, candidate)
        return voter


class TestSelectionHelpers(TestCase):
    def test_pick_index_is_seed_mod_k(self):
        for seed in [0, 1, 7, 999_999, 5_999_994]:
            for k in [1, 2, 3, 7]:
                self.assertEqual(pick_index(seed, k), seed % k)

    def test_share_truncates(self):
        self.assertEqual(winner_share_bps(2, 3), 6666)
        self.assertEqual(winner_share_bps(10, 25), 4000)
        self.assertEqual(winner_share_bps(1, 1), 10_000)


class TestElectionFinalizer(TestCase, ElectionFixture):
    def test_scenario_a_tie_break_between_leaders(self):
        engine = self.make_engine()
        c1, c2, c3 = self.register(engine, 3)

        engine.start_session(self.admin, duration_blocks=5, quorum=3, threshold_bps=4000)
        self.vote(engine, c1, 10)
        self.vote(engine, c2, 10)
        self.vote(engine, c3, 5)
        engine.advance(6)

        self.assertEqual(engine.session().total_weighted_votes, 25)
        self.assertEqual(engine.scanner.tied_at(engine.scanner.max_weighted_votes()), [c1, c2])

        seed = engine.entropy.seed()
        winner = engine.finalize(self.admin)

        self.assertEqual(winner, [c1, c2][seed % 2])
        self.assertFalse(engine.session().active)

    def test_scenario_b_single_candidate_wins_without_randomness(self):
        engine = self.make_engine(entropy_class=ExplodingEntropy)
        c, = self.register(engine, 1)

        engine.start_session(self.admin, duration_blocks=1, quorum=1, threshold_bps=5000)
        self.vote(engine, c, 1)
        engine.advance(2)

        self.assertEqual(engine.finalize(self.admin), c)

    def test_scenario_c_quorum_not_met_changes_nothing(self):
        engine = self.make_engine()
        c, = self.register(engine, 1)

        engine.start_session(self.admin, duration_blocks=1, quorum=10, threshold_bps=0)
        for _ in range(3):
            self.vote(engine, c, 1)
        engine.advance(2)

        before = engine.driver.snapshot()

        with self.assertRaises(QuorumNotMet):
            engine.finalize(self.admin)

        self.assertEqual(engine.driver.snapshot(), before)
        self.assertTrue(engine.session().active)

    def test_scenario_d_zero_weight_votes_close_without_winner(self):
        engine = self.make_engine(entropy_class=ExplodingEntropy)
        c1, c2 = self.register(engine, 2)

        engine.start_session(self.admin, duration_blocks=1, quorum=2, threshold_bps=0)
        self.vote(engine, c1, 0)
        self.vote(engine, c2, 0)
        engine.advance(2)

        self.assertEqual(engine.session().total_votes, 2)
        self.assertIsNone(engine.finalize(self.admin))

        status = engine.session_status()
        self.assertEqual(status['status'], 'closed')
        self.assertFalse(status['active'])

    def test_below_threshold_closes_without_winner(self):
        engine = self.make_engine()
        c1, c2 = self.register(engine, 2)

        engine.start_session(self.admin, duration_blocks=1, quorum=0, threshold_bps=7000)
        self.vote(engine, c1, 6)
        self.vote(engine, c2, 4)
        engine.advance(2)

        self.assertIsNone(engine.finalize(self.admin))
        self.assertEqual(engine.session_status()['status'], 'closed')

    def test_threshold_compare_uses_truncated_share(self):
        for threshold, expected_wins in [(6666, True), (6667, False)]:
            engine = self.make_engine()
            c1, c2 = self.register(engine, 2)

            engine.start_session(self.admin, duration_blocks=1, quorum=0, threshold_bps=threshold)
            self.vote(engine, c1, 2)
            self.vote(engine, c2, 1)
            engine.advance(2)

            winner = engine.finalize(self.admin)
            self.assertEqual(winner == c1, expected_wins)

    def test_tie_break_is_order_sensitive(self):
        a = Wallet().verifying_key
        b = Wallet().verifying_key

        winners = []
        for order in [(a, b), (b, a)]:
            engine = self.make_engine(entropy_class=FixedEntropy)
            for c in order:
                engine.register_candidate(c)

            engine.start_session(self.admin, duration_blocks=1, quorum=0, threshold_bps=0)
            self.vote(engine, a, 3)
            self.vote(engine, b, 3)
            engine.advance(2)

            winners.append(engine.finalize(self.admin))

        # Seed 7 picks index 1 of the registration ordered tie.
        self.assertEqual(winners, [b, a])

    def test_finalize_before_window_closes_raises(self):
        engine = self.make_engine()
        c, = self.register(engine, 1)

        engine.start_session(self.admin, duration_blocks=5, quorum=0, threshold_bps=0)
        engine.advance(5)

        with self.assertRaises(SessionStillActive):
            engine.finalize(self.admin)

    def test_finalize_by_non_admin_raises(self):
        engine = self.make_engine()
        self.register(engine, 1)

        engine.start_session(self.admin, duration_blocks=1, quorum=0, threshold_bps=0)
        engine.advance(2)

        with self.assertRaises(NotAuthorized):
            engine.finalize(Wallet().verifying_key)

    def test_finalize_without_session_raises(self):
        engine = self.make_engine()

        with self.assertRaises(SessionNotActive):
            engine.finalize(self.admin)

    def test_finalize_is_terminal_and_winner_is_stable(self):
        engine = self.make_engine()
        c1, c2 = self.register(engine, 2)

        engine.start_session(self.admin, duration_blocks=1, quorum=0, threshold_bps=0)
        self.vote(engine, c2, 5)
        engine.advance(2)

        self.assertEqual(engine.finalize(self.admin), c2)

        with self.assertRaises(SessionNotActive):
            engine.finalize(self.admin)

        engine.advance(10)
        for _ in range(3):
            self.assertEqual(engine.winner(), c2)
            self.assertEqual(engine.analytics()['winner'], c2)

    def test_overflow_fails_whole_finalization(self):
        engine = self.make_engine()
        c, = self.register(engine, 1)

        engine.start_session(self.admin, duration_blocks=1, quorum=0, threshold_bps=0)
        self.vote(engine, c, 2 ** 250)
        engine.advance(2)

        before = engine.driver.snapshot()

        with self.assertRaises(ArithmeticOverflow):
            engine.finalize(self.admin)

        self.assertEqual(engine.driver.snapshot(), before)
        self.assertTrue(engine.session().active)
        self.assertIsNone(engine.winner())
