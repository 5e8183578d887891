from contextlib import contextmanager

from ledgervote import config
from ledgervote.access import AccessControl, assert_vk_is_valid
from ledgervote.entropy import EntropyAccumulator
from ledgervote.errors import (
    SessionActive, SessionNotActive, NoCandidates, AlreadyVoted, UnknownCandidate, Blacklisted,
    NotWhitelisted, InvalidParameter
)
from ledgervote.finalizer import ElectionFinalizer, winner_share_bps
from ledgervote.formatting import primatives
from ledgervote.ledger import Chain
from ledgervote.logger.base import get_logger
from ledgervote.registry import CandidateRegistry
from ledgervote.session import ElectionSession, SessionStore, VoteHistory, VoterRecord
from ledgervote.staking import StakeLedger
from ledgervote.storage import StateDriver
from ledgervote.tally import TallyScanner
from ledgervote.utils import safemath
from ledgervote.weights import WeightCalculator


class ElectionEngine:
    '''
    Owns every piece of election state through a single StateDriver. Each public mutating operation runs as
    one transaction: its writes are committed if it returns and discarded if it raises.
    '''
    def __init__(self, owner: str = None, driver: StateDriver = None, entropy_class=EntropyAccumulator,
                 capacity: int = config.CANDIDATE_CAPACITY):
        self.log = get_logger('ElectionEngine')
        self.driver = driver if driver is not None else StateDriver()

        self.chain = Chain(driver=self.driver)
        self.access = AccessControl(driver=self.driver)
        self.stakes = StakeLedger(driver=self.driver)
        self.weights = WeightCalculator(stakes=self.stakes)
        self.registry = CandidateRegistry(driver=self.driver, capacity=capacity)
        self.sessions = SessionStore(driver=self.driver)
        self.history = VoteHistory(driver=self.driver)
        self.scanner = TallyScanner(registry=self.registry)
        self.entropy = entropy_class(self.chain, self.sessions, self.registry, self.history)
        self.finalizer = ElectionFinalizer(
            access=self.access,
            sessions=self.sessions,
            chain=self.chain,
            scanner=self.scanner,
            entropy=self.entropy
        )

        if owner is not None:
            with self.transaction():
                self.access.seed(owner)

    def refresh(self):
        self.driver.refresh()

    @contextmanager
    def transaction(self):
        self.driver.clear_pending_state()
        self.driver.refresh()
        try:
            yield
        except Exception as e:
            self.driver.clear_pending_state()
            self.log.warning(f'Operation failed, no state changed: {type(e).__name__}: {e}')
            raise

        self.driver.commit()

    # Ledger

    def advance(self, blocks: int = 1) -> dict:
        if type(blocks) != int or blocks <= 0:
            raise InvalidParameter('Must advance by a positive number of blocks.')

        with self.transaction():
            return self.chain.advance(blocks)

    def append_block(self, block_hash: str = None) -> dict:
        with self.transaction():
            return self.chain.append(block_hash=block_hash)

    # Access control

    def add_admin(self, signer: str, vk: str):
        with self.transaction():
            self.access.add_admin(signer, vk)

    def remove_admin(self, signer: str, vk: str):
        with self.transaction():
            self.access.remove_admin(signer, vk)

    def blacklist(self, signer: str, vk: str):
        with self.transaction():
            self.access.blacklist(signer, vk)

    def unblacklist(self, signer: str, vk: str):
        with self.transaction():
            self.access.unblacklist(signer, vk)

    def whitelist(self, signer: str, vk: str):
        with self.transaction():
            self.access.whitelist(signer, vk)

    def unwhitelist(self, signer: str, vk: str):
        with self.transaction():
            self.access.unwhitelist(signer, vk)

    # Staking

    def stake(self, signer: str, amount: int):
        with self.transaction():
            self.stakes.stake(signer, amount)

    def unstake(self, signer: str, amount: int):
        with self.transaction():
            self.stakes.unstake(signer, amount)

    def delegate(self, signer: str, to: str):
        with self.transaction():
            self.assert_not_blacklisted(signer)
            self.stakes.delegate(signer, to)

    def undelegate(self, signer: str):
        with self.transaction():
            self.stakes.undelegate(signer)

    def weight_of(self, vk: str) -> int:
        return self.weights.weight(vk)

    # Election

    def assert_not_blacklisted(self, vk: str):
        if self.access.is_blacklisted(vk):
            raise Blacklisted(f'{vk} is blacklisted.')

    def register_candidate(self, signer: str) -> int:
        with self.transaction():
            assert_vk_is_valid(signer)
            self.assert_not_blacklisted(signer)

            return self.registry.register(
                vk=signer,
                height=self.chain.height(),
                stake=self.stakes.stake_of(signer),
                session_active=self.sessions.load().active
            )

    def verify_candidate(self, signer: str, candidate: str):
        with self.transaction():
            self.access.assert_is_admin(signer)
            self.registry.verify(candidate)

    def start_session(self, signer: str, duration_blocks: int, quorum: int, threshold_bps: int,
                      enable_whitelist: bool = False) -> ElectionSession:
        with self.transaction():
            self.access.assert_is_admin(signer)

            previous = self.sessions.load()
            if previous.active:
                raise SessionActive()

            if self.registry.size() == 0:
                raise NoCandidates()

            if not primatives.number_is_formatted(duration_blocks) or duration_blocks == 0:
                raise InvalidParameter('Duration must be a positive number of blocks.')

            if not primatives.number_is_formatted(quorum):
                raise InvalidParameter('Quorum must be a non-negative integer.')

            if not primatives.number_is_formatted(threshold_bps) or threshold_bps > config.BASIS_POINTS:
                raise InvalidParameter(f'Threshold must be between 0 and {config.BASIS_POINTS} basis points.')

            self.registry.reset_tallies()
            self.sessions.clear_voters()

            height = self.chain.height()
            session = ElectionSession(
                active=True,
                start_height=height,
                end_height=safemath.add(height, duration_blocks),
                quorum=quorum,
                threshold_bps=threshold_bps,
                whitelist_enabled=bool(enable_whitelist),
                number=previous.number + 1
            )
            self.sessions.save(session)

            self.log.info(
                f'Session {session.number} open from height {session.start_height} to {session.end_height}. '
                f'Quorum {quorum}, threshold {threshold_bps} bps.'
            )

            return session

    def cast_weighted_vote(self, signer: str, candidate: str) -> VoterRecord:
        with self.transaction():
            assert_vk_is_valid(signer)
            assert_vk_is_valid(candidate)

            session = self.sessions.load()
            height = self.chain.height()

            if not session.active or height > session.end_height:
                raise SessionNotActive('Voting window is not open.')

            self.assert_not_blacklisted(signer)

            if session.whitelist_enabled and not self.access.is_whitelisted(signer):
                raise NotWhitelisted(f'{signer} is not whitelisted.')

            if self.sessions.voter(signer) is not None:
                raise AlreadyVoted(f'{signer} already voted in session {session.number}.')

            if candidate not in self.registry:
                raise UnknownCandidate(f'{candidate} is not a registered candidate.')

            weight = self.weights.weight(signer)
            self.registry.record_vote(candidate, weight)

            session.total_votes = safemath.add(session.total_votes, 1)
            session.total_weighted_votes = safemath.add(session.total_weighted_votes, weight)
            self.sessions.save(session)

            record = VoterRecord(vk=signer, weight=weight, candidate=candidate, height=height)
            self.sessions.save_voter(record)
            self.history.append(session.number, record)

            self.log.debug(f'{signer} cast {weight} for {candidate}.')

            return record

    def finalize(self, signer: str) -> str:
        with self.transaction():
            return self.finalizer.finalize(signer).winner

    # Readers

    def session(self) -> ElectionSession:
        return self.sessions.load()

    def session_status(self) -> dict:
        session = self.sessions.load()
        status = session.to_dict()
        status['status'] = session.status
        status['height'] = self.chain.height()
        status['candidates'] = self.registry.size()
        return status

    def winner(self) -> str:
        return self.sessions.load().winner

    def candidate_detail(self, vk: str) -> dict:
        candidate = self.registry.find(vk)
        if candidate is None:
            return None
        return candidate.to_dict()

    def candidates(self) -> list:
        return [c.to_dict() for c in self.registry]

    def voter_record(self, vk: str) -> dict:
        record = self.sessions.voter(vk)
        if record is None:
            return None
        return record.to_dict()

    def analytics(self) -> dict:
        session = self.sessions.load()
        standings = sorted(self.registry, key=lambda c: (-c.weighted_votes, c.index))

        leader_share = 0
        if len(standings) > 0 and session.total_weighted_votes > 0:
            leader_share = winner_share_bps(standings[0].weighted_votes, session.total_weighted_votes)

        return {
            'session': session.number,
            'status': session.status,
            'height': self.chain.height(),
            'total_votes': session.total_votes,
            'total_weighted_votes': session.total_weighted_votes,
            'candidates': self.registry.size(),
            'history': self.history.count(),
            'leader_share_bps': leader_share,
            'standings': [
                {'vk': c.vk, 'votes': c.votes, 'weighted_votes': c.weighted_votes} for c in standings
            ],
            'winner': session.winner
        }
