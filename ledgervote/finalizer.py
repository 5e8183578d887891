from ledgervote import config
from ledgervote.access import AccessControl
from ledgervote.errors import SessionNotActive, SessionStillActive, QuorumNotMet
from ledgervote.ledger import Chain
from ledgervote.logger.base import get_logger
from ledgervote.session import ElectionSession, SessionStore
from ledgervote.tally import TallyScanner
from ledgervote.utils import safemath


def pick_index(seed: int, k: int) -> int:
    return safemath.mod(seed, k)


def winner_share_bps(max_weighted: int, total_weighted: int) -> int:
    # Truncates. Rounding here would change outcomes at the threshold boundary.
    return safemath.div(safemath.mul(max_weighted, config.BASIS_POINTS), total_weighted)


class ElectionFinalizer:
    def __init__(self, access: AccessControl, sessions: SessionStore, chain: Chain, scanner: TallyScanner,
                 entropy):
        self.access = access
        self.sessions = sessions
        self.chain = chain
        self.scanner = scanner
        self.entropy = entropy

        self.log = get_logger('ElectionFinalizer')

    def assert_can_finalize(self, signer: str, session: ElectionSession):
        self.access.assert_is_admin(signer)

        if not session.active:
            raise SessionNotActive()

        height = self.chain.height()
        if height <= session.end_height:
            raise SessionStillActive(f'Voting closes after height {session.end_height}, current height is {height}.')

        if session.total_votes < session.quorum:
            raise QuorumNotMet(f'{session.total_votes} votes cast, quorum is {session.quorum}.')

    def select_winner(self, session: ElectionSession) -> str:
        max_weighted = self.scanner.max_weighted_votes()
        if max_weighted == 0:
            self.log.info('No weighted votes were cast. Closing without a winner.')
            return None

        share = winner_share_bps(max_weighted, session.total_weighted_votes)
        if share < session.threshold_bps:
            self.log.info(f'Leading share {share} bps is below the {session.threshold_bps} bps threshold.')
            return None

        tied = self.scanner.tied_at(max_weighted)
        if len(tied) == 1:
            return tied[0]

        seed = self.entropy.seed()
        index = pick_index(seed, len(tied))

        self.log.info(f'{len(tied)} candidates tied at {max_weighted}. Seed {seed} selects index {index}.')

        return tied[index]

    def finalize(self, signer: str) -> ElectionSession:
        session = self.sessions.load()
        self.assert_can_finalize(signer, session)

        session.winner = self.select_winner(session)
        session.active = False
        session.finalized = True
        session.finalized_at = self.chain.height()

        self.sessions.save(session)

        self.log.info(f'Session {session.number} finalized. Winner: {session.winner}')

        return session
