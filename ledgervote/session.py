from ledgervote.storage import StateDriver, make_key

SESSION = 'session'
VOTERS = 'voters'
HISTORY = 'history'

IDLE = 'idle'
OPEN = 'open'
CLOSED = 'closed'


class ElectionSession:
    def __init__(self, active=False, start_height=0, end_height=0, quorum=0, threshold_bps=0,
                 whitelist_enabled=False, total_votes=0, total_weighted_votes=0, winner=None,
                 finalized=False, finalized_at=None, number=0):
        self.active = active
        self.start_height = start_height
        self.end_height = end_height
        self.quorum = quorum
        self.threshold_bps = threshold_bps
        self.whitelist_enabled = whitelist_enabled
        self.total_votes = total_votes
        self.total_weighted_votes = total_weighted_votes
        self.winner = winner
        self.finalized = finalized
        self.finalized_at = finalized_at
        self.number = number

    @property
    def status(self) -> str:
        if self.active:
            return OPEN
        if self.finalized:
            return CLOSED
        return IDLE

    def to_dict(self) -> dict:
        return {
            'active': self.active,
            'start_height': self.start_height,
            'end_height': self.end_height,
            'quorum': self.quorum,
            'threshold_bps': self.threshold_bps,
            'whitelist_enabled': self.whitelist_enabled,
            'total_votes': self.total_votes,
            'total_weighted_votes': self.total_weighted_votes,
            'winner': self.winner,
            'finalized': self.finalized,
            'finalized_at': self.finalized_at,
            'number': self.number
        }

    @classmethod
    def from_dict(cls, d: dict):
        return cls(**d)


class VoterRecord:
    def __init__(self, vk: str, weight: int, candidate: str, height: int, voted: bool = True):
        self.vk = vk
        self.voted = voted
        self.weight = weight
        self.candidate = candidate
        self.height = height

    def to_dict(self) -> dict:
        return {
            'vk': self.vk,
            'voted': self.voted,
            'weight': self.weight,
            'candidate': self.candidate,
            'height': self.height
        }

    @classmethod
    def from_dict(cls, d: dict):
        return cls(**d)


class SessionStore:
    def __init__(self, driver: StateDriver):
        self.driver = driver

    def load(self) -> ElectionSession:
        s = self.driver.get(make_key(SESSION, 'current'))
        if s is None:
            return ElectionSession()
        return ElectionSession.from_dict(s)

    def save(self, session: ElectionSession):
        self.driver.set(make_key(SESSION, 'current'), session.to_dict())

    def voter(self, vk: str) -> VoterRecord:
        v = self.driver.get(make_key(VOTERS, 'records', [vk]))
        if v is None:
            return None
        return VoterRecord.from_dict(v)

    def save_voter(self, record: VoterRecord):
        self.driver.set(make_key(VOTERS, 'records', [record.vk]), record.to_dict())

    def clear_voters(self):
        for key in self.driver.keys(make_key(VOTERS, 'records', [''])):
            self.driver.delete(key)


class VoteHistory:
    '''
    Append-only log of every vote cast, across all sessions.
    '''
    def __init__(self, driver: StateDriver):
        self.driver = driver

    def count(self) -> int:
        return self.driver.get(make_key(HISTORY, 'count'), 0)

    def append(self, session: int, record: VoterRecord):
        n = self.count()
        entry = record.to_dict()
        entry['session'] = session

        self.driver.set(make_key(HISTORY, 'entries', [n]), entry)
        self.driver.set(make_key(HISTORY, 'count'), n + 1)

    def get(self, n: int) -> dict:
        return self.driver.get(make_key(HISTORY, 'entries', [n]))
