from ledgervote import config
from ledgervote.errors import AlreadyRegistered, CapacityExceeded, SessionActive, UnknownCandidate
from ledgervote.logger.base import get_logger
from ledgervote.storage import StateDriver, make_key
from ledgervote.utils import safemath

REGISTRY = 'registry'


class Candidate:
    def __init__(self, vk: str, votes: int = 0, weighted_votes: int = 0, registered_at: int = 0,
                 verified: bool = False, stake: int = 0, index: int = 0):
        self.vk = vk
        self.votes = votes
        self.weighted_votes = weighted_votes
        self.registered_at = registered_at
        self.verified = verified
        self.stake = stake
        self.index = index

    def to_dict(self) -> dict:
        return {
            'vk': self.vk,
            'votes': self.votes,
            'weighted_votes': self.weighted_votes,
            'registered_at': self.registered_at,
            'verified': self.verified,
            'stake': self.stake,
            'index': self.index
        }

    @classmethod
    def from_dict(cls, d: dict):
        return cls(**d)

    def __eq__(self, other):
        return isinstance(other, Candidate) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f'Candidate({self.vk[:8]}, index={self.index}, weighted_votes={self.weighted_votes})'


class CandidateRegistry:
    '''
    Append-only, insertion ordered list of candidates. Slots are never removed, so a candidate's index is its
    registration order for the lifetime of the state.
    '''
    def __init__(self, driver: StateDriver, capacity: int = config.CANDIDATE_CAPACITY):
        self.driver = driver
        self.capacity = capacity
        self.log = get_logger('CandidateRegistry')

    def size(self) -> int:
        return self.driver.get(make_key(REGISTRY, 'size'), 0)

    def index_of(self, vk: str) -> int:
        return self.driver.get(make_key(REGISTRY, 'index', [vk]))

    def get(self, index: int) -> Candidate:
        if type(index) != int or index < 0 or index >= self.size():
            return None

        c = self.driver.get(make_key(REGISTRY, 'slots', [index]))
        if c is None:
            return None

        return Candidate.from_dict(c)

    def find(self, vk: str) -> Candidate:
        index = self.index_of(vk)
        if index is None:
            return None
        return self.get(index)

    def __contains__(self, vk: str):
        return self.index_of(vk) is not None

    def __iter__(self):
        for i in range(self.size()):
            yield self.get(i)

    def _put(self, candidate: Candidate):
        self.driver.set(make_key(REGISTRY, 'slots', [candidate.index]), candidate.to_dict())

    def register(self, vk: str, height: int, stake: int = 0, session_active: bool = False) -> int:
        if session_active:
            raise SessionActive('Registration is closed while voting is open.')

        if vk in self:
            raise AlreadyRegistered(f'{vk} is already registered.')

        index = self.size()
        if index >= self.capacity:
            raise CapacityExceeded(f'Registry holds the maximum of {self.capacity} candidates.')

        self._put(Candidate(vk=vk, registered_at=height, stake=stake, index=index))
        self.driver.set(make_key(REGISTRY, 'index', [vk]), index)
        self.driver.set(make_key(REGISTRY, 'size'), index + 1)

        self.log.info(f'Registered candidate {vk} at index {index}.')

        return index

    def record_vote(self, vk: str, weight_delta: int):
        candidate = self.find(vk)
        if candidate is None:
            raise UnknownCandidate(f'{vk} is not a registered candidate.')

        candidate.votes = safemath.add(candidate.votes, 1)
        candidate.weighted_votes = safemath.add(candidate.weighted_votes, weight_delta)

        self._put(candidate)

        return candidate

    def verify(self, vk: str):
        candidate = self.find(vk)
        if candidate is None:
            raise UnknownCandidate(f'{vk} is not a registered candidate.')

        candidate.verified = True
        self._put(candidate)

    def reset_tallies(self):
        for candidate in self:
            candidate.votes = 0
            candidate.weighted_votes = 0
            self._put(candidate)
