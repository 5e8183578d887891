"""Tie-break seed sources.

EntropyAccumulator folds together values that are visible on the ledger when an election is finalized: the
previous block hash, the current height, the session totals, the candidate count and the vote history length.
No single actor controls all of them at finalization time, but every one of them is public and several can be
nudged by a voter or a block producer. The result is NOT cryptographically secure randomness.

HashedEntropy keeps the same inputs and the same ``seed()`` interface but passes them through sha3_256, so small
nudges to one input no longer move the seed predictably. Any object exposing ``seed() -> int`` can be handed to
the finalizer instead.
"""

import hashlib

from ledgervote import config
from ledgervote.ledger import Chain
from ledgervote.registry import CandidateRegistry
from ledgervote.session import SessionStore, VoteHistory
from ledgervote.utils import safemath


def low_order_bytes(block_hash: str, n: int = config.ENTROPY_HASH_BYTES) -> int:
    return int.from_bytes(bytes.fromhex(block_hash)[-n:], byteorder='big')


class EntropyAccumulator:
    def __init__(self, chain: Chain, sessions: SessionStore, registry: CandidateRegistry, history: VoteHistory,
                 modulus: int = config.ENTROPY_MODULUS):
        self.chain = chain
        self.sessions = sessions
        self.registry = registry
        self.history = history
        self.modulus = modulus

    def signals(self) -> list:
        session = self.sessions.load()
        return [
            low_order_bytes(self.chain.previous_block_hash()),
            self.chain.height(),
            session.total_votes,
            session.total_weighted_votes,
            self.registry.size(),
            self.history.count()
        ]

    def seed(self) -> int:
        seed = 0
        for signal in self.signals():
            seed = safemath.add(seed, safemath.mod(signal, self.modulus))
        return seed


class HashedEntropy(EntropyAccumulator):
    def seed(self) -> int:
        h = hashlib.sha3_256()
        h.update(bytes.fromhex(self.chain.previous_block_hash()))
        for signal in self.signals():
            h.update(signal.to_bytes(32, byteorder='big'))
        return int.from_bytes(h.digest(), byteorder='big')
