from ledgervote.registry import CandidateRegistry


class TallyScanner:
    '''
    Two passes over the live registry: one for the maximum weighted count, one collecting every candidate tied
    at a given count. Both read stored state only, so repeated calls agree.
    '''
    def __init__(self, registry: CandidateRegistry):
        self.registry = registry

    def max_weighted_votes(self) -> int:
        max_votes = 0
        for candidate in self.registry:
            if candidate.weighted_votes > max_votes:
                max_votes = candidate.weighted_votes
        return max_votes

    def tied_at(self, max_votes: int) -> list:
        return [candidate.vk for candidate in self.registry if candidate.weighted_votes == max_votes]
