class ElectionException(Exception):
    kind = 'ElectionException'
    message = 'Another error has occured.'

    def __init__(self, message=None):
        super().__init__(message or self.message)


class NotAuthorized(ElectionException):
    kind = 'NotAuthorized'
    message = 'Caller is not an administrator.'


class InvalidAccount(ElectionException):
    kind = 'InvalidAccount'
    message = 'Account identifier is not a 64 character hex verifying key.'


class InvalidParameter(ElectionException):
    kind = 'InvalidParameter'
    message = 'Operation parameter is out of range.'


class SessionNotActive(ElectionException):
    kind = 'SessionNotActive'
    message = 'No election session is currently active.'


class SessionStillActive(ElectionException):
    kind = 'SessionStillActive'
    message = 'Voting window has not closed yet.'


class SessionActive(ElectionException):
    kind = 'SessionActive'
    message = 'An election session is already active.'


class AlreadyVoted(ElectionException):
    kind = 'AlreadyVoted'
    message = 'Account already voted in this session.'


class UnknownCandidate(ElectionException):
    kind = 'UnknownCandidate'
    message = 'Candidate is not registered.'


class AlreadyRegistered(ElectionException):
    kind = 'AlreadyRegistered'
    message = 'Candidate is already registered.'


class NoCandidates(ElectionException):
    kind = 'NoCandidates'
    message = 'At least one candidate must be registered.'


class QuorumNotMet(ElectionException):
    kind = 'QuorumNotMet'
    message = 'Total votes are below the quorum threshold.'


class CapacityExceeded(ElectionException):
    kind = 'CapacityExceeded'
    message = 'Candidate registry is full.'


class Blacklisted(ElectionException):
    kind = 'Blacklisted'
    message = 'Account is blacklisted.'


class NotWhitelisted(ElectionException):
    kind = 'NotWhitelisted'
    message = 'Account is not whitelisted for this session.'


class ArithmeticOverflow(ElectionException):
    kind = 'ArithmeticOverflow'
    message = 'Unsigned arithmetic overflowed.'


class DivisionByZero(ElectionException):
    kind = 'DivisionByZero'
    message = 'Division by zero.'


class SelfDelegation(ElectionException):
    kind = 'SelfDelegation'
    message = 'Account cannot delegate to itself.'


class AlreadyDelegated(ElectionException):
    kind = 'AlreadyDelegated'
    message = 'Account already has an active delegation.'


class NotDelegated(ElectionException):
    kind = 'NotDelegated'
    message = 'Account has no active delegation.'


class InsufficientStake(ElectionException):
    kind = 'InsufficientStake'
    message = 'Account does not have enough stake.'


EXCEPTION_MAP = {
    cls: {'error': cls.kind, 'message': cls.message}
    for cls in [
        ElectionException, NotAuthorized, InvalidAccount, InvalidParameter, SessionNotActive,
        SessionStillActive, SessionActive, AlreadyVoted, UnknownCandidate, AlreadyRegistered,
        NoCandidates, QuorumNotMet, CapacityExceeded, Blacklisted, NotWhitelisted,
        ArithmeticOverflow, DivisionByZero, SelfDelegation, AlreadyDelegated, NotDelegated,
        InsufficientStake
    ]
}


def error_payload(e: ElectionException):
    payload = dict(EXCEPTION_MAP.get(type(e), EXCEPTION_MAP[ElectionException]))
    payload['message'] = str(e)
    return payload
