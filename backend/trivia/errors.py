"""Error taxonomy for session operations.

Every failure raised by the registry or the engine is a ``TriviaError``.
Transports catch it and report ``to_dict()`` to the caller; the raising
operation has not mutated anything.
"""


class TriviaError(Exception):
    code = 'error'
    status_code = 400

    def __init__(self, message: str = None):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__

    def to_dict(self):
        return {'error': self.message, 'code': self.code}


class Unauthorized(TriviaError):
    """Unauthorized"""
    code = 'unauthorized'
    status_code = 401


class SessionNotFound(TriviaError):
    """Game not found"""
    code = 'session_not_found'
    status_code = 404


class InvalidState(TriviaError):
    """Operation not allowed in the current game state"""
    code = 'invalid_state'
    status_code = 409


class SessionNotJoinable(InvalidState):
    """Game already started"""
    code = 'session_not_joinable'


class UnknownParticipant(TriviaError):
    """Player is not part of this game"""
    code = 'unknown_participant'
    status_code = 404


class DuplicateAnswer(TriviaError):
    """Already answered this question"""
    code = 'duplicate_answer'
    status_code = 409


class InvalidQuestionBank(TriviaError):
    """Question bank is invalid"""
    code = 'invalid_question_bank'
    status_code = 500
