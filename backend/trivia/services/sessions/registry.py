import secrets
import string
import threading
from typing import Dict, Optional, Sequence

from trivia.models import Question, Session


# URL-safe alphabet, 64 symbols
SESSION_ID_ALPHABET = string.ascii_letters + string.digits + '_-'


def generate_session_id(length: int = 8) -> str:
    return ''.join(secrets.choice(SESSION_ID_ALPHABET) for _ in range(length))


class SessionRegistry:
    """Owns the live sessions: creation, lookup and destruction."""

    def __init__(self, questions: Sequence[Question], id_length: int = 8):
        self._questions = tuple(questions)
        self._id_length = id_length
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()
        self._rng = secrets.SystemRandom()

    def create_session(self, host_id: str) -> Session:
        shuffled = tuple(self._rng.sample(self._questions, len(self._questions)))
        with self._lock:
            session_id = generate_session_id(self._id_length)
            while session_id in self._sessions:
                session_id = generate_session_id(self._id_length)
            session = Session(id=session_id, host_id=host_id, questions=shuffled)
            self._sessions[session_id] = session
        return session

    def get_session(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    def destroy_session(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def __len__(self):
        return len(self._sessions)

    def __contains__(self, session_id):
        return session_id in self._sessions
