from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple
import threading
import time


class SessionState(str, Enum):
    LOBBY = 'LOBBY'
    QUESTION_ACTIVE = 'QUESTION_ACTIVE'
    FINISHED = 'FINISHED'


@dataclass(frozen=True)
class Question:
    id: str
    text: str
    options: Tuple[str, ...]
    correct_answer: int
    category: str

    def to_public_dict(self):
        """Prompt and options only; the correct index never leaves the server."""
        return {
            'text': self.text,
            'options': list(self.options),
            'category': self.category,
        }


@dataclass(frozen=True)
class AnswerRecord:
    question_id: str
    answer_index: int
    time_ms: int
    correct: bool
    points_earned: int


@dataclass
class Participant:
    id: str
    address: str
    score: int = 0
    answers: List[AnswerRecord] = field(default_factory=list)
    joined_at: float = field(default_factory=time.time)

    def has_answered(self, question_id: str) -> bool:
        return any(a.question_id == question_id for a in self.answers)

    def to_dict(self):
        # Roster view: no scores while the game is running
        return {
            'id': self.id,
            'address': self.address,
        }


@dataclass(frozen=True)
class LeaderboardEntry:
    address: str
    score: int
    rank: int

    def to_dict(self):
        return {
            'address': self.address,
            'score': self.score,
            'rank': self.rank,
        }


@dataclass(frozen=True)
class AnswerResult:
    correct: bool
    points: int

    def to_dict(self):
        return {'correct': self.correct, 'points': self.points}


@dataclass
class Session:
    id: str
    host_id: str
    questions: Tuple[Question, ...]
    players: Dict[str, Participant] = field(default_factory=dict)
    state: SessionState = SessionState.LOBBY
    current_question_index: int = -1
    question_start_time: Optional[float] = None
    created_at: float = field(default_factory=time.time)
    # Serializes every read-modify-write against this session
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def current_question(self) -> Optional[Question]:
        if 0 <= self.current_question_index < len(self.questions):
            return self.questions[self.current_question_index]
        return None

    @property
    def question_number(self) -> Optional[int]:
        if self.state == SessionState.QUESTION_ACTIVE:
            return self.current_question_index + 1
        return None

    def roster(self):
        return [p.to_dict() for p in self.players.values()]

    def to_dict(self):
        return {
            'id': self.id,
            'state': self.state.value,
            'question_number': self.question_number,
            'total_questions': self.total_questions,
            'players': self.roster(),
            'created_at': self.created_at,
        }
