import hmac
import logging
import time
from typing import Callable, List, Optional

from trivia.errors import (
    DuplicateAnswer,
    InvalidState,
    SessionNotFound,
    SessionNotJoinable,
    Unauthorized,
    UnknownParticipant,
)
from trivia.models import AnswerRecord, AnswerResult, LeaderboardEntry, Participant, Session, SessionState
from .registry import SessionRegistry
from .scheduler import AdvanceScheduler
from .scoring import rank_participants, score_answer


Broadcast = Callable[[str, dict, str], None]

# Absorbs float noise in clock subtraction without reaching the next whole millisecond
_MS_EPSILON = 1e-3


def _elapsed_ms(started_at: float, now: float) -> int:
    """Whole milliseconds since ``started_at``, truncated and never negative."""
    return max(int((now - started_at) * 1000 + _MS_EPSILON), 0)


class SessionEngine:
    """Per-session state machine: LOBBY -> QUESTION_ACTIVE (xN) -> FINISHED.

    Every mutating operation runs under the session's own lock, so joins,
    starts, answers and advances on one session never interleave while
    different sessions proceed independently. Broadcasts are emitted while
    the lock is held so clients observe them in transition order.
    """

    def __init__(
        self,
        registry: SessionRegistry,
        scheduler: AdvanceScheduler,
        broadcast: Broadcast,
        host_password: str,
        question_duration: float = 10,
        start_delay: float = 2,
        clock: Callable[[], float] = time.time,
        logger=None,
    ):
        self.registry = registry
        self.scheduler = scheduler
        self._broadcast = broadcast
        self._host_password = host_password
        self.question_duration = question_duration
        self.start_delay = start_delay
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)

    # ---- lifecycle ----

    def create_session(self, host_id: str, password: str) -> Session:
        if not hmac.compare_digest(str(password or '').encode(), self._host_password.encode()):
            raise Unauthorized('Invalid password')
        session = self.registry.create_session(host_id)
        self._logger.info(f"[create] session={session.id} host={host_id} questions={session.total_questions}")
        return session

    def get_session(self, session_id: str) -> Session:
        session = self.registry.get_session(session_id)
        if session is None:
            raise SessionNotFound()
        return session

    def destroy_session(self, session_id: str) -> bool:
        self.scheduler.cancel(session_id)
        existed = self.registry.destroy_session(session_id)
        if existed:
            self._logger.info(f"[destroy] session={session_id}")
        return existed

    # ---- participant intents ----

    def join(self, session_id: str, participant_id: str, address: str) -> List[dict]:
        session = self.get_session(session_id)
        with session.lock:
            if session.state != SessionState.LOBBY:
                raise SessionNotJoinable()
            existing = session.players.get(participant_id)
            if existing is not None:
                # Same connection joining again keeps its place in the lobby
                existing.address = address
            else:
                session.players[participant_id] = Participant(
                    id=participant_id, address=address, joined_at=self._clock()
                )
            roster = session.roster()
            self._logger.info(f"[join] session={session_id} player={participant_id} players={len(roster)}")
            self._broadcast('roster-changed', {'players': roster}, session_id)
        return roster

    def start(self, session_id: str, caller_id: str) -> None:
        session = self.get_session(session_id)
        with session.lock:
            if caller_id != session.host_id:
                raise Unauthorized()
            if session.state != SessionState.LOBBY:
                raise InvalidState('Game already started')
            session.state = SessionState.QUESTION_ACTIVE
            session.current_question_index = 0
            session.question_start_time = self._clock()
            self._logger.info(f"[start] session={session_id} players={len(session.players)}")
            self._broadcast('game-started', {
                'questionNumber': 1,
                'totalQuestions': session.total_questions,
            }, session_id)
            # The first window also covers the "get ready" hold
            self.scheduler.arm(session_id, 0, self.start_delay + self.question_duration, self._on_timer)
            if self.start_delay > 0 and self.scheduler.enabled:
                self.scheduler.call_later(self.start_delay, self._publish_first_question, session_id)
            else:
                self._publish_question(session)

    def submit_answer(self, session_id: str, participant_id: str, answer_index: int) -> AnswerResult:
        session = self.get_session(session_id)
        with session.lock:
            if session.state != SessionState.QUESTION_ACTIVE:
                raise InvalidState('Not accepting answers at this time')
            player = session.players.get(participant_id)
            if player is None:
                raise UnknownParticipant()
            question = session.current_question
            if player.has_answered(question.id):
                raise DuplicateAnswer()

            elapsed_ms = _elapsed_ms(session.question_start_time, self._clock())
            correct = answer_index == question.correct_answer
            points = score_answer(correct, elapsed_ms)
            player.answers.append(AnswerRecord(
                question_id=question.id,
                answer_index=answer_index,
                time_ms=elapsed_ms,
                correct=correct,
                points_earned=points,
            ))
            if correct:
                player.score += points
            self._logger.info(
                f"[answer] session={session_id} player={participant_id} question={question.id} "
                f"time_ms={elapsed_ms} correct={correct} points={points}"
            )
        return AnswerResult(correct=correct, points=points)

    # ---- progression ----

    def advance(self, session_id: str, expected_index: Optional[int] = None) -> SessionState:
        """Move to the next question or finish.

        ``expected_index`` is the question the caller believes is active; a
        mismatch (stale or duplicate timer) leaves the session untouched.
        A finished session is never advanced further.
        """
        session = self.get_session(session_id)
        with session.lock:
            if session.state != SessionState.QUESTION_ACTIVE:
                self._logger.info(f"[advance-skip] session={session_id} state={session.state.value}")
                return session.state
            if expected_index is not None and expected_index != session.current_question_index:
                self._logger.info(
                    f"[advance-skip] session={session_id} expected={expected_index} "
                    f"actual={session.current_question_index}"
                )
                return session.state

            self.scheduler.cancel(session_id)
            session.current_question_index += 1
            if session.current_question_index >= session.total_questions:
                session.current_question_index = session.total_questions
                session.state = SessionState.FINISHED
                session.question_start_time = None
                leaderboard = [entry.to_dict() for entry in rank_participants(session.players.values())]
                self._logger.info(f"[finish] session={session_id} players={len(leaderboard)}")
                self._broadcast('game-over', {'leaderboard': leaderboard}, session_id)
                return session.state

            session.question_start_time = self._clock()
            self._logger.info(f"[advance] session={session_id} question={session.current_question_index + 1}")
            self._publish_question(session)
            self.scheduler.arm(session_id, session.current_question_index, self.question_duration, self._on_timer)
            return session.state

    def leaderboard(self, session_id: str) -> List[LeaderboardEntry]:
        session = self.get_session(session_id)
        with session.lock:
            return rank_participants(session.players.values())

    # ---- internals ----

    def _publish_question(self, session: Session) -> None:
        question = session.current_question
        self._broadcast('question-started', {
            'questionNumber': session.current_question_index + 1,
            'totalQuestions': session.total_questions,
            'question': question.to_public_dict(),
        }, session.id)

    def _publish_first_question(self, session_id: str) -> None:
        session = self.registry.get_session(session_id)
        if session is None:
            return
        with session.lock:
            if session.state == SessionState.QUESTION_ACTIVE and session.current_question_index == 0:
                self._publish_question(session)

    def _on_timer(self, session_id: str, question_index: int) -> None:
        try:
            self.advance(session_id, expected_index=question_index)
        except SessionNotFound:
            self._logger.info(f"[timer-abort] session={session_id} no longer exists")
