import itertools
import logging
import threading
from typing import Callable, Dict


_tokens = itertools.count(1)


class AdvanceScheduler:
    """One-shot, cancelable auto-advance timers, one per session.

    - Arming a session supersedes any timer already armed for it
    - A superseded or cancelled timer still wakes up, sees its token is stale and no-ops
    - Tasks run through ``socketio.start_background_task`` so they follow the server's async mode
    """

    def __init__(self, socketio, enabled: bool = True, logger=None):
        self._socketio = socketio
        self._enabled = enabled
        self._logger = logger or logging.getLogger(__name__)
        self._armed: Dict[str, int] = {}
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def arm(self, session_id: str, question_index: int, delay: float,
            callback: Callable[[str, int], None]) -> None:
        if not self._enabled:
            return
        token = next(_tokens)
        with self._lock:
            self._armed[session_id] = token
        self._logger.info(f"[timer-set] session={session_id} index={question_index} delay={delay}s")
        self._socketio.start_background_task(
            self._worker, session_id, question_index, token, delay, callback
        )

    def cancel(self, session_id: str) -> None:
        with self._lock:
            if self._armed.pop(session_id, None) is not None:
                self._logger.info(f"[timer-cancel] session={session_id}")

    def is_armed(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._armed

    def call_later(self, delay: float, fn: Callable, *args) -> None:
        if not self._enabled:
            return

        def _runner():
            self._socketio.sleep(delay)
            fn(*args)

        self._socketio.start_background_task(_runner)

    def _worker(self, session_id: str, question_index: int, token: int, delay: float,
                callback: Callable[[str, int], None]) -> None:
        self._socketio.sleep(delay)
        with self._lock:
            if self._armed.get(session_id) != token:
                self._logger.info(f"[timer-skip] session={session_id} index={question_index} superseded")
                return
            del self._armed[session_id]
        self._logger.info(f"[timer-fire] session={session_id} index={question_index}")
        try:
            callback(session_id, question_index)
        except Exception:
            # Background task: report and stop, nothing upstream to propagate to
            self._logger.exception(f"[timer-error] session={session_id} index={question_index}")
