"""Session domain services: registry, state machine, scoring and timers.

Transport code (socket handlers, HTTP routes) talks to ``SessionEngine``
only, keeping delivery concerns separated from game mechanics.
"""

from .engine import SessionEngine
from .registry import SessionRegistry
from .scheduler import AdvanceScheduler

__all__ = ['AdvanceScheduler', 'SessionEngine', 'SessionRegistry']
