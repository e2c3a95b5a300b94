from typing import Iterable, List

from trivia.models import LeaderboardEntry, Participant


BASE_POINTS = 100
MAX_TIME_BONUS = 100
# One bonus point is lost per this many elapsed milliseconds
BONUS_DECAY_MS = 100


def time_bonus(elapsed_ms: int) -> int:
    return max(MAX_TIME_BONUS - elapsed_ms // BONUS_DECAY_MS, 0)


def score_answer(correct: bool, elapsed_ms: int) -> int:
    """Points for one submission.

    Correct answers earn the base plus a bonus decaying with response time;
    incorrect answers earn nothing regardless of speed.
    """
    if not correct:
        return 0
    return BASE_POINTS + time_bonus(max(int(elapsed_ms), 0))


def rank_participants(players: Iterable[Participant]) -> List[LeaderboardEntry]:
    """Order by score descending and number the rows 1..N.

    ``players`` must be in join order: the sort is stable, so equal scores
    keep that order and every row gets its own rank.
    """
    ordered = sorted(players, key=lambda p: p.score, reverse=True)
    return [
        LeaderboardEntry(address=p.address, score=p.score, rank=idx + 1)
        for idx, p in enumerate(ordered)
    ]
