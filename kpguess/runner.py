# kpguess/runner.py
import logging
from dataclasses import asdict, dataclass
from typing import Optional

from .client import GameClient
from .handlers import choose_answer, learn_from_outcome
from .store import AnswerStore
from .timing import TimingPolicy

logger = logging.getLogger(__name__)


@dataclass
class RunStatus:
    """Live counters for one run, read by the HTTP status endpoint."""

    episode: int
    running: bool = False
    sessions_started: int = 0
    answers_submitted: int = 0
    points: int = 0
    last_session_points: Optional[int] = None
    store_size: int = 0
    exhausted: bool = False
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


async def play_session(
    client: GameClient,
    store: AnswerStore,
    timing: TimingPolicy,
    episode: int,
    status: RunStatus,
) -> bool:
    """
    Play one game from start until it ends.

    Returns True when the API has no unanswered questions left (lives
    remain but no next question) and False when the session ran out of
    lives and should be restarted.
    """
    print("# NEW GAME #\n")
    start = await client.start_session(episode)
    status.sessions_started += 1
    status.points = start.points
    question = start.question

    while True:
        chosen = choose_answer(store, question)
        outcome = await client.submit_answer(question.id, chosen.text)
        status.answers_submitted += 1

        learned = learn_from_outcome(store, chosen, outcome)
        if learned is not None:
            print(f"NEW: {question.id} {learned}")
        elif chosen.known:
            print(f"KNOWN: {question.id} {chosen.text}")

        status.points = outcome.points
        status.store_size = len(store)
        print(f"POINTS: {outcome.points}\n")

        if outcome.next_question is not None:
            question = outcome.next_question
            await timing.pause_between_answers()
            continue

        if outcome.lives_left is not None and outcome.lives_left <= 0:
            status.last_session_points = outcome.points
            print(f"GAME OVER. SCORE - {outcome.points}")
            print(f"TOTAL ANSWERS COLLECTED: {len(store)}\n")
            return False

        logger.info("No next question with %s lives left, question pool exhausted", outcome.lives_left)
        return True


async def run_game(
    client: GameClient,
    store: AnswerStore,
    timing: TimingPolicy,
    episode: int,
    status: Optional[RunStatus] = None,
) -> RunStatus:
    """
    Keep playing sessions of one episode until every question is answered.

    Errors from the client or the store propagate; the status records the
    message so the HTTP surface can show it.
    """
    status = status or RunStatus(episode=episode)
    status.running = True
    status.store_size = len(store)

    try:
        while True:
            exhausted = await play_session(client, store, timing, episode, status)
            if exhausted:
                status.exhausted = True
                print("Looks like you have answered every question.")
                return status
            await timing.pause_before_restart()
    except Exception as e:
        status.error = f"{type(e).__name__}: {e}"
        raise
    finally:
        status.running = False
