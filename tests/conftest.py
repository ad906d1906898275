import pytest

from kpguess.client import AnswerOutcome, SessionStart
from kpguess.schemas import Question
from kpguess.timing import TimingPolicy


class FakeClient:
    """Scripted stand-in for GameClient: one list of outcomes per session."""

    def __init__(self, sessions):
        self.sessions = list(sessions)
        self.started = []
        self.submitted = []
        self._outcomes = []

    async def start_session(self, episode):
        self.started.append(episode)
        first_question, outcomes = self.sessions.pop(0)
        self._outcomes = list(outcomes)
        return SessionStart(question=first_question, points=0, raw={})

    async def submit_answer(self, question_id, answer_text):
        self.submitted.append((question_id, answer_text))
        return self._outcomes.pop(0)


def question(qid, *answers):
    return Question(id=qid, answers=list(answers) or ['Default'])


def outcome(qid, correct, points=0, correct_answer=None, next_question=None, lives_left=None):
    return AnswerOutcome(
        question_id=qid,
        is_correct=correct,
        correct_answer=correct_answer,
        points=points,
        next_question=next_question,
        lives_left=lives_left,
    )


@pytest.fixture
def pauses():
    return []


@pytest.fixture
def timing(pauses):
    async def fake_sleep(seconds):
        pauses.append(seconds)

    return TimingPolicy(986, 4465, 2178, 9653, sleep=fake_sleep)
