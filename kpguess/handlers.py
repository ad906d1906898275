# kpguess/handlers.py
from dataclasses import dataclass
from typing import Optional

from .client import AnswerOutcome
from .errors import ProtocolError
from .schemas import Question
from .store import AnswerStore


@dataclass
class ChosenAnswer:
    question_id: int
    text: str
    known: bool


def choose_answer(store: AnswerStore, question: Question) -> ChosenAnswer:
    """
    Pick what to submit for a question.

    A stored answer always wins. Otherwise the API's own first option is
    submitted as a guess, so a lucky default still scores and gets learned.
    """
    stored = store.get(question.id)
    if stored is not None:
        return ChosenAnswer(question.id, stored, known=True)

    default = question.default_answer
    if default is None:
        raise ProtocolError(f'Question {question.id} has no stored answer and no options')
    return ChosenAnswer(question.id, default, known=False)


def learn_from_outcome(store: AnswerStore, chosen: ChosenAnswer, outcome: AnswerOutcome) -> Optional[str]:
    """
    Update the store from the API's verdict.

    Returns the answer text that was recorded, or None when the store
    already knew the right answer.
    """
    if not outcome.is_correct:
        # Always overwrite on a miss, even if the stored answer was "known"
        store.record(chosen.question_id, outcome.correct_answer)
        return outcome.correct_answer

    if not chosen.known:
        store.record(chosen.question_id, chosen.text)
        return chosen.text

    return None
