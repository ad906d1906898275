# kpguess/schemas.py
from typing import List, Optional
from pydantic import BaseModel

# Field names follow the game API's JSON as-is


class Question(BaseModel):
    id: int
    answers: List[str] = []

    @property
    def default_answer(self) -> Optional[str]:
        """The answer the API lists first, used when nothing is stored."""
        if self.answers and self.answers[0].strip():
            return self.answers[0]
        return None


class StateData(BaseModel):
    points: int = 0
    livesLeft: Optional[int] = None
    question: Optional[Question] = None


class GameResponse(BaseModel):
    stateData: StateData


class AnswerResponse(BaseModel):
    isCorrect: bool
    correctAnswer: Optional[str] = None
    stateData: StateData
