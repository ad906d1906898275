# kpguess/client.py
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from .errors import ProtocolError, TransportError
from .schemas import AnswerResponse, GameResponse, Question

logger = logging.getLogger(__name__)

BASE_URL = 'https://kp-guess-game-api.kinopoisk.ru'
START_PATH = '/v1/games'
ANSWER_PATH = '/v1/questions/answers'

# The request never left this machine, so resending cannot double-submit
NOT_SENT_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout, httpx.PoolTimeout)

# Sent with every request; only the cookie changes between runs
BROWSER_HEADERS = (
    ('Accept', 'application/json, text/plain, */*'),
    ('Accept-Language', 'en-US,en;q=0.9,ru;q=0.8'),
    ('Connection', 'keep-alive'),
    ('Content-Type', 'application/json'),
    ('Origin', 'https://www.kinopoisk.ru'),
    ('Referer', 'https://www.kinopoisk.ru/'),
    ('Sec-Fetch-Dest', 'empty'),
    ('Sec-Fetch-Mode', 'cors'),
    ('Sec-Fetch-Site', 'same-site'),
    ('sec-ch-ua-mobile', '?0'),
    ('sec-ch-ua-platform', 'Windows'),
)


def build_headers(cookie: str) -> Dict[str, str]:
    headers = dict(BROWSER_HEADERS)
    headers['Cookie'] = cookie
    return headers


@dataclass
class SessionStart:
    question: Question
    points: int
    raw: Dict[str, Any]

    @property
    def question_id(self) -> int:
        return self.question.id

    @property
    def default_answer(self) -> Optional[str]:
        return self.question.default_answer


@dataclass
class AnswerOutcome:
    question_id: int
    is_correct: bool
    correct_answer: Optional[str]
    points: int
    next_question: Optional[Question] = None
    lives_left: Optional[int] = None

    @property
    def next_question_id(self) -> Optional[int]:
        return self.next_question.id if self.next_question else None


class GameClient:
    """
    Thin async wrapper over the two game endpoints.

    Network failures, 5xx and 429 responses on game start are retried with
    exponential backoff up to `retries` attempts. An answer submit is only
    resent when the connection was never made. Anything else that is off
    (4xx, non-JSON body, missing fields) raises ProtocolError straight away.
    """

    def __init__(
        self,
        cookie: str,
        base_url: str = BASE_URL,
        timeout: float = 30.0,
        retries: int = 3,
        backoff: float = 1.0,
        http: Optional[httpx.AsyncClient] = None,
        sleep=None,
    ):
        self.base_url = base_url.rstrip('/')
        self.headers = build_headers(cookie)
        self.retries = max(1, retries)
        self.backoff = backoff
        self._http = http or httpx.AsyncClient(timeout=timeout)
        self._owns_http = http is None
        self._sleep = sleep or asyncio.sleep

    @classmethod
    def from_settings(cls, settings, **kwargs) -> 'GameClient':
        return cls(settings.cookie, timeout=settings.timeout, retries=settings.retries, **kwargs)

    async def start_session(self, episode: int) -> SessionStart:
        data = await self._post(START_PATH, {'gameId': episode})
        try:
            game = GameResponse.model_validate(data)
        except ValidationError as e:
            raise ProtocolError(f'Unexpected game start response: {e}') from e

        if game.stateData.question is None:
            raise ProtocolError('Game start response has no question')
        return SessionStart(question=game.stateData.question, points=game.stateData.points, raw=data)

    async def submit_answer(self, question_id: int, answer_text: str) -> AnswerOutcome:
        # The server judges a resent body against whatever question is current
        data = await self._post(ANSWER_PATH, {'answer': answer_text}, resend_safe=False)
        try:
            resp = AnswerResponse.model_validate(data)
        except ValidationError as e:
            raise ProtocolError(f'Unexpected answer response for question {question_id}: {e}') from e

        if not resp.isCorrect and not (resp.correctAnswer or '').strip():
            raise ProtocolError(f'Wrong answer for question {question_id} came back without correctAnswer')

        state = resp.stateData
        if state.question is None and state.livesLeft is None:
            raise ProtocolError(f'Answer response for question {question_id} has neither question nor livesLeft')

        return AnswerOutcome(
            question_id=question_id,
            is_correct=resp.isCorrect,
            correct_answer=resp.correctAnswer,
            points=state.points,
            next_question=state.question,
            lives_left=None if state.question is not None else state.livesLeft,
        )

    async def _post(self, path: str, payload: Dict[str, Any], resend_safe: bool = True) -> Dict[str, Any]:
        """
        POST with bounded retry.

        With resend_safe=False only failures where the request never reached
        the server are retried; a lost response or a 5xx/429 is raised at once.
        """
        url = f'{self.base_url}{path}'
        error: Optional[TransportError] = None

        for attempt in range(1, self.retries + 1):
            try:
                resp = await self._http.post(url, json=payload, headers=self.headers)
            except NOT_SENT_ERRORS as e:
                error = TransportError(f'POST {path} failed: {type(e).__name__}: {e}')
            except httpx.TransportError as e:
                error = TransportError(f'POST {path} failed: {type(e).__name__}: {e}')
                if not resend_safe:
                    raise error from e
            else:
                logger.debug('POST %s -> %s', path, resp.status_code)
                if resp.status_code >= 500 or resp.status_code == 429:
                    error = TransportError(f'POST {path} returned {resp.status_code}')
                    if not resend_safe:
                        raise error
                elif resp.status_code >= 400:
                    raise ProtocolError(f'POST {path} returned {resp.status_code}: {resp.text[:200]}')
                else:
                    try:
                        data = resp.json()
                    except ValueError as e:
                        raise ProtocolError(f'Non-JSON response from {path}: {resp.text[:200]}') from e
                    if not isinstance(data, dict):
                        raise ProtocolError(f'Expected a JSON object from {path}, got {type(data).__name__}')
                    return data

            if attempt < self.retries:
                delay = self.backoff * (2 ** (attempt - 1))
                logger.warning('%s (attempt %d/%d), retrying in %.1fs', error, attempt, self.retries, delay)
                await self._sleep(delay)

        raise error

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()
