# kpguess/store.py
import logging
import os
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

from .errors import StoreUnavailable

logger = logging.getLogger(__name__)


def store_path(data_dir: Path, episode: int) -> Path:
    return Path(data_dir) / f"answers{episode}.txt"


def parse_line(line: str) -> Optional[Tuple[int, str]]:
    """
    Parse one `"<id> <answer text>"` record.

    The first space separates the id from the text; the text keeps any
    further spaces. Returns None for anything that does not fit.
    """
    line = line.rstrip("\r\n")
    if " " not in line:
        return None

    raw_id, text = line.split(" ", 1)
    try:
        question_id = int(raw_id)
    except ValueError:
        return None

    if not text.strip():
        return None
    return question_id, text


def format_line(question_id: int, answer_text: str) -> str:
    # One record per line, whatever the API sends back
    flat = " ".join(answer_text.splitlines())
    return f"{question_id} {flat}\n"


class AnswerStore:
    """
    Known answers for one episode, backed by an append-only text file.

    The file is replayed in order on load so the last line for an id wins.
    Every `record` appends a new line and fsyncs it before returning.
    """

    def __init__(self, path: Path, episode: int, answers: Dict[int, str], handle):
        self.path = path
        self.episode = episode
        self._answers = answers
        self._handle = handle

    @classmethod
    def load(cls, episode: int, data_dir: Path = Path(".")) -> "AnswerStore":
        path = store_path(data_dir, episode)
        answers: Dict[int, str] = {}

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # "a+b" creates the file when it is missing; lines are decoded one by one
            handle = open(path, "a+b")
        except OSError as e:
            raise StoreUnavailable(path, e) from e

        try:
            handle.seek(0)
            for lineno, raw in enumerate(handle, start=1):
                try:
                    line = raw.decode("utf-8")
                except UnicodeDecodeError:
                    logger.debug("Skipping undecodable line %d in %s: %r", lineno, path, raw)
                    continue
                if not line.strip():
                    continue
                record = parse_line(line)
                if record is None:
                    logger.debug("Skipping malformed line %d in %s: %r", lineno, path, line)
                    continue
                answers[record[0]] = record[1]
        except OSError as e:
            handle.close()
            raise StoreUnavailable(path, e) from e

        logger.info("Loaded %d answers for episode %d from %s", len(answers), episode, path)
        return cls(path, episode, answers, handle)

    def get(self, question_id: int) -> Optional[str]:
        return self._answers.get(question_id)

    def record(self, question_id: int, answer_text: str) -> None:
        """Make an answer durable, then remember it."""
        if not answer_text or not answer_text.strip():
            raise ValueError(f"Refusing to store a blank answer for question {question_id}")

        line = format_line(question_id, answer_text)
        try:
            self._handle.write(line.encode("utf-8"))
            self._handle.flush()
            os.fsync(self._handle.fileno())
        except OSError as e:
            raise StoreUnavailable(self.path, e) from e
        self._answers[question_id] = line[:-1].split(" ", 1)[1]

    def items(self) -> Iterator[Tuple[int, str]]:
        return iter(self._answers.items())

    def close(self) -> None:
        if not self._handle.closed:
            self._handle.close()

    def __len__(self) -> int:
        return len(self._answers)

    def __contains__(self, question_id) -> bool:
        return question_id in self._answers

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
