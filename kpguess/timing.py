# kpguess/timing.py
import asyncio
import random
from typing import Optional


class TimingPolicy:
    """
    Random pauses that keep the bot off a fixed request cadence.

    Both ranges are inclusive and in milliseconds.
    """

    def __init__(
        self,
        min_answer_ms: int,
        max_answer_ms: int,
        min_restart_ms: int,
        max_restart_ms: int,
        rng: Optional[random.Random] = None,
        sleep=None,
    ):
        self.answer_range = (min_answer_ms, max_answer_ms)
        self.restart_range = (min_restart_ms, max_restart_ms)
        self.rng = rng or random.Random()
        self.sleep = sleep or asyncio.sleep

    @classmethod
    def from_settings(cls, settings, rng: Optional[random.Random] = None) -> "TimingPolicy":
        return cls(
            settings.min_answer_ms,
            settings.max_answer_ms,
            settings.min_restart_ms,
            settings.max_restart_ms,
            rng=rng,
        )

    def answer_pause_ms(self) -> int:
        return self.rng.randint(*self.answer_range)

    def restart_pause_ms(self) -> int:
        return self.rng.randint(*self.restart_range)

    async def pause_between_answers(self) -> int:
        ms = self.answer_pause_ms()
        await self.sleep(ms / 1000)
        return ms

    async def pause_before_restart(self) -> int:
        ms = self.restart_pause_ms()
        await self.sleep(ms / 1000)
        return ms
