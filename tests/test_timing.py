import asyncio
import random

from kpguess.config import Settings
from kpguess.timing import TimingPolicy


def test_pauses_stay_within_bounds():
    timing = TimingPolicy(986, 4465, 2178, 9653, rng=random.Random(7))
    for _ in range(2000):
        assert 986 <= timing.answer_pause_ms() <= 4465
        assert 2178 <= timing.restart_pause_ms() <= 9653


def test_degenerate_range_is_constant():
    timing = TimingPolicy(5, 5, 9, 9)
    assert {timing.answer_pause_ms() for _ in range(50)} == {5}
    assert {timing.restart_pause_ms() for _ in range(50)} == {9}


def test_pause_sleeps_in_seconds(timing, pauses):
    ms = asyncio.run(timing.pause_between_answers())
    assert pauses == [ms / 1000]

    ms = asyncio.run(timing.pause_before_restart())
    assert pauses[-1] == ms / 1000
    assert 2178 <= ms <= 9653


def test_from_settings_uses_configured_ranges():
    settings = Settings(cookie="c", min_answer_ms=1, max_answer_ms=2, min_restart_ms=3, max_restart_ms=4)
    timing = TimingPolicy.from_settings(settings)
    assert timing.answer_range == (1, 2)
    assert timing.restart_range == (3, 4)
