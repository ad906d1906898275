# kpguess/cli.py
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from .client import GameClient
from .config import Settings, parse_episode
from .errors import ConfigurationError, KPGuessError
from .runner import RunStatus, run_game
from .store import AnswerStore
from .timing import TimingPolicy


async def play(settings: Settings, episode: int, status: Optional[RunStatus] = None) -> RunStatus:
    """Open the episode's store and play until the question pool runs dry."""
    timing = TimingPolicy.from_settings(settings)
    with AnswerStore.load(episode, settings.data_dir) as store:
        async with GameClient.from_settings(settings) as client:
            return await run_game(client, store, timing, episode, status)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='kpguess',
        description='Play the Kinopoisk guess game and remember every confirmed answer.',
    )
    parser.add_argument('-e', '--episode', required=True, help='episode number (1-6)')
    parser.add_argument('--data-dir', help='directory holding answers<N>.txt (default: KPGUESS_DATA_DIR or .)')
    parser.add_argument('-v', '--verbose', action='store_true', help='debug logging')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        episode = parse_episode(args.episode)
        settings = Settings.from_env()
    except ConfigurationError as e:
        print(f'Configuration error: {e}', file=sys.stderr)
        return 2

    if args.data_dir:
        settings.data_dir = Path(args.data_dir)

    try:
        asyncio.run(play(settings, episode))
    except KPGuessError as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print('Interrupted.', file=sys.stderr)
        return 130
    return 0
