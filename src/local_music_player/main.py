#!/usr/bin/env python3
"""Main entry point for the local music player engine."""

from __future__ import annotations

import asyncio
import logging
import signal
import sys

from local_music_player.domain.shared.messages import LogTemplates
from local_music_player.utils.logging import setup_logging


async def run(container) -> None:
    """Bring the player up and keep it running until SIGINT or SIGTERM."""
    logger = logging.getLogger(__name__)
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    def _request_stop(sig: signal.Signals) -> None:
        logger.info(LogTemplates.PLAYER_SIGNAL_RECEIVED, sig.name)
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _request_stop, sig)
        except NotImplementedError:
            # Windows event loops do not support signal handlers.
            signal.signal(sig, lambda *_: loop.call_soon_threadsafe(stop_event.set))

    await container.initialize()
    try:
        await stop_event.wait()
    finally:
        await container.shutdown()


def main() -> int:
    from local_music_player.config.settings import get_settings

    settings = get_settings()
    setup_logging(settings.log_level)

    logger = logging.getLogger(__name__)
    logger.info(LogTemplates.PLAYER_STARTING, settings.environment)

    from local_music_player.config.container import create_container

    container = create_container(settings)

    try:
        asyncio.run(run(container))
        logger.info(LogTemplates.PLAYER_STOPPED)
        return 0
    except KeyboardInterrupt:
        logger.info(LogTemplates.PLAYER_STOPPED)
        return 0
    except Exception as e:
        logger.exception(LogTemplates.PLAYER_FATAL_ERROR, e)
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
