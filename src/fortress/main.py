"""Fortress Focus entry point.

Runs one headless focus session:
1. Load configuration (config/game.yaml)
2. Create the FortressGame controller
3. Log every notification the engine emits
4. Start the timer and tick it until the session completes

Usage:
    python -m fortress.main --minutes 25
    # or via entry point:
    fortress --minutes 25 --config config/game.yaml
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any

from fortress.engine.controller import FortressGame
from fortress.engine.game_loop import GameLoop
from fortress.loaders.game_config_loader import DEFAULT_GAME_CONFIG_PATH, load_game_config

log = logging.getLogger(__name__)


def wire_events(game: FortressGame) -> None:
    """Log every notification's message."""
    def _log_notification(event: Any) -> None:
        log.info("[%s] %s", type(event).__name__, getattr(event, "message", ""))

    game.events.on_any(_log_notification)


async def run_session(game: FortressGame, minutes: Any) -> GameLoop:
    """Start a focus session and tick it until it completes or is paused."""
    game.set_configured_minutes(minutes)
    loop = GameLoop(game, game.config, stop_when_idle=True)
    game.start()
    log.info("Focus session started: %d minute(s)", game.state.timer.configured_minutes)
    await loop.run()
    return loop


def _arg(name: str, default: str) -> str:
    if name in sys.argv:
        idx = sys.argv.index(name)
        if idx + 1 < len(sys.argv):
            return sys.argv[idx + 1]
        print(f"Error: {name} requires an argument", file=sys.stderr)
        sys.exit(1)
    return default


def main() -> None:
    """Entry point.

    Supports command-line arguments:
        --minutes <n>    Session length in minutes (default: from config)
        --config <path>  Game config YAML (default: config/game.yaml)
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    config = load_game_config(_arg("--config", DEFAULT_GAME_CONFIG_PATH))
    minutes = _arg("--minutes", str(config.default_minutes))

    game = FortressGame(game_config=config)
    wire_events(game)
    try:
        asyncio.run(run_session(game, minutes))
    except KeyboardInterrupt:
        log.info("Session interrupted; no reward")
    log.info("Resources: %s", game.state.ledger.to_dict())


if __name__ == "__main__":
    main()
