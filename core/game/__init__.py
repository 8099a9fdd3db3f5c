"""Turn engine, round state and table."""

from core.game.events import GameEvent, EventType
from core.game.state import DealerPolicy, GameResult, GameState, Turn
from core.game.engine import (
    BlackjackTable,
    determine_game_result,
    player_hits,
    player_stands,
    setup_game,
)

__all__ = [
    "GameEvent",
    "EventType",
    "DealerPolicy",
    "GameResult",
    "GameState",
    "Turn",
    "BlackjackTable",
    "determine_game_result",
    "player_hits",
    "player_stands",
    "setup_game",
]
