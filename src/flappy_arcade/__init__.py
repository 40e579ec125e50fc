"""
Flappy Arcade - the game core behind a single-screen flap-through-the-gaps game.

Main exports:
- GameSession: the session state machine (start, flap, tick, submit, dismiss)
- GameLoop: serialized timers and input queue driving a session
- LeaderboardStore: persistent top-10 leaderboard
- GameConfig: immutable tunables, optionally loaded from YAML
"""

from .config import GameConfig, load_config
from .data_models import Difficulty, Leaderboard, Phase, ScoreEntry
from .errors import FlappyError, InvalidName, InvalidTransition, PersistenceError
from .game_loop import GameLoop
from .leaderboard_db import KeyValueStore, LeaderboardStore, open_store
from .session import GameSession

__all__ = [
    "GameConfig",
    "load_config",
    "Difficulty",
    "Leaderboard",
    "Phase",
    "ScoreEntry",
    "FlappyError",
    "InvalidName",
    "InvalidTransition",
    "PersistenceError",
    "GameLoop",
    "KeyValueStore",
    "LeaderboardStore",
    "open_store",
    "GameSession",
]
