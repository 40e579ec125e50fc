"""
session.py: The session state machine (Idle -> Countdown -> Running -> GameOver -> Idle).

GameSession is the single owner of the current SessionState. It gates which
operations are valid in each phase and exposes a snapshot for rendering.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .config import GameConfig
from .data_models import (
    Countdown, Difficulty, GameOver, Idle, Leaderboard, Phase, Running,
    SessionState
)
from .errors import InvalidTransition
from .leaderboard_db import LeaderboardStore, open_store
from .log import get_logger
from .obstacles import ObstacleGenerator
from .simulation import SimulationEngine, TickResult

logger = get_logger("session")

PhaseListener = Callable[[Phase, Phase], None]


@dataclass
class SessionSnapshot:
    """Everything the presentation layer needs to draw one frame."""
    phase: Phase
    countdown: Optional[int] = None
    entity: Optional[dict] = None
    obstacles: List[dict] = field(default_factory=list)
    score: int = 0
    difficulty: Difficulty = Difficulty.EASY
    at_minimum_gap: bool = False
    final_score: Optional[int] = None
    submitted: bool = False
    leaderboard: Leaderboard = field(default_factory=Leaderboard)
    highlight_row: Optional[int] = None


class GameSession:
    def __init__(self, config: Optional[GameConfig] = None, store: Optional[LeaderboardStore] = None,
                 engine: Optional[SimulationEngine] = None, seed: Optional[int] = None):
        self.config = config or GameConfig()
        if engine is None:
            engine = SimulationEngine(self.config, ObstacleGenerator(self.config, seed=seed))
        self.engine = engine
        if store is None:
            store = open_store(self.config.db_file, self.config.leaderboard_key,
                               self.config.leaderboard_size)
        self.store = store
        self._state: SessionState = Idle()
        self._listeners: List[PhaseListener] = []

    # -------- State --------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def leaderboard(self) -> Leaderboard:
        return self.store.leaderboard

    def add_listener(self, callback: PhaseListener):
        """Registers a callback invoked with (old_phase, new_phase) on every transition."""
        self._listeners.append(callback)

    def _transition(self, new_state: SessionState):
        old_phase = self.phase
        self._state = new_state
        logger.info("%s -> %s", old_phase.value, new_state.phase.value)
        for callback in list(self._listeners):
            callback(old_phase, new_state.phase)

    def _require(self, operation: str, *phases: Phase):
        if self.phase not in phases:
            raise InvalidTransition(operation, self.phase)

    # -------- Operations --------

    def start_countdown(self):
        """Idle -> Countdown. The entity is shown at its start position but not simulated."""
        self._require("start_countdown", Phase.IDLE)
        self._transition(Countdown(remaining=self.config.countdown_start,
                                   entity=self.engine.new_entity()))

    def countdown_step(self):
        """One countdown beat; the last one starts the run."""
        state = self._state
        if not isinstance(state, Countdown):
            return
        if state.remaining > 1:
            state.remaining -= 1
            return

        # Fresh run: no residual obstacles, entity at start, score 0
        entity = state.entity
        self.engine.reset(entity)
        self._transition(Running(score=0, entity=entity, obstacles=[]))

    def flap(self) -> bool:
        """Queues a flap for the next tick. Ignored unless running."""
        state = self._state
        if not isinstance(state, Running):
            return False
        state.pending_flap = True
        return True

    def tick(self) -> Optional[TickResult]:
        state = self._state
        if not isinstance(state, Running):
            return None

        result = self.engine.step(state)
        if result.game_over:
            reason = "left the play area" if result.out_of_bounds else "hit an obstacle"
            logger.info("Game over: %s with score %d", reason, state.score)
            self._transition(GameOver(final_score=state.score, entity=state.entity,
                                      obstacles=state.obstacles))
        return result

    def spawn(self):
        state = self._state
        if isinstance(state, Running):
            self.engine.spawn(state)

    def submit(self, name: str) -> Leaderboard:
        """
        Records the final score under `name`. Allowed once per game over;
        InvalidName leaves the session untouched so the caller can re-prompt.
        """
        state = self._state
        if not isinstance(state, GameOver):
            raise InvalidTransition("submit", self.phase)
        if state.submitted is not None:
            raise InvalidTransition("submit twice", self.phase)

        leaderboard = self.store.submit(name, state.final_score)
        state.submitted = self.store.last_entry
        return leaderboard

    def dismiss_leaderboard(self):
        """GameOver -> Idle, clearing the entity, obstacles and score."""
        self._require("dismiss_leaderboard", Phase.GAME_OVER)
        self._transition(Idle())

    # -------- Presentation --------

    def current_score(self) -> int:
        state = self._state
        if isinstance(state, Running):
            return state.score
        if isinstance(state, GameOver):
            return state.final_score
        return 0

    def snapshot(self) -> SessionSnapshot:
        state = self._state
        score = self.current_score()
        generator = self.engine.generator
        snap = SessionSnapshot(
            phase=self.phase,
            score=score,
            difficulty=generator.difficulty_for(score),
            at_minimum_gap=generator.at_minimum_gap(score),
            leaderboard=self.leaderboard,
        )

        if isinstance(state, Countdown):
            snap.countdown = state.remaining
            snap.entity = state.entity.to_client_state()
        elif isinstance(state, (Running, GameOver)):
            snap.entity = state.entity.to_client_state()
            snap.obstacles = [p.to_client_state() for p in state.obstacles]

        if isinstance(state, GameOver):
            snap.final_score = state.final_score
            snap.submitted = state.submitted is not None
            if state.submitted is not None:
                snap.highlight_row = self.leaderboard.position_of(state.submitted)
        return snap
