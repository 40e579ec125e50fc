"""
data_models.py: Data structures for the game state and the leaderboard.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from .constants import (
    ENTITY_START_X, ENTITY_START_Y, ENTITY_WIDTH, ENTITY_HEIGHT,
    OBSTACLE_WIDTH, LEADERBOARD_SIZE
)


class Difficulty(Enum):
    """Display-only label derived from the current gap height."""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    EXTREME = "Extreme"


class Phase(Enum):
    IDLE = "idle"
    COUNTDOWN = "countdown"
    RUNNING = "running"
    GAME_OVER = "game_over"


# -------- World State --------

@dataclass
class EntityState:
    """The controllable body. (x, y) is the centre of its bounding box."""
    x: float = ENTITY_START_X
    y: float = ENTITY_START_Y
    velocity: float = 0.0
    width: float = ENTITY_WIDTH
    height: float = ENTITY_HEIGHT

    @property
    def top(self) -> float:
        return self.y - self.height / 2

    @property
    def bottom(self) -> float:
        return self.y + self.height / 2

    def to_client_state(self):
        """Prepares a minimal state dictionary for the presentation layer."""
        return {
            "x": round(self.x, 2),
            "y": round(self.y, 2),
            "v": round(self.velocity, 2),
            "w": self.width,
            "h": self.height,
        }


@dataclass
class ObstaclePair:
    """A top and a bottom segment sharing one horizontal position."""
    top_height: float
    bottom_y: float
    gap_height: float
    x: float
    width: float = OBSTACLE_WIDTH
    difficulty: Difficulty = Difficulty.EASY
    passed: bool = False

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def right(self) -> float:
        return self.x + self.width

    def to_client_state(self):
        return {
            "x": round(self.x, 2),
            "w": self.width,
            "top_height": round(self.top_height, 2),
            "bottom_y": round(self.bottom_y, 2),
            "gap": self.gap_height,
            "passed": self.passed,
        }


# -------- Leaderboard --------

@dataclass(frozen=True)
class ScoreEntry:
    name: str
    score: int

    def to_record(self) -> dict:
        return {"name": self.name, "score": self.score}


@dataclass(frozen=True)
class Leaderboard:
    """Entries sorted by descending score, at most `capacity` of them."""
    entries: Tuple[ScoreEntry, ...] = ()
    capacity: int = LEADERBOARD_SIZE

    @classmethod
    def ranked(cls, entries: Iterable[ScoreEntry], capacity: int = LEADERBOARD_SIZE) -> "Leaderboard":
        """Stable-sorts descending by score and keeps the top `capacity`."""
        ordered = sorted(entries, key=lambda e: e.score, reverse=True)
        return cls(entries=tuple(ordered[:capacity]), capacity=capacity)

    def insert(self, entry: ScoreEntry) -> "Leaderboard":
        # sorted() is stable, so an appended tie stays behind earlier equal scores
        return Leaderboard.ranked(self.entries + (entry,), self.capacity)

    def position_of(self, entry: ScoreEntry) -> Optional[int]:
        """Row index of this exact entry object, or None if it was cut."""
        for i, e in enumerate(self.entries):
            if e is entry:
                return i
        return None

    def to_records(self) -> List[dict]:
        return [e.to_record() for e in self.entries]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[ScoreEntry]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> ScoreEntry:
        return self.entries[index]


# -------- Session States --------

@dataclass
class Idle:
    phase = Phase.IDLE


@dataclass
class Countdown:
    remaining: int
    entity: EntityState = field(default_factory=EntityState)
    phase = Phase.COUNTDOWN


@dataclass
class Running:
    score: int = 0
    entity: EntityState = field(default_factory=EntityState)
    obstacles: List[ObstaclePair] = field(default_factory=list)
    pending_flap: bool = False             # Did the player input a flap since the last tick?
    ticks: int = 0
    phase = Phase.RUNNING


@dataclass
class GameOver:
    final_score: int
    entity: EntityState = field(default_factory=EntityState)
    obstacles: List[ObstaclePair] = field(default_factory=list)
    submitted: Optional[ScoreEntry] = None
    phase = Phase.GAME_OVER


SessionState = Union[Idle, Countdown, Running, GameOver]
