"""
simulation.py: One authoritative world step for a running session.
"""

from dataclasses import dataclass, field
from typing import NamedTuple, Optional

from .config import GameConfig
from .data_models import ObstaclePair, Running
from .log import get_logger
from .obstacles import ObstacleGenerator
from .physics_core import Box, PhysicsCore, boxes_intersect

logger = get_logger("simulation")


class TickResult(NamedTuple):
    out_of_bounds: bool = False
    collided: bool = False
    scored: int = 0

    @property
    def game_over(self) -> bool:
        return self.out_of_bounds or self.collided


@dataclass
class SimulationEngine(PhysicsCore):
    """
    Advances a Running state by one tick.
    Inherits entity physics and bounding boxes from PhysicsCore.
    """
    config: GameConfig = field(default_factory=GameConfig)
    generator: Optional[ObstacleGenerator] = None

    def __post_init__(self):
        PhysicsCore.__init__(self, self.config)
        if self.generator is None:
            self.generator = ObstacleGenerator(self.config)

    def segment_boxes(self, pair: ObstaclePair) -> tuple[Box, Box]:
        """Top segment hangs from y=0, bottom segment stands on the floor."""
        top = Box(pair.x, 0.0, pair.right, pair.top_height)
        bottom = Box(pair.x, pair.bottom_y, pair.right, float(self.config.screen_height))
        return top, bottom

    def collides(self, running: Running) -> bool:
        entity_box = self.entity_box(running.entity)
        for pair in running.obstacles:
            top, bottom = self.segment_boxes(pair)
            if boxes_intersect(entity_box, top) or boxes_intersect(entity_box, bottom):
                return True
        return False

    def spawn(self, running: Running) -> ObstaclePair:
        """Appends a new pair at the right edge, sized for the current score."""
        pair = self.generator.generate(self.config.screen_height, running.score)
        running.obstacles.append(pair)
        logger.debug("Spawned obstacle gap=%.0f top=%.1f (%s)",
                     pair.gap_height, pair.top_height, pair.difficulty.value)
        return pair

    def step(self, running: Running) -> TickResult:
        """
        The simulation step. Mutates the entity, obstacles and score of
        `running`; a result with game_over set is terminal.
        """
        entity = running.entity
        running.ticks += 1

        # 1. Gravity, queued flap, movement
        self.apply_gravity(entity)
        if running.pending_flap:
            self.flap(entity)
            running.pending_flap = False
        self.update_position(entity)

        # 2. Floor / ceiling
        if self.out_of_bounds(entity):
            return TickResult(out_of_bounds=True)

        # 3. Move obstacles
        for pair in running.obstacles:
            pair.x -= self.config.obstacle_speed

        # 4. Obstacle collision
        if self.collides(running):
            return TickResult(collided=True)

        # 5. Score once per pair when its centre falls behind the entity
        scored = 0
        for pair in running.obstacles:
            if not pair.passed and pair.center_x < entity.x:
                pair.passed = True
                scored += 1
        if scored:
            running.score += scored
            logger.debug("Score %d", running.score)

        # 6. Drop pairs that have left the screen
        running.obstacles = [p for p in running.obstacles if p.right >= 0]

        return TickResult(scored=scored)
