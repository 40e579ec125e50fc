"""
physics_core.py: The deterministic kinematic functions and bounding-box checks.
"""

from typing import NamedTuple

from .config import GameConfig
from .data_models import EntityState


class Box(NamedTuple):
    """Axis-aligned rectangle in screen coordinates (y grows downward)."""
    left: float
    top: float
    right: float
    bottom: float


def boxes_intersect(a: Box, b: Box) -> bool:
    """Strict overlap test; boxes that only share an edge do not intersect."""
    return a.left < b.right and b.left < a.right and a.top < b.bottom and b.top < a.bottom


class PhysicsCore:
    """
    Per-tick physics for the entity. Every operation mutates only the state
    it is given; bounds are checked by the simulation, never clamped here.
    """

    def __init__(self, config: GameConfig):
        self.config = config
        self.gravity = config.gravity
        self.flap_impulse = config.flap_impulse

    def new_entity(self) -> EntityState:
        return EntityState(
            x=self.config.entity_start_x,
            y=self.config.entity_start_y,
            velocity=0.0,
            width=self.config.entity_width,
            height=self.config.entity_height,
        )

    def apply_gravity(self, state: EntityState):
        state.velocity += self.gravity

    def flap(self, state: EntityState):
        """Sets the velocity to the flap impulse, whatever it was before."""
        state.velocity = self.flap_impulse

    def update_position(self, state: EntityState):
        state.y += state.velocity

    def reset(self, state: EntityState):
        state.x, state.y = self.config.start_position
        state.velocity = 0.0

    def entity_box(self, state: EntityState) -> Box:
        half_w = state.width / 2
        return Box(state.x - half_w, state.top, state.x + half_w, state.bottom)

    def out_of_bounds(self, state: EntityState) -> bool:
        """Checks whether the entity touches or leaves the floor or ceiling."""
        return state.top <= 0 or state.bottom >= self.config.screen_height
