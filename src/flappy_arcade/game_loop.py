"""
game_loop.py: The serialized event loop driving a GameSession.

Ticks, obstacle spawns and countdown beats are timers on one simulated clock.
advance(dt) fires every due timer in timestamp order on the calling thread,
so no two of them ever interleave their mutations. Input posted from other
threads waits in a queue until the start of the next advance().
"""

import queue
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from .config import GameConfig
from .data_models import Phase
from .errors import InvalidTransition
from .log import get_logger
from .session import GameSession

logger = get_logger("game_loop")


class TimerKind(Enum):
    TICK = "tick"
    SPAWN = "spawn"
    COUNTDOWN = "countdown"


class InputEvent(Enum):
    FLAP = "flap"
    START = "start"


@dataclass
class Timer:
    kind: TimerKind
    interval: float
    armed_at: float
    order: int
    fired: int = 0

    @property
    def due(self) -> float:
        # Multiples of the interval from the arming time, so rounding never drifts
        return self.armed_at + (self.fired + 1) * self.interval


class GameLoop:
    def __init__(self, session: GameSession, config: Optional[GameConfig] = None):
        self.session = session
        self.config = config or session.config
        self.now = 0.0
        self.tick_count = 0
        self.inputs: "queue.Queue[InputEvent]" = queue.Queue()
        self._timers: Dict[TimerKind, Timer] = {}
        self._armed = 0
        session.add_listener(self._on_phase_change)
        self._sync_timers(session.phase)

    # -------- Input (any thread) --------

    def post_flap(self):
        self.inputs.put(InputEvent.FLAP)

    def post_start(self):
        self.inputs.put(InputEvent.START)

    # -------- Timers --------

    @property
    def active_timers(self) -> List[TimerKind]:
        return sorted(self._timers, key=lambda kind: self._timers[kind].order)

    def _intervals(self, phase: Phase) -> Dict[TimerKind, float]:
        if phase is Phase.COUNTDOWN:
            return {TimerKind.COUNTDOWN: self.config.countdown_interval}
        if phase is Phase.RUNNING:
            return {
                TimerKind.TICK: self.config.tick_time,
                TimerKind.SPAWN: self.config.spawn_interval,
            }
        return {}

    def _sync_timers(self, phase: Phase):
        """Arms the timers the phase needs and cancels every other one."""
        wanted = self._intervals(phase)
        for kind in list(self._timers):
            if kind not in wanted:
                del self._timers[kind]
        for kind, interval in wanted.items():
            if kind not in self._timers:
                self._armed += 1
                self._timers[kind] = Timer(kind, interval, armed_at=self.now, order=self._armed)

    def _on_phase_change(self, old: Phase, new: Phase):
        self._sync_timers(new)

    def _next_timer(self, until: float) -> Optional[Timer]:
        due = [t for t in self._timers.values() if t.due <= until]
        if not due:
            return None
        return min(due, key=lambda t: (t.due, t.order))

    # -------- Dispatch --------

    def _drain_inputs(self):
        while True:
            try:
                event = self.inputs.get_nowait()
            except queue.Empty:
                return
            if event is InputEvent.FLAP:
                self.session.flap()
            elif event is InputEvent.START:
                try:
                    self.session.start_countdown()
                except InvalidTransition as e:
                    logger.debug("Ignoring start: %s", e)

    def _fire(self, timer: Timer):
        if timer.kind is TimerKind.TICK:
            self.tick_count += 1
            self.session.tick()
        elif timer.kind is TimerKind.SPAWN:
            self.session.spawn()
        elif timer.kind is TimerKind.COUNTDOWN:
            self.session.countdown_step()

    def advance(self, dt: float) -> int:
        """
        Moves the clock forward by dt seconds (capped at max_frame_time) and
        fires every timer that falls due. Returns the number of ticks run.
        """
        self._drain_inputs()

        until = self.now + min(max(dt, 0.0), self.config.max_frame_time)
        ticks_before = self.tick_count

        while True:
            timer = self._next_timer(until)
            if timer is None:
                break
            self.now = timer.due
            timer.fired += 1
            self._fire(timer)

        self.now = until
        return self.tick_count - ticks_before
