"""
Tests for the session state machine.
"""

import pytest

from flappy_arcade.config import GameConfig
from flappy_arcade.data_models import Countdown, Difficulty, GameOver, Phase, Running
from flappy_arcade.errors import InvalidName, InvalidTransition
from flappy_arcade.leaderboard_db import KeyValueStore, LeaderboardStore
from flappy_arcade.session import GameSession


@pytest.fixture
def config():
    return GameConfig()


@pytest.fixture
def store():
    s = LeaderboardStore(KeyValueStore(":memory:"))
    yield s
    s.close()


@pytest.fixture
def session(config, store):
    return GameSession(config, store=store, seed=7)


def start_running(session: GameSession):
    session.start_countdown()
    for _ in range(session.config.countdown_start):
        session.countdown_step()
    assert session.phase is Phase.RUNNING


def run_until_game_over(session: GameSession, limit: int = 1000):
    for _ in range(limit):
        session.tick()
        if session.phase is Phase.GAME_OVER:
            return
    raise AssertionError("game never ended")


class TestIdle:
    """Behaviour before a game starts."""

    def test_starts_idle(self, session):
        assert session.phase is Phase.IDLE
        assert session.current_score() == 0

    def test_flap_ignored(self, session):
        assert session.flap() is False
        assert session.phase is Phase.IDLE

    def test_tick_ignored(self, session):
        assert session.tick() is None

    def test_spawn_ignored(self, session):
        session.spawn()
        assert session.snapshot().obstacles == []

    def test_submit_rejected(self, session, store):
        with pytest.raises(InvalidTransition):
            session.submit("ann")
        assert len(store.leaderboard) == 0

    def test_dismiss_rejected(self, session):
        with pytest.raises(InvalidTransition):
            session.dismiss_leaderboard()


class TestCountdown:
    """Idle -> Countdown -> Running."""

    def test_start_countdown(self, session, config):
        session.start_countdown()
        state = session.state
        assert isinstance(state, Countdown)
        assert state.remaining == 3
        assert (state.entity.x, state.entity.y) == config.start_position

    def test_start_twice_rejected(self, session):
        session.start_countdown()
        with pytest.raises(InvalidTransition):
            session.start_countdown()

    def test_counts_down(self, session):
        session.start_countdown()
        session.countdown_step()
        assert session.state.remaining == 2
        session.countdown_step()
        assert session.state.remaining == 1
        session.countdown_step()
        assert session.phase is Phase.RUNNING

    def test_entity_not_simulated(self, session, config):
        session.start_countdown()
        session.tick()
        session.flap()
        assert session.state.entity.y == config.entity_start_y
        assert session.state.entity.velocity == 0.0

    def test_running_starts_fresh(self, session, config):
        start_running(session)
        state = session.state
        assert isinstance(state, Running)
        assert state.score == 0
        assert state.obstacles == []
        assert state.entity.y == config.entity_start_y
        assert state.entity.velocity == 0.0

    def test_countdown_step_outside_countdown(self, session):
        session.countdown_step()
        assert session.phase is Phase.IDLE


class TestRunning:
    """Flap queueing, ticking and game over."""

    def test_flap_queued_until_tick(self, session):
        start_running(session)
        assert session.flap() is True
        assert session.state.entity.velocity == 0.0
        session.tick()
        assert session.state.entity.velocity == -8.0

    def test_flaps_collapse(self, session, config, store):
        other = GameSession(config, store=store, seed=7)
        start_running(session)
        start_running(other)

        session.flap()
        session.flap()
        session.flap()
        other.flap()
        session.tick()
        other.tick()
        assert session.state.entity == other.state.entity

    def test_spawn_while_running(self, session):
        start_running(session)
        session.spawn()
        assert len(session.state.obstacles) == 1

    def test_falling_ends_game(self, session):
        start_running(session)
        run_until_game_over(session)
        state = session.state
        assert isinstance(state, GameOver)
        assert state.final_score == 0

    def test_game_over_is_terminal(self, session):
        start_running(session)
        run_until_game_over(session)
        y = session.state.entity.y
        assert session.tick() is None
        assert session.flap() is False
        assert session.state.entity.y == y

    def test_final_score_kept(self, session):
        start_running(session)
        session.state.score = 12
        session.state.entity.y = 690.0
        session.tick()
        assert session.state.final_score == 12
        assert session.current_score() == 12


class TestGameOver:
    """Submission and dismissal."""

    @pytest.fixture
    def over(self, session):
        start_running(session)
        session.state.score = 5
        run_until_game_over(session)
        return session

    def test_submit(self, over, store):
        board = over.submit("ann")
        assert [(e.name, e.score) for e in board] == [("ann", 5)]
        assert store.leaderboard == board

    def test_empty_name_keeps_session(self, over, store):
        with pytest.raises(InvalidName):
            over.submit("")
        assert over.phase is Phase.GAME_OVER
        assert len(store.leaderboard) == 0
        assert not over.snapshot().submitted

        over.submit("ann")
        assert over.snapshot().submitted

    def test_submit_only_once(self, over, store):
        over.submit("ann")
        with pytest.raises(InvalidTransition):
            over.submit("ann")
        assert len(store.leaderboard) == 1

    def test_highlight_row(self, over, store):
        store.submit("champ", 100)
        store.submit("rookie", 1)
        over.submit("ann")
        assert over.snapshot().highlight_row == 1

    def test_dismiss_resets(self, over):
        over.dismiss_leaderboard()
        snap = over.snapshot()
        assert snap.phase is Phase.IDLE
        assert snap.entity is None
        assert snap.obstacles == []
        assert snap.score == 0

    def test_new_game_after_dismiss(self, over):
        over.dismiss_leaderboard()
        start_running(over)
        assert over.state.score == 0


class TestSnapshot:
    """What the presentation layer sees."""

    def test_idle_snapshot(self, session):
        snap = session.snapshot()
        assert snap.phase is Phase.IDLE
        assert snap.countdown is None
        assert snap.difficulty is Difficulty.EASY

    def test_countdown_snapshot(self, session):
        session.start_countdown()
        snap = session.snapshot()
        assert snap.countdown == 3
        assert snap.entity["y"] == 300

    def test_running_snapshot(self, session):
        start_running(session)
        session.spawn()
        session.state.score = 56
        snap = session.snapshot()
        assert snap.score == 56
        assert snap.difficulty is Difficulty.EXTREME
        assert snap.at_minimum_gap
        assert len(snap.obstacles) == 1
        assert snap.obstacles[0]["gap"] == 350.0


class TestListeners:
    def test_transitions_reported(self, session):
        seen = []
        session.add_listener(lambda old, new: seen.append((old, new)))
        start_running(session)
        run_until_game_over(session)
        session.dismiss_leaderboard()
        assert seen == [
            (Phase.IDLE, Phase.COUNTDOWN),
            (Phase.COUNTDOWN, Phase.RUNNING),
            (Phase.RUNNING, Phase.GAME_OVER),
            (Phase.GAME_OVER, Phase.IDLE),
        ]
