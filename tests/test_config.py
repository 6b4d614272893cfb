import math

import pytest

from wrist_pong.config import GameConfig
from wrist_pong.game_state import GameState
from wrist_pong.geometry import Point


def test_default_tuning() -> None:
    config = GameConfig().validate()
    assert config.pose_interval_ms == 30 and config.tick_interval_ms == 20
    assert config.pose_score_threshold == 0.275
    assert config.y_movement_threshold == 0.01
    assert config.ball_speed == 30
    assert math.isclose(config.ball_min_rotation, 0.75 * math.pi)
    assert math.isclose(config.ball_max_rotation, 1.25 * math.pi)


def test_with_overrides_skips_unset_values() -> None:
    config = GameConfig().with_overrides(ball_speed=45.0, field_width=None, rebound=None)
    assert config.ball_speed == 45.0
    assert config.field_width == 640
    assert config.rebound == "angle"


@pytest.mark.parametrize(
    "overrides",
    [
        {"tick_interval_ms": 0},
        {"ball_speed": -1.0},
        {"pose_score_threshold": 1.5},
        {"frame_min_y": 0.9, "frame_max_y": 0.5},
        {"rebound": "bounce"},
        {"paddle_height": 10},
        {"ball_radius_px": -1},
        {"paddle_margin_px": -5},
    ],
)
def test_invalid_overrides_raise(overrides) -> None:
    with pytest.raises(ValueError):
        GameConfig().with_overrides(**overrides)


def test_new_session_state() -> None:
    state = GameState.new_session(GameConfig().initial_direction)
    assert (state.ball_position.x, state.ball_position.y) == (0.5, 0.5)
    assert (state.ball_direction.x, state.ball_direction.y) == (0.46, -0.89)
    assert state.paddle_y_computer == 0.5
    assert state.paddle_y_human == 0.5
    assert state.human_visible is False
    assert (state.points_computer, state.points_player) == (0, 0)


def test_plain_state_does_not_serve_on_its_own() -> None:
    # Only new_session sets the serve direction, taken from the config.
    assert GameState().ball_direction == Point(0.0, 0.0)
    config = GameConfig().with_overrides(initial_direction=(-0.6, 0.8))
    state = GameState.new_session(config.initial_direction)
    assert state.ball_direction == Point(-0.6, 0.8)


def test_zero_radius_and_margin_are_allowed() -> None:
    config = GameConfig().with_overrides(ball_radius_px=0, paddle_margin_px=0)
    assert (config.ball_radius_px, config.paddle_margin_px) == (0, 0)
