import math
from typing import List, Optional

from wrist_pong.config import GameConfig
from wrist_pong.control_types import Keypoint
from wrist_pong.game_state import GameState
from wrist_pong.pose_filter import AcceptanceFilter, FrameBand, PoseSampler


class ScriptedPoseSource:
    """Returns queued samples in order, then ``None`` forever."""

    def __init__(self, samples: List[Optional[Keypoint]]) -> None:
        self.samples = list(samples)

    def estimate_once(self) -> Optional[Keypoint]:
        return self.samples.pop(0) if self.samples else None

    def close(self) -> None:
        return


class BrokenPoseSource:
    def estimate_once(self) -> Optional[Keypoint]:
        raise RuntimeError("camera unplugged")

    def close(self) -> None:
        return


def wrist(y: float, confidence: Optional[float] = 0.9) -> Keypoint:
    return Keypoint(x=0.5, y=y, confidence=confidence)


def test_frame_band_normalization_edges() -> None:
    band = FrameBand()
    assert band.normalize(0.25) == 0.0
    assert math.isclose(band.normalize(0.98), 1.0, rel_tol=1e-9)
    assert math.isclose(band.normalize(0.615), 0.5, rel_tol=1e-9)
    # Top quarter of the frame is treated as the top of the field.
    assert band.normalize(0.1) == 0.0
    assert band.normalize(0.99) == 1.0


def test_normalize_keypoint_keeps_other_fields() -> None:
    band = FrameBand()
    original = Keypoint(x=0.3, y=0.615, confidence=0.8)
    normalized = band.normalize_keypoint(original)
    assert normalized is not None
    assert normalized.x == 0.3 and normalized.confidence == 0.8 and normalized.name == "right_wrist"
    assert math.isclose(normalized.y, 0.5, rel_tol=1e-9)
    # The source sample is not mutated.
    assert original.y == 0.615
    assert band.normalize_keypoint(None) is None


def test_acceptance_filter_gates() -> None:
    gate = AcceptanceFilter(score_threshold=0.275, movement_threshold=0.01)
    assert gate.accepts(wrist(0.5, confidence=0.275), None) is True
    assert gate.accepts(wrist(0.5, confidence=0.27), None) is False
    assert gate.accepts(wrist(0.5, confidence=None), None) is False
    assert gate.accepts(None, None) is False
    previous = wrist(0.5)
    assert gate.accepts(wrist(0.505), previous) is False
    assert gate.accepts(wrist(0.52), previous) is True
    assert gate.accepts(wrist(0.48), previous) is True


def test_low_confidence_sample_leaves_state_unchanged() -> None:
    state = GameState()
    sampler = PoseSampler(state, ScriptedPoseSource([wrist(0.7, confidence=0.1)]))
    assert sampler.sample() is False
    assert state.last_accepted_hand_pose is None
    assert state.paddle_y_human == 0.5


def test_first_valid_sample_accepted_regardless_of_movement() -> None:
    state = GameState()
    # 0.615 normalizes to the field center, i.e. zero distance from the default paddle.
    sampler = PoseSampler(state, ScriptedPoseSource([wrist(0.615, confidence=0.3)]))
    assert sampler.sample() is True
    assert state.last_accepted_hand_pose is not None
    assert math.isclose(state.paddle_y_human, 0.5, rel_tol=1e-9)


def test_dead_band_suppresses_jitter_but_tracks_motion() -> None:
    state = GameState()
    samples = [wrist(0.615), wrist(0.618), wrist(0.7)]
    sampler = PoseSampler(state, ScriptedPoseSource(samples))
    sampler.sample()
    first = state.last_accepted_hand_pose
    # 0.003 raw is ~0.004 normalized, inside the 0.01 dead band.
    assert sampler.sample() is False
    assert state.last_accepted_hand_pose is first
    assert sampler.sample() is True
    assert math.isclose(state.paddle_y_human, (0.7 - 0.25) / 0.73, rel_tol=1e-9)


def test_missing_detection_keeps_last_pose() -> None:
    state = GameState()
    sampler = PoseSampler(state, ScriptedPoseSource([wrist(0.8), None, None]))
    sampler.sample()
    accepted = state.last_accepted_hand_pose
    assert sampler.sample() is False
    assert sampler.sample() is False
    # Once the player has been seen the paddle never disappears.
    assert state.last_accepted_hand_pose is accepted
    assert state.human_visible is True


def test_pose_source_errors_are_absorbed() -> None:
    state = GameState()
    sampler = PoseSampler(state, BrokenPoseSource())
    assert sampler.sample() is False
    assert state.last_accepted_hand_pose is None


def test_sampler_only_writes_hand_pose() -> None:
    state = GameState()
    before = state.copy()
    PoseSampler(state, ScriptedPoseSource([wrist(0.9)])).sample()
    assert state.ball_position == before.ball_position
    assert state.ball_direction == before.ball_direction
    assert state.paddle_y_computer == before.paddle_y_computer
    assert (state.points_computer, state.points_player) == (0, 0)
    assert state.last_accepted_hand_pose is not None


def test_sampler_from_config_uses_config_thresholds() -> None:
    config = GameConfig().with_overrides(pose_score_threshold=0.5, frame_min_y=0.0, frame_max_y=1.0)
    state = GameState()
    sampler = PoseSampler.from_config(state, ScriptedPoseSource([wrist(0.3, confidence=0.4), wrist(0.3, confidence=0.6)]), config)
    assert sampler.sample() is False
    assert sampler.sample() is True
    assert math.isclose(state.paddle_y_human, 0.3, rel_tol=1e-9)
