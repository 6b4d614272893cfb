"""Tunable constants for the wrist-controlled Pong game.

Every number the physics, pose filtering and rendering code relies on lives
in :class:`GameConfig` so the CLI can override individual values without the
game modules reaching for globals. Defaults give a 640x480 field, a ball
that crosses it in about a second, and a forgiving confidence gate for
webcam pose detection.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from typing import Any, Tuple


Color = Tuple[int, int, int]

REBOUND_MODES = ("angle", "reflect")


@dataclass(frozen=True)
class GameConfig:
    """Immutable bundle of timing, physics, filter and drawing settings."""

    # Scheduling (milliseconds between the end of one run and the next).
    pose_interval_ms: int = 30
    tick_interval_ms: int = 20

    # Pose acceptance filter.
    pose_score_threshold: float = 0.275
    y_movement_threshold: float = 0.01
    frame_min_y: float = 0.25
    frame_max_y: float = 0.98

    # Ball.
    ball_radius_px: int = 10
    ball_speed: float = 30.0  # Divisor: larger values mean a slower ball.
    ball_min_rotation: float = 3 / 4 * math.pi
    ball_max_rotation: float = 5 / 4 * math.pi
    initial_direction: Tuple[float, float] = (0.46, -0.89)
    rebound: str = "angle"

    # Paddles.
    paddle_width_px: int = 10
    paddle_height_px: int = 70
    paddle_margin_px: int = 20

    # Play-field surface.
    field_width: int = 640
    field_height: int = 480

    # Drawing.
    background_color: Color = (0, 0, 0)
    ball_color: Color = (255, 0, 0)
    paddle_color: Color = (255, 255, 255)
    scores_color: Color = (255, 255, 255)
    score_font_size: int = 96
    score_top_px: int = 75

    def validate(self) -> "GameConfig":
        """Raise ``ValueError`` when a value would break the simulation."""

        for name in ("pose_interval_ms", "tick_interval_ms", "field_width", "field_height", "ball_speed"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)!r}")
        for name in ("ball_radius_px", "paddle_margin_px"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative, got {getattr(self, name)!r}")
        for name in ("pose_score_threshold", "y_movement_threshold", "frame_min_y", "frame_max_y"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value!r}")
        if self.frame_min_y >= self.frame_max_y:
            raise ValueError("frame_min_y must be smaller than frame_max_y")
        if self.paddle_height_px <= 0 or self.paddle_width_px <= 0:
            raise ValueError("paddle dimensions must be positive")
        if self.ball_min_rotation > self.ball_max_rotation:
            raise ValueError("ball_min_rotation must not exceed ball_max_rotation")
        if self.rebound not in REBOUND_MODES:
            raise ValueError(f"rebound must be one of {REBOUND_MODES}, got {self.rebound!r}")
        return self

    def with_overrides(self, **overrides: Any) -> "GameConfig":
        """Return a validated copy, skipping ``None`` so unset CLI flags keep defaults."""

        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown config fields: {', '.join(sorted(unknown))}")
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes).validate()
