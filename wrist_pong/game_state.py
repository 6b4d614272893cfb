"""Shared mutable game record read and written by the two periodic tasks.

Both tasks run on the same cooperative scheduler and touch this record
without a lock. That is only sound because the fields are partitioned:

* the pose sampler writes ``last_accepted_hand_pose`` and nothing else;
* the physics tick writes every other field and only reads the hand pose.

Code that moves either task onto its own thread has to keep this split or
guard the whole record with a single lock.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from wrist_pong.control_types import Keypoint
from wrist_pong.geometry import Point


FIELD_CENTER = 0.5


class PlayerType(Enum):
    COMPUTER = "computer"
    HUMAN = "human"


@dataclass
class GameState:
    """Ball, paddles and scores for one session.

    The human paddle has no stored position of its own: it is always derived
    from the last accepted hand pose so a raw, unfiltered sample can never
    move it.
    """

    ball_position: Point = field(default_factory=lambda: Point(FIELD_CENTER, FIELD_CENTER))
    # Stationary until a session serves it; see new_session.
    ball_direction: Point = field(default_factory=Point)
    paddle_y_computer: float = FIELD_CENTER
    points_computer: int = 0
    points_player: int = 0
    last_accepted_hand_pose: Optional[Keypoint] = None

    @classmethod
    def new_session(cls, initial_direction: Tuple[float, float]) -> "GameState":
        """Create the state for a fresh session with the ball centered."""

        return cls(ball_direction=Point(*initial_direction))

    @property
    def paddle_y_human(self) -> float:
        if self.last_accepted_hand_pose is None:
            return FIELD_CENTER
        return self.last_accepted_hand_pose.y

    @property
    def human_visible(self) -> bool:
        """Whether the player has ever been seen; the paddle is hidden until then."""

        return self.last_accepted_hand_pose is not None

    def recenter_ball(self, direction_x: float) -> None:
        """Put the ball back in the middle, travelling horizontally."""

        self.ball_position = Point(FIELD_CENTER, FIELD_CENTER)
        self.ball_direction = Point(direction_x, 0.0)

    def copy(self) -> "GameState":
        # Keypoint is frozen, so sharing the reference is safe.
        return GameState(
            ball_position=self.ball_position.copy(),
            ball_direction=self.ball_direction.copy(),
            paddle_y_computer=self.paddle_y_computer,
            points_computer=self.points_computer,
            points_player=self.points_player,
            last_accepted_hand_pose=self.last_accepted_hand_pose,
        )
