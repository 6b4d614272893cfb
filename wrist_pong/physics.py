"""Ball physics, collisions, scoring and render emission for one game tick.

A tick resolves collisions against the ball's current (pre-move) position,
then moves the ball, then draws. Collision checks run in a fixed order and
the first one that applies ends the collision phase:

1. paddle hit (only the paddle the ball is travelling toward),
2. left/right edge, which scores and re-centers the ball,
3. top/bottom edge, which flips the vertical direction.

The functions here are pure helpers over :class:`GameState`; the
:class:`PhysicsTick` task strings them together and is the only writer of
every game-state field except the hand pose.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Callable, Dict, Optional

from wrist_pong.config import GameConfig
from wrist_pong.control_types import RenderSink
from wrist_pong.game_state import GameState, PlayerType
from wrist_pong.geometry import Field, PaddleBox, Point, clamp_unit, left_paddle_box, right_paddle_box, rotate_vector


logger = logging.getLogger(__name__)

# Maps the current state to the computer paddle's new normalized y.
ComputerStrategy = Callable[[GameState], float]


class TickEvent(Enum):
    NONE = "none"
    COMPUTER_PADDLE_HIT = "computer_paddle_hit"
    HUMAN_PADDLE_HIT = "human_paddle_hit"
    COMPUTER_SCORED = "computer_scored"
    PLAYER_SCORED = "player_scored"
    WALL_BOUNCE = "wall_bounce"


def track_ball(state: GameState) -> float:
    """Follow the ball's height exactly; the computer never misses."""

    return state.ball_position.y


STRATEGIES: Dict[str, ComputerStrategy] = {
    "track": track_ball,
}


def paddle_box(player: PlayerType, center_y: float, field: Field, config: GameConfig) -> PaddleBox:
    """Pixel rectangle of ``player``'s paddle; the computer plays on the left."""

    build = left_paddle_box if player is PlayerType.COMPUTER else right_paddle_box
    return build(field, center_y, config.paddle_width_px, config.paddle_height_px, config.paddle_margin_px)


def detect_paddle_collision(state: GameState, field: Field, config: GameConfig) -> Optional[PlayerType]:
    """Return the paddle the ball is hitting this tick, if any.

    Only the paddle in the ball's direction of travel is tested, so a ball
    that has just bounced off a paddle cannot be caught by it again.
    """

    ball_x = field.to_pixel_x(state.ball_position.x)
    ball_y = field.to_pixel_y(state.ball_position.y)
    radius = config.ball_radius_px

    if state.ball_direction.x < 0:
        box = paddle_box(PlayerType.COMPUTER, state.paddle_y_computer, field, config)
        if box.spans_y(ball_y) and ball_x - radius <= box.face_x:
            return PlayerType.COMPUTER
    elif state.ball_direction.x > 0:
        box = paddle_box(PlayerType.HUMAN, state.paddle_y_human, field, config)
        if box.spans_y(ball_y) and ball_x + radius >= box.face_x:
            return PlayerType.HUMAN
    return None


def relative_hit_position(ball_y_px: float, box: PaddleBox) -> float:
    """Where the ball met the paddle: ``0`` at the top edge, ``1`` at the bottom."""

    return (ball_y_px - box.top) / box.height


def rebound_angle(relative: float, player: PlayerType, config: GameConfig) -> float:
    """Rotation applied to the ball's horizontal heading after a paddle hit.

    The angle sweeps linearly from ``ball_min_rotation`` at the top edge to
    ``ball_max_rotation`` at the bottom. The left paddle faces the other way,
    so its angle is mirrored.
    """

    span = config.ball_max_rotation - config.ball_min_rotation
    angle = config.ball_min_rotation + relative * span
    if player is PlayerType.COMPUTER:
        return 2 * math.pi - angle
    return angle


def rebound_direction(direction: Point, relative: float, player: PlayerType, config: GameConfig) -> Point:
    """New ball direction after hitting ``player``'s paddle at ``relative``."""

    heading = Point(math.copysign(1.0, direction.x), 0.0)
    return rotate_vector(heading, rebound_angle(relative, player, config))


def reflect_direction(direction: Point) -> Point:
    """Simplified rebound: reverse the horizontal component only."""

    return Point(-direction.x, direction.y)


def resolve_paddle_collision(state: GameState, field: Field, config: GameConfig) -> TickEvent:
    player = detect_paddle_collision(state, field, config)
    if player is None:
        return TickEvent.NONE

    if config.rebound == "reflect":
        state.ball_direction = reflect_direction(state.ball_direction)
    else:
        center_y = state.paddle_y_computer if player is PlayerType.COMPUTER else state.paddle_y_human
        box = paddle_box(player, center_y, field, config)
        relative = relative_hit_position(field.to_pixel_y(state.ball_position.y), box)
        state.ball_direction = rebound_direction(state.ball_direction, relative, player, config)

    if player is PlayerType.COMPUTER:
        return TickEvent.COMPUTER_PADDLE_HIT
    return TickEvent.HUMAN_PADDLE_HIT


def resolve_side_walls(state: GameState, field: Field, config: GameConfig) -> TickEvent:
    """Score a point when the ball reaches the left or right edge."""

    ball_x = field.to_pixel_x(state.ball_position.x)
    radius = config.ball_radius_px

    if ball_x <= radius:
        state.points_computer += 1
        state.recenter_ball(direction_x=1.0)
        logger.info("Computer scores (%d - %d)", state.points_computer, state.points_player)
        return TickEvent.COMPUTER_SCORED
    if ball_x >= field.width - radius:
        state.points_player += 1
        state.recenter_ball(direction_x=-1.0)
        logger.info("Player scores (%d - %d)", state.points_computer, state.points_player)
        return TickEvent.PLAYER_SCORED
    return TickEvent.NONE


def resolve_top_bottom_walls(state: GameState, field: Field, config: GameConfig) -> TickEvent:
    ball_y = field.to_pixel_y(state.ball_position.y)
    radius = config.ball_radius_px
    # Only bounce off the wall the ball is heading into, so a shallow ball cannot flip twice.
    heading_up = state.ball_direction.y < 0
    heading_down = state.ball_direction.y > 0
    if (ball_y <= radius and heading_up) or (ball_y >= field.height - radius and heading_down):
        state.ball_direction = Point(state.ball_direction.x, -state.ball_direction.y)
        return TickEvent.WALL_BOUNCE
    return TickEvent.NONE


def move_ball(state: GameState, config: GameConfig) -> None:
    """Advance the ball by ``direction / ball_speed`` and keep it on the field."""

    moved = state.ball_position + state.ball_direction / config.ball_speed
    state.ball_position = Point(clamp_unit(moved.x), clamp_unit(moved.y))


def resolve_collisions(state: GameState, field: Field, config: GameConfig) -> TickEvent:
    for resolve in (resolve_paddle_collision, resolve_side_walls, resolve_top_bottom_walls):
        event = resolve(state, field, config)
        if event is not TickEvent.NONE:
            return event
    return TickEvent.NONE


class PhysicsTick:
    """Periodic task advancing the simulation by one step and redrawing it."""

    def __init__(
        self,
        state: GameState,
        field: Field,
        config: GameConfig,
        sink: RenderSink,
        strategy: ComputerStrategy = track_ball,
    ) -> None:
        self.state = state
        self.field = field
        self.config = config
        self.sink = sink
        self.strategy = strategy

    def advance(self) -> TickEvent:
        """Mutate the game state for one tick without drawing anything."""

        event = resolve_collisions(self.state, self.field, self.config)
        if event in (TickEvent.COMPUTER_PADDLE_HIT, TickEvent.HUMAN_PADDLE_HIT, TickEvent.WALL_BOUNCE):
            logger.debug("Tick event %s, ball direction now (%.3f, %.3f)",
                         event.value, self.state.ball_direction.x, self.state.ball_direction.y)

        self.state.paddle_y_computer = self.strategy(self.state)
        move_ball(self.state, self.config)
        return event

    def render(self) -> None:
        """Emit draw commands for the current state in back-to-front order."""

        state = self.state
        self.sink.clear()
        self.sink.draw_center_line()
        self.sink.draw_scores(state.points_computer, state.points_player)
        self.sink.draw_ball(
            (self.field.to_pixel_x(state.ball_position.x), self.field.to_pixel_y(state.ball_position.y)),
            self.config.ball_radius_px,
        )
        self._draw_paddle(PlayerType.COMPUTER, state.paddle_y_computer)
        if state.human_visible:
            self._draw_paddle(PlayerType.HUMAN, state.paddle_y_human)

    def _draw_paddle(self, player: PlayerType, center_y: float) -> None:
        box = paddle_box(player, center_y, self.field, self.config)
        self.sink.draw_paddle(box.left, box.top, box.width, box.height)

    def tick(self) -> TickEvent:
        event = self.advance()
        self.render()
        return event
