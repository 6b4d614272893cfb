"""Small 2-D helpers shared by the physics tick and the renderer.

Game state is stored in normalized ``[0, 1]`` coordinates; collisions and
drawing happen in pixels. :class:`Field` is the only place that converts
between the two so both sides agree on rounding (always ``floor``).
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass
class Point:
    """2-D vector used for the ball position and direction."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __truediv__(self, divisor: float) -> "Point":
        return Point(self.x / divisor, self.y / divisor)

    def copy(self) -> "Point":
        return Point(self.x, self.y)


def rotate_vector(point: Point, angle: float) -> Point:
    """Rotate ``point`` counter-clockwise (in math orientation) by ``angle`` radians."""

    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return Point(cos_a * point.x - sin_a * point.y, sin_a * point.x + cos_a * point.y)


def clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))


@dataclass(frozen=True)
class Field:
    """Pixel dimensions of the rendering surface."""

    width: int
    height: int

    def to_pixel_x(self, x: float) -> int:
        return math.floor(self.width * x)

    def to_pixel_y(self, y: float) -> int:
        return math.floor(self.height * y)


@dataclass(frozen=True)
class PaddleBox:
    """Pixel-space rectangle of a paddle plus the face the ball can hit.

    ``face_x`` is the edge turned toward the middle of the field: the right
    edge of the left paddle and the left edge of the right paddle.
    """

    left: float
    top: float
    width: float
    height: float
    center_y: float
    face_x: float

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def spans_y(self, y: float) -> bool:
        """Inclusive check that ``y`` lies within the paddle's vertical band."""

        return self.top <= y <= self.bottom


def left_paddle_box(field: Field, center_y: float, width: int, height: int, margin: int) -> PaddleBox:
    center_px = field.to_pixel_y(center_y)
    return PaddleBox(
        left=margin,
        top=center_px - height / 2,
        width=width,
        height=height,
        center_y=center_px,
        face_x=margin + width,
    )


def right_paddle_box(field: Field, center_y: float, width: int, height: int, margin: int) -> PaddleBox:
    center_px = field.to_pixel_y(center_y)
    left = field.width - margin - width
    return PaddleBox(
        left=left,
        top=center_px - height / 2,
        width=width,
        height=height,
        center_y=center_px,
        face_x=left,
    )
