"""Typed interfaces shared between the game loop, pose sources and renderers.

This module centralizes the boundary types so that the pygame game loop and
the MediaPipe/OpenCV vision stack can evolve independently. The simulation
only ever sees a :class:`Keypoint` coming in and issues :class:`RenderSink`
calls going out; nothing here imports pygame, OpenCV or MediaPipe.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Tuple


RIGHT_WRIST = "right_wrist"


@dataclass(frozen=True)
class Keypoint:
    """A single named body landmark from a pose model.

    Attributes:
        x: Normalized horizontal position ``[0, 1]`` of the video frame.
        y: Normalized vertical position ``[0, 1]``; ``0`` is the top of the frame.
        confidence: Model confidence for this landmark. ``None`` when the
            source cannot provide one, which the acceptance filter rejects.
        name: Landmark name, e.g. ``"right_wrist"``.
    """

    x: float
    y: float
    confidence: Optional[float]
    name: str = RIGHT_WRIST


class PoseSource(Protocol):
    """Interface implemented by pose providers (camera + model, keyboard, tests)."""

    def estimate_once(self) -> Optional[Keypoint]:  # pragma: no cover - protocol definition
        """Return the current right-wrist keypoint, or ``None`` if nobody was detected."""
        ...

    def close(self) -> None:  # pragma: no cover - protocol definition
        ...


class RenderSink(Protocol):
    """Primitive drawing commands addressed in pixel space."""

    def clear(self) -> None:  # pragma: no cover - protocol definition
        ...

    def draw_center_line(self) -> None:  # pragma: no cover - protocol definition
        ...

    def draw_scores(self, computer: int, player: int) -> None:  # pragma: no cover - protocol definition
        ...

    def draw_ball(self, center: Tuple[int, int], radius: int) -> None:  # pragma: no cover - protocol definition
        ...

    def draw_paddle(self, left: float, top: float, width: float, height: float) -> None:  # pragma: no cover
        ...
