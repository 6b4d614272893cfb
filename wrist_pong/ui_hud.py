"""Utility routines for drawing the camera debug overlay with OpenCV.

The wrist debug window uses these helpers to show what the pose model sees:
a darkened text panel, the vertical band the wrist is mapped from, and a
marker on the detected wrist. All functions accept a BGR frame (NumPy array)
and draw in place.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import cv2

DEFAULT_COLOR = (255, 255, 255)
DEFAULT_THICKNESS = 1
BAND_COLOR = (0, 255, 255)
WRIST_COLOR = (0, 0, 255)


def draw_panel(surface, x: int, y: int, w: int, h: int, alpha: int = 140) -> None:
    """Darken the ``w`` x ``h`` region at ``(x, y)`` so HUD text stays readable.

    ``alpha`` is the opacity in ``[0, 255]``; 255 turns the region black.
    """

    keep = 1.0 - max(0, min(255, alpha)) / 255.0
    region = surface[y:y + h, x:x + w]
    region[:] = (region * keep).astype(surface.dtype)


def draw_band_guides(surface, min_y: float, max_y: float, color: Tuple[int, int, int] = BAND_COLOR) -> None:
    """Draw horizontal lines at the normalized top and bottom of the tracked band."""

    height, width = surface.shape[:2]
    for normalized in (min_y, max_y):
        y = int(normalized * height)
        cv2.line(surface, (0, y), (width, y), color, 2)


def draw_keypoint(surface, x: float, y: float, radius: int = 8, color: Tuple[int, int, int] = WRIST_COLOR) -> None:
    height, width = surface.shape[:2]
    cv2.circle(surface, (int(x * width), int(y * height)), radius, color, -1)


def draw_lines(
    surface,
    lines: Sequence[str],
    x: int,
    y: int,
    line_height: int,
    *,
    font_scale: float = 0.55,
    color: Tuple[int, int, int] = DEFAULT_COLOR,
    thickness: int = DEFAULT_THICKNESS,
) -> int:
    """Stack ``lines`` downward from ``(x, y)`` and return how many were drawn."""

    for idx, text in enumerate(lines):
        cv2.putText(surface, text, (x, y + idx * line_height), cv2.FONT_HERSHEY_SIMPLEX, font_scale, color, thickness)
    return len(lines)
