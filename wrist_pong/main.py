"""Entry point wiring together the game and the pose source."""

from __future__ import annotations

import argparse
import logging
from contextlib import ExitStack
from typing import Optional

import pygame

from wrist_pong.config import REBOUND_MODES, GameConfig
from wrist_pong.control_types import RIGHT_WRIST, Keypoint, PoseSource
from wrist_pong.game import Game
from wrist_pong.physics import STRATEGIES
from wrist_pong.pose_filter import FrameBand
from wrist_pong.vision import CameraUnavailableError, MediaPipePoseSource


logger = logging.getLogger(__name__)


class KeyboardPoseSource(PoseSource):
    """Keyboard-driven stand-in for the camera, for debugging without a webcam.

    Up/Down (or W/S) move a synthetic right wrist inside the tracked band of
    the frame, so the game still receives ordinary keypoints that pass
    through the same normalization and acceptance filter.
    """

    def __init__(self, band: Optional[FrameBand] = None, step: float = 0.02) -> None:
        self.band = band or FrameBand()
        self.step = step
        self.raw_y = (self.band.min_y + self.band.max_y) / 2

    def estimate_once(self) -> Optional[Keypoint]:
        keys = pygame.key.get_pressed()
        if keys[pygame.K_UP] or keys[pygame.K_w]:
            self.raw_y -= self.step
        if keys[pygame.K_DOWN] or keys[pygame.K_s]:
            self.raw_y += self.step
        self.raw_y = max(self.band.min_y, min(self.band.max_y, self.raw_y))
        return Keypoint(x=0.5, y=self.raw_y, confidence=1.0, name=RIGHT_WRIST)

    def close(self) -> None:
        # Nothing to release for keyboard-only mode.
        return


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play Pong by moving your right wrist in front of a webcam.")
    parser.add_argument("--no-camera", action="store_true", help="Disable camera control and use Up/Down keys.")
    parser.add_argument("--camera-index", type=int, default=0, help="OpenCV camera index to open.")
    parser.add_argument("--mirror", action="store_true", help="Mirror the wrist x position and the debug view.")
    parser.add_argument(
        "--show-debug-overlay",
        action="store_true",
        help="Show the camera feed with the tracked band and wrist position.",
    )
    parser.add_argument("--width", type=int, default=None, help="Play-field width in pixels.")
    parser.add_argument("--height", type=int, default=None, help="Play-field height in pixels.")
    parser.add_argument("--pose-interval-ms", type=int, default=None, help="Delay between pose samples.")
    parser.add_argument("--tick-interval-ms", type=int, default=None, help="Delay between physics/render ticks.")
    parser.add_argument(
        "--ball-speed",
        type=float,
        default=None,
        help="Speed divisor for the ball; larger values make it slower.",
    )
    parser.add_argument(
        "--score-threshold",
        type=float,
        default=None,
        help="Minimum wrist confidence (0-1) for a pose sample to move the paddle.",
    )
    parser.add_argument(
        "--movement-threshold",
        type=float,
        default=None,
        help="Minimum normalized y change before the paddle follows the wrist.",
    )
    parser.add_argument(
        "--rebound",
        choices=REBOUND_MODES,
        default=None,
        help="'angle' rebounds depending on where the paddle is hit; 'reflect' only flips x.",
    )
    parser.add_argument("--strategy", choices=sorted(STRATEGIES), default="track", help="Computer paddle behavior.")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging verbosity.",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> GameConfig:
    return GameConfig().with_overrides(
        field_width=args.width,
        field_height=args.height,
        pose_interval_ms=args.pose_interval_ms,
        tick_interval_ms=args.tick_interval_ms,
        ball_speed=args.ball_speed,
        pose_score_threshold=args.score_threshold,
        y_movement_threshold=args.movement_threshold,
        rebound=args.rebound,
    )


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        config = config_from_args(args)
    except ValueError as exc:
        parser.error(str(exc))
    band = FrameBand(min_y=config.frame_min_y, max_y=config.frame_max_y)

    # ExitStack keeps teardown localized so the camera is released even if the game loop raises.
    with ExitStack() as stack:
        pose_source: PoseSource
        if args.no_camera:
            pose_source = KeyboardPoseSource(band=band)
        else:
            try:
                pose_source = MediaPipePoseSource(
                    camera_index=args.camera_index,
                    mirror=args.mirror,
                    show_debug_overlay=args.show_debug_overlay,
                    band=band,
                )
            except CameraUnavailableError as exc:
                logger.error("Cannot start a session: %s", exc)
                parser.exit(1, f"{exc}\n")
        stack.callback(pose_source.close)

        game = Game(pose_source, config=config, strategy=STRATEGIES[args.strategy])
        game.run()


if __name__ == "__main__":
    main()
