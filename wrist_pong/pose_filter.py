"""Turning noisy, intermittent wrist detections into a stable paddle position.

Three small pieces keep this testable without a camera:

* :class:`FrameBand` maps the raw vertical wrist position from video-frame
  space into play-field space, discarding the top quarter of the frame and
  pinning near-bottom detections to the edge.
* :class:`AcceptanceFilter` is the confidence + movement dead-band gate.
* :class:`PoseSampler` is the periodic task that glues a :class:`PoseSource`
  to the shared :class:`GameState`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from wrist_pong.config import GameConfig
from wrist_pong.control_types import Keypoint, PoseSource
from wrist_pong.game_state import GameState


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameBand:
    """Vertical slice of the video frame the player's wrist is expected in.

    Anything above ``min_y`` becomes ``0`` and anything below ``max_y``
    becomes ``1``; the slice in between is stretched linearly onto ``[0, 1]``.
    """

    min_y: float = 0.25
    max_y: float = 0.98

    def normalize(self, raw_y: float) -> float:
        if raw_y < self.min_y:
            return 0.0
        if raw_y > self.max_y:
            return 1.0
        return (raw_y - self.min_y) / (self.max_y - self.min_y)

    def normalize_keypoint(self, keypoint: Optional[Keypoint]) -> Optional[Keypoint]:
        """Return a copy of ``keypoint`` with ``y`` remapped to play-field space."""

        if keypoint is None:
            return None
        return replace(keypoint, y=self.normalize(keypoint.y))


@dataclass
class AcceptanceFilter:
    """Confidence gate plus a movement dead band to keep the paddle still.

    The very first confident sample is always accepted so the paddle appears
    as soon as the player is seen; after that a sample must move at least
    ``movement_threshold`` away from the last accepted one.
    """

    score_threshold: float = 0.275
    movement_threshold: float = 0.01

    def accepts(self, sample: Optional[Keypoint], previous: Optional[Keypoint]) -> bool:
        if sample is None or sample.confidence is None:
            return False
        if sample.confidence < self.score_threshold:
            return False
        if previous is None:
            return True
        return abs(sample.y - previous.y) >= self.movement_threshold


class PoseSampler:
    """Periodic task that polls the pose source and updates the hand pose.

    This is the only writer of ``GameState.last_accepted_hand_pose``. Missing
    detections, rejected samples and pose-source exceptions all leave the
    previous pose untouched; the next run simply tries again.
    """

    def __init__(
        self,
        state: GameState,
        source: PoseSource,
        band: Optional[FrameBand] = None,
        acceptance: Optional[AcceptanceFilter] = None,
    ) -> None:
        self.state = state
        self.source = source
        self.band = band or FrameBand()
        self.acceptance = acceptance or AcceptanceFilter()

    @classmethod
    def from_config(cls, state: GameState, source: PoseSource, config: GameConfig) -> "PoseSampler":
        return cls(
            state,
            source,
            band=FrameBand(min_y=config.frame_min_y, max_y=config.frame_max_y),
            acceptance=AcceptanceFilter(
                score_threshold=config.pose_score_threshold,
                movement_threshold=config.y_movement_threshold,
            ),
        )

    def _fetch(self) -> Optional[Keypoint]:
        try:
            return self.source.estimate_once()
        except Exception:
            # Keep the game running even if the camera or model hiccups.
            logger.warning("Pose source failed; keeping previous hand pose", exc_info=True)
            return None

    def sample(self) -> bool:
        """Run one sampling step and report whether the hand pose changed."""

        sample = self.band.normalize_keypoint(self._fetch())
        if sample is None:
            return False

        previous = self.state.last_accepted_hand_pose
        if not self.acceptance.accepts(sample, previous):
            logger.debug("Rejected wrist sample y=%.3f confidence=%s", sample.y, sample.confidence)
            return False

        self.state.last_accepted_hand_pose = sample
        logger.debug("Accepted wrist sample y=%.3f confidence=%.3f", sample.y, sample.confidence)
        return True
