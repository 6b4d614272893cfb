"""Camera + MediaPipe Pose wrist tracking kept separate from gameplay logic."""

from __future__ import annotations

import logging
import threading
import time
from typing import Optional

import cv2
import mediapipe as mp
import numpy as np

from wrist_pong.control_types import RIGHT_WRIST, Keypoint, PoseSource
from wrist_pong.pose_filter import FrameBand
from wrist_pong.pose_worker import BackgroundPoseWorker
from wrist_pong.ui_hud import draw_band_guides, draw_keypoint, draw_lines, draw_panel

# Some Windows Python environments ship with a lightweight "mediapipe" package
# that does not expose ``solutions`` at the top level, so we attempt a second
# import path and keep a helpful error ready for callers.
try:
    from mediapipe import solutions as mp_solutions
except Exception:
    mp_solutions = getattr(mp, "solutions", None)


logger = logging.getLogger(__name__)


class CameraUnavailableError(RuntimeError):
    """The camera or the pose model could not be started."""


class MediaPipePoseSource(PoseSource):
    """Reads frames from a webcam and estimates the right wrist with MediaPipe Pose.

    Capture and inference both run on a :class:`BackgroundPoseWorker`, so
    neither ``cap.read()`` nor ``pose.process`` can hold up a physics tick.
    :meth:`estimate_once` only returns the newest published wrist. The
    OpenCV debug window is drawn from the caller's (main) thread, using the
    frame the latest estimate was made on.
    """

    def __init__(
        self,
        camera_index: int = 0,
        mirror: bool = False,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
        show_debug_overlay: bool = False,
        band: Optional[FrameBand] = None,
        camera_width: int = 640,
        camera_height: int = 480,
        hud_alpha: int = 140,
    ) -> None:
        if mp_solutions is None:
            # Raise a clear, actionable error instead of the cryptic attribute error.
            raise CameraUnavailableError(
                "mediapipe.solutions could not be imported. Try reinstalling mediapipe "
                "(pip install --upgrade mediapipe)."
            )

        self.cap = cv2.VideoCapture(camera_index)
        if not self.cap.isOpened():
            raise CameraUnavailableError(
                f"Could not open camera {camera_index}. Check that a webcam is connected "
                "and that this program may access it."
            )
        self.camera_width = camera_width
        self.camera_height = camera_height
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.camera_width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.camera_height)
        self.cap.set(cv2.CAP_PROP_FPS, 30)

        self.pose = mp_solutions.pose.Pose(
            model_complexity=0,
            smooth_landmarks=True,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
        )
        self.mirror = mirror
        self.show_debug_overlay = show_debug_overlay
        self.band = band or FrameBand()
        self.hud_alpha = max(0, min(255, int(hud_alpha)))
        self.window_name = "Wrist Debug"
        self.last_time = time.time()
        self.last_fps = 0.0

        # Frame the latest estimate was made on, kept for the debug window only.
        self._frame_lock = threading.Lock()
        self._latest_frame: Optional[np.ndarray] = None
        self._worker = BackgroundPoseWorker(self._capture_and_estimate).start()
        logger.info("Camera %d opened for wrist tracking", camera_index)

    def _capture_and_estimate(self) -> Optional[Keypoint]:
        """Worker-thread body: read one frame and run pose inference on it."""

        success, frame = self.cap.read()
        if not success:
            time.sleep(0.01)
            return None

        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        rgb_frame.flags.writeable = False
        keypoint = self._extract_wrist(self.pose.process(rgb_frame))

        now = time.time()
        with self._frame_lock:
            dt = now - self.last_time
            if dt > 0:
                self.last_fps = 0.9 * self.last_fps + 0.1 * (1.0 / dt)
            self.last_time = now
            if self.show_debug_overlay:
                self._latest_frame = frame
        return keypoint

    def _grab_frame(self) -> Optional[np.ndarray]:
        with self._frame_lock:
            frame = self._latest_frame
        return None if frame is None else frame.copy()

    def _extract_wrist(self, results) -> Optional[Keypoint]:
        if results is None or results.pose_landmarks is None:
            return None
        landmark = results.pose_landmarks.landmark[mp_solutions.pose.PoseLandmark.RIGHT_WRIST]
        x = float(np.clip(landmark.x, 0.0, 1.0))
        if self.mirror:
            x = 1.0 - x
        y = float(np.clip(landmark.y, 0.0, 1.0))
        return Keypoint(x=x, y=y, confidence=float(landmark.visibility), name=RIGHT_WRIST)

    def estimate_once(self) -> Optional[Keypoint]:
        """Return the newest right-wrist estimate without waiting for inference."""

        keypoint = self._worker.latest()
        if self.show_debug_overlay:
            frame = self._grab_frame()
            if frame is not None:
                self._overlay_debug(frame, keypoint)
        return keypoint

    def _overlay_debug(self, frame: np.ndarray, keypoint: Optional[Keypoint]) -> None:
        """Show the camera view with the tracked band and wrist so players can self-debug."""

        if self.mirror:
            frame = cv2.flip(frame, 1)
        draw_band_guides(frame, self.band.min_y, self.band.max_y)

        lines = ["Keys: Esc in the game window quits"]
        if keypoint is not None:
            draw_keypoint(frame, keypoint.x, keypoint.y)
            lines.append(f"Raw y: {keypoint.y:.3f}")
            lines.append(f"Field y: {self.band.normalize(keypoint.y):.3f}")
            lines.append(f"Confidence: {keypoint.confidence:.2f}")
        else:
            lines.append("Detection: no person")

        with self._frame_lock:
            pose_fps = self.last_fps
        lines.append(f"Pose FPS: {pose_fps:.1f}")

        draw_panel(frame, 8, 8, 300, 22 * len(lines) + 16, alpha=self.hud_alpha)
        draw_lines(frame, lines, 20, 30, 22)
        cv2.imshow(self.window_name, frame)
        cv2.waitKey(1)

    def close(self) -> None:
        # Stop inference before releasing what the worker thread reads from.
        self._worker.stop()
        if self.cap.isOpened():
            self.cap.release()
        self.pose.close()
        if self.show_debug_overlay:
            cv2.destroyAllWindows()
