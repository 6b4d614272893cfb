import time
from typing import Optional

from wrist_pong.config import GameConfig
from wrist_pong.control_types import Keypoint
from wrist_pong.game_state import GameState
from wrist_pong.pose_filter import PoseSampler
from wrist_pong.pose_worker import BackgroundPoseWorker
from wrist_pong.scheduler import CooperativeScheduler


INFERENCE_SECONDS = 0.06


class SlowEstimator:
    """Stands in for a pose model that needs longer than a physics tick."""

    def __init__(self, y: float = 0.615) -> None:
        self.y = y
        self.calls = 0

    def __call__(self) -> Optional[Keypoint]:
        time.sleep(INFERENCE_SECONDS)
        self.calls += 1
        return Keypoint(x=0.5, y=self.y, confidence=0.9)


class WorkerPoseSource:
    """Pose source that serves whatever the background worker last published."""

    def __init__(self, worker: BackgroundPoseWorker) -> None:
        self.worker = worker

    def estimate_once(self) -> Optional[Keypoint]:
        return self.worker.latest()

    def close(self) -> None:
        self.worker.stop()


def monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


def test_latest_does_not_wait_for_inference() -> None:
    worker = BackgroundPoseWorker(SlowEstimator()).start()
    try:
        started = time.monotonic()
        assert worker.latest() is None
        assert time.monotonic() - started < INFERENCE_SECONDS / 2

        assert worker.wait_for_version(1, timeout=2.0)
        keypoint = worker.latest()
        assert keypoint is not None and keypoint.y == 0.615
    finally:
        worker.stop()


def test_estimator_errors_publish_none_and_keep_running() -> None:
    calls = []

    def flaky() -> Optional[Keypoint]:
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("frame grab failed")
        return Keypoint(x=0.5, y=0.4, confidence=0.8)

    worker = BackgroundPoseWorker(flaky).start()
    try:
        assert worker.wait_for_version(2, timeout=2.0)
        assert worker.latest() == Keypoint(x=0.5, y=0.4, confidence=0.8)
    finally:
        worker.stop()


def test_stop_ends_the_thread() -> None:
    worker = BackgroundPoseWorker(SlowEstimator()).start()
    worker.stop()
    assert not worker._thread.is_alive()


def test_slow_pose_model_does_not_stall_physics_ticks() -> None:
    config = GameConfig()
    state = GameState.new_session(config.initial_direction)
    estimator = SlowEstimator()
    source = WorkerPoseSource(BackgroundPoseWorker(estimator).start())
    sampler = PoseSampler.from_config(state, source, config)

    scheduler = CooperativeScheduler(monotonic_ms)
    scheduler.add("pose-sampler", config.pose_interval_ms, sampler.sample)
    tick = scheduler.add("physics-tick", config.tick_interval_ms, lambda: None)

    duration = 0.5
    deadline = time.monotonic() + duration
    try:
        while time.monotonic() < deadline:
            scheduler.run_pending()
            time.sleep((scheduler.time_until_next() or 0) / 1000)
    finally:
        source.close()

    # 25 ticks fit in half a second at 20 ms; inference on this thread would leave room for about 10.
    assert tick.runs >= 15
    assert estimator.calls >= 1
    assert state.last_accepted_hand_pose is not None
    assert abs(state.paddle_y_human - 0.5) < 1e-9
