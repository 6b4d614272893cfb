import pytest

# The entry point imports the camera stack at module level.
pytest.importorskip("cv2")
pytest.importorskip("mediapipe")

from wrist_pong.main import build_parser, config_from_args  # noqa: E402


def test_cli_overrides_only_passed_values() -> None:
    args = build_parser().parse_args(["--ball-speed", "45", "--rebound", "reflect", "--no-camera"])
    config = config_from_args(args)
    assert config.ball_speed == 45.0
    assert config.rebound == "reflect"
    assert config.field_width == 640
    assert config.pose_score_threshold == 0.275
    assert args.no_camera is True
    assert args.strategy == "track"


def test_cli_rejects_invalid_threshold() -> None:
    args = build_parser().parse_args(["--score-threshold", "2"])
    with pytest.raises(ValueError):
        config_from_args(args)
