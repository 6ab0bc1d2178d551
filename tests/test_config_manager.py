import json

import pytest

from face_verify.config_manager import ConfigManager
from face_verify.errors import ConfigurationError


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


def test_defaults_are_valid():
    config = ConfigManager()

    config.validate_config()
    assert config.get("match_threshold") == pytest.approx(0.363)
    assert config.get("quit_key") == "q"
    assert config.get("models.face_detector.model_path").endswith("face_detection_yunet_2021dec.onnx")
    assert config.get("models.face_recognizer.model_path").endswith("face_recognition_sface_2021dec.onnx")


def test_file_is_deep_merged_over_defaults(tmp_path):
    path = tmp_path / "verify.json"
    path.write_text(json.dumps({"match_threshold": 0.5, "models": {"face_detector": {"top_k": 10}}}))

    config = ConfigManager(str(path))

    assert config.get("match_threshold") == 0.5
    assert config.get("models.face_detector.top_k") == 10
    assert config.get("models.face_detector.score_threshold") == pytest.approx(0.9)


def test_default_config_json_is_picked_up(tmp_path):
    (tmp_path / "config.json").write_text(json.dumps({"camera_index": 2}))
    assert ConfigManager().get("camera_index") == 2


def test_explicit_missing_file_is_an_error(tmp_path):
    with pytest.raises(ConfigurationError):
        ConfigManager(str(tmp_path / "missing.json"))


def test_malformed_file_is_an_error(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json")
    with pytest.raises(ConfigurationError):
        ConfigManager(str(path))


def test_dot_notation_get_and_set():
    config = ConfigManager()
    config.set("annotation.thickness", 4)
    config.set("extra.nested.value", 1)

    assert config.get("annotation.thickness") == 4
    assert config.get("extra.nested.value") == 1
    assert config.get("does.not.exist", "fallback") == "fallback"


@pytest.mark.parametrize(
    "key, value",
    [
        ("match_threshold", 1.5),
        ("face_selection", "largest"),
        ("recognizer_backend", "dlib"),
        ("quit_key", "quit"),
        ("poll_interval_ms", 0),
        ("camera_index", -1),
        ("stage_deadline_ms", -5),
        ("models.face_detector.input_width", 0),
        ("models.face_detector.nms_threshold", 2.0),
        ("annotation.color", [0, 255]),
    ],
)
def test_invalid_values_are_reported(key, value):
    config = ConfigManager()
    config.set(key, value)

    assert len(config.validation_errors()) == 1
    with pytest.raises(ConfigurationError, match=key.split(".")[-1]):
        config.validate_config()


def test_print_config(capsys):
    ConfigManager().print_config()
    out = capsys.readouterr().out
    assert "=== Current Configuration ===" in out
    assert "face_detector:" in out
