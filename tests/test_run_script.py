import threading

import pytest

from gesture_arcade.adapters.camera.mock_camera import MockCamera
from gesture_arcade.orchestrator.errors import OpenError
from gesture_arcade.scripts import run
from gesture_arcade.services import runtime as runtime_module


def test_missing_model_exits_1(tmp_path, capsys):
    code = run.main(["--env-file", "", "--model-dir", str(tmp_path),
                     "--backend", "cv2", "--camera", "mock"])

    assert code == 1
    assert "model not loaded" in capsys.readouterr().err


def test_unusable_camera_exits_1(tmp_path, capsys, monkeypatch):
    def fail(self):
        raise OpenError("camera device 0 can't be opened")

    monkeypatch.setattr(MockCamera, "open", fail)
    code = run.main(["--env-file", "", "--model-dir", str(tmp_path),
                     "--backend", "mock", "--camera", "mock"])

    assert code == 1
    assert "camera unavailable" in capsys.readouterr().err


def test_bad_env_config_exits_2(monkeypatch, capsys):
    monkeypatch.setenv("MODEL_BACKEND", "torch")
    assert run.main(["--env-file", ""]) == 2
    assert "bad configuration" in capsys.readouterr().err


def test_args_override_env(monkeypatch, tmp_path):
    monkeypatch.setenv("GAME", "rps")
    monkeypatch.setenv("PASSCODE", "1111")
    args = run.parse_args(["--env-file", "", "--game", "passcode", "--tick", "0.5",
                           "--model-dir", str(tmp_path)])

    settings = run.settings_from_args(args)

    assert settings.game == "passcode"
    assert settings.passcode == "1111"
    assert settings.tick_seconds == 0.5
    assert settings.model_dir == tmp_path


def test_headless_run_until_stream_ends(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(run, "PRINT_POLL_S", 0.01)
    monkeypatch.setattr(
        runtime_module, "build_camera",
        lambda settings, status: MockCamera(status, width=4, height=4, fps=0, max_frames=50),
    )

    code = run.main(["--env-file", "", "--model-dir", str(tmp_path), "--backend", "mock",
                     "--camera", "mock", "--game", "caption", "--tick", "0.01", "--no-api"])

    out = capsys.readouterr()
    assert code == 0
    assert "capture stopped" in out.err


@pytest.mark.parametrize("argv", [["--game", "tetris"], ["--backend", "torch"]])
def test_rejects_unknown_choices(argv):
    with pytest.raises(SystemExit):
        run.parse_args(argv)


def test_camera_failure_mid_run_exits_1(tmp_path, monkeypatch, capsys, fake_camera):
    monkeypatch.setattr(run, "PRINT_POLL_S", 0.01)
    monkeypatch.setattr(runtime_module, "build_camera",
                        lambda settings, status: fake_camera(read_error=OSError("unplugged")))

    code = run.main(["--env-file", "", "--model-dir", str(tmp_path), "--backend", "mock",
                     "--camera", "mock", "--tick", "0.01", "--no-api"])

    assert code == 1
    assert "unplugged" in capsys.readouterr().err


@pytest.mark.parametrize("env", [{"GAME": "tetris"}, {"MODEL_LAYOUT": "chw"}])
def test_bad_env_value_exits_2_without_starting(env, tmp_path, monkeypatch, capsys):
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    before = {t.name for t in threading.enumerate()}

    code = run.main(["--env-file", "", "--model-dir", str(tmp_path),
                     "--backend", "mock", "--camera", "mock"])

    assert code == 2
    assert "bad configuration" in capsys.readouterr().err
    assert "capture" not in {t.name for t in threading.enumerate()} - before


def test_bad_passcode_exits_2_before_opening_camera(tmp_path, monkeypatch, capsys):
    cameras = []

    def build(settings, status):
        cameras.append(MockCamera(status, width=4, height=4, fps=0))
        return cameras[-1]

    monkeypatch.setattr(runtime_module, "build_camera", build)
    code = run.main(["--env-file", "", "--model-dir", str(tmp_path), "--backend", "mock",
                     "--camera", "mock", "--game", "passcode", "--passcode", "12"])

    assert code == 2
    assert "bad configuration" in capsys.readouterr().err
    assert cameras[0].close_count == 0
