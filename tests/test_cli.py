"""Tests for cli.py and config.py: argument parsing and the terminal run."""

import numpy as np
import pytest

from torusmarch import backend
from torusmarch.cli import build_parser, main, run_plot
from torusmarch.config import DEFAULT_HEIGHT, DEFAULT_WIDTH, AppConfig


class TestParser:
    def test_defaults(self):
        ns = build_parser().parse_args(["--backend", "numpy"])
        cfg = AppConfig.from_args(ns)
        assert cfg.width == DEFAULT_WIDTH == 60
        assert cfg.height == DEFAULT_HEIGHT == 30
        assert cfg.frames is None
        assert cfg.batch is True
        assert cfg.plot is False
        assert cfg.log_level == "WARNING"

    def test_flags(self):
        ns = build_parser().parse_args(
            ["--width", "20", "--height", "10", "--frames", "5", "--no-batch", "--log-level", "debug"],
        )
        cfg = AppConfig.from_args(ns)
        assert (cfg.width, cfg.height, cfg.frames) == (20, 10, 5)
        assert cfg.batch is False
        assert cfg.log_level == "DEBUG"

    def test_unknown_backend(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--backend", "opencl"])


class TestAppConfig:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"width": 0},
            {"height": -2},
            {"fps": 0.0},
            {"frames": -1},
            {"backend": "opencl"},
            {"log_level": "chatty"},
            {"plot": True, "frames": 0},
        ],
    )
    def test_validation(self, kwargs):
        with pytest.raises(ValueError):
            AppConfig(**kwargs)

    def test_zero_frames_allowed_in_terminal_mode(self):
        assert AppConfig(frames=0).frames == 0


class TestMain:
    def test_renders_frames_to_stdout(self, capsys):
        code = main(["--width", "16", "--height", "8", "--frames", "2", "--fps", "1000", "--backend", "numpy"])
        assert code == 0
        out = capsys.readouterr().out
        assert out.startswith("\033[2J\033[?25l")
        assert out.count("\033[H") == 2
        assert out.endswith("\033[?25h\033[2J")

    def test_scalar_path(self, capsys):
        code = main(["--width", "8", "--height", "4", "--frames", "1", "--fps", "1000", "--no-batch"])
        assert code == 0
        assert capsys.readouterr().out.count("\033[H") == 1

    def test_invalid_size_is_usage_error(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--width", "0"])
        assert exc.value.code == 2
        assert "grid size" in capsys.readouterr().err

    def test_plot_without_frames_is_usage_error(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--plot", "--frames", "0", "--backend", "numpy"])
        assert exc.value.code == 2
        assert "at least one frame" in capsys.readouterr().err

    def test_missing_cupy_reports_error(self, monkeypatch):
        monkeypatch.setattr(backend, "cp", None)
        assert main(["--backend", "cupy", "--frames", "1"]) == 1

    @pytest.mark.parametrize("batch", [True, False])
    def test_run_plot_renders_requested_frames(self, monkeypatch, batch):
        monkeypatch.setenv("TORUSMARCH_MPL_BACKEND", "Agg")
        from torusmarch.viz import plot

        monkeypatch.setattr(plot.RenderPlotter, "show", staticmethod(lambda: None))
        cfg = AppConfig(width=8, height=4, frames=2, plot=True, batch=batch, backend="numpy")
        assert run_plot(cfg) == 2


class TestBackend:
    def test_numpy(self):
        assert backend.get_array_module("numpy") is np

    def test_auto_without_cupy(self, monkeypatch):
        monkeypatch.setattr(backend, "cp", None)
        assert backend.get_array_module("auto") is np

    def test_unknown(self):
        with pytest.raises(ValueError):
            backend.get_array_module("opencl")

    def test_to_numpy(self):
        a = np.arange(3)
        assert backend.to_numpy(np, a) is a
