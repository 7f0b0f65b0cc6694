import json

import numpy as np
from typer.testing import CliRunner

from periodscan.cli import app


def make_signal(tmp_path, runner, *extra):
    path = tmp_path / "tiled.npy"
    result = runner.invoke(app, ["synth", str(path), "--period", "700", *extra])
    assert result.exit_code == 0, result.output
    return path


def test_synth_then_estimate(tmp_path, settings):
    runner = CliRunner()
    path = make_signal(tmp_path, runner)
    assert np.load(path).shape == (7060 + 1041 + 529,)

    result = runner.invoke(app, ["estimate", str(path)])
    assert result.exit_code == 0, result.output
    assert "offset: 2320, phase: 700" in result.output
    assert "sum: 2800" in result.output
    assert "phase: 700 (mean 700.000)" in result.output
    assert "freq: 46.811429 Hz" in result.output
    assert "window error loops:" in result.output


def test_estimate_offsets_and_overrides(tmp_path, settings):
    runner = CliRunner()
    path = make_signal(tmp_path, runner, "--length", "2000")
    result = runner.invoke(
        app,
        [
            "--set",
            "search.sample_rate=44100",
            "estimate",
            str(path),
            "-o",
            "0",
            "-o",
            "100",
            "--workers",
            "2",
            "--no-trace",
        ],
    )
    assert result.exit_code == 0, result.output
    assert "freq: 63.000000 Hz" in result.output
    assert "offset:" not in result.output


def test_estimate_reports_out_of_range(tmp_path, settings):
    runner = CliRunner()
    path = make_signal(tmp_path, runner, "--length", "1200")
    result = runner.invoke(app, ["estimate", str(path), "-o", "0"])
    assert result.exit_code == 1
    assert "exceeds buffer" in result.output


def test_estimate_from_config_file(tmp_path, settings):
    runner = CliRunner()
    path = make_signal(tmp_path, runner, "--length", "2000")
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"source": {"path": str(path)}, "average": {"offsets": [0, 300]}}))
    result = runner.invoke(app, ["--config", str(cfg), "estimate"])
    assert result.exit_code == 0, result.output
    assert "phase: 700" in result.output


def test_curve_writes_csv_and_plot(tmp_path, settings):
    runner = CliRunner()
    path = make_signal(tmp_path, runner, "--length", "1600")
    out = tmp_path / "curve.csv"
    png = tmp_path / "curve.png"
    result = runner.invoke(
        app,
        ["curve", str(path), "--phase-min", "650", "--phase-max", "750", "--output", str(out), "--plot", "--save", str(png)],
    )
    assert result.exit_code == 0, result.output
    assert "best phase: 700 error: 0" in result.output
    table = np.loadtxt(out, delimiter=",", skiprows=1)
    assert table.shape == (100, 2)
    assert table[50, 0] == 700 and table[50, 1] == 0
    assert png.exists()


def test_note():
    runner = CliRunner()
    result = runner.invoke(app, ["note", "440"])
    assert result.exit_code == 0
    assert "A4 (+0.0 cents, +0 half steps from A4)" in result.output
    result = runner.invoke(app, ["note", "0"])
    assert result.exit_code != 0


def test_bad_override():
    runner = CliRunner()
    result = runner.invoke(app, ["--set", "search.nope=1", "note", "440"])
    assert result.exit_code != 0
    result = runner.invoke(app, ["--set", "search.phase_min=2000", "note", "440"])
    assert result.exit_code != 0
    # window is derived from the phase range and cannot be set directly
    result = runner.invoke(app, ["--set", "search.window=100", "note", "440"])
    assert result.exit_code != 0
    assert "unknown configuration key: search.window" in result.output


def test_phase_options_are_validated(tmp_path, settings):
    runner = CliRunner()
    path = make_signal(tmp_path, runner, "--length", "2000")
    result = runner.invoke(app, ["estimate", str(path), "-o", "0", "--phase-min", "0"])
    assert result.exit_code != 0
    assert "invalid phase range" in result.output
    assert "non-zero" not in result.output

    result = runner.invoke(app, ["curve", str(path), "--phase-min", "900", "--phase-max", "800"])
    assert result.exit_code != 0
    assert "invalid phase range" in result.output

    result = runner.invoke(app, ["estimate", str(path), "-o", "0", "--phase-min", "600", "--phase-max", "800"])
    assert result.exit_code == 0, result.output
    assert "phase: 700" in result.output


def test_estimate_reports_corrupt_file(tmp_path, settings):
    runner = CliRunner()
    path = tmp_path / "corrupt.npy"
    path.write_bytes(b"not a numpy file")
    result = runner.invoke(app, ["estimate", str(path)])
    assert result.exit_code == 1
    assert "error:" in result.output
    assert result.exception is None or isinstance(result.exception, SystemExit)
