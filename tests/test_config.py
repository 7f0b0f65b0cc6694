import json

import pytest
from pydantic import ValidationError

from periodscan.config import ERROR_MAX, PHASE_MAX, PHASE_MIN, SAMPLE_RATE, Settings, load_settings


def test_defaults(settings):
    assert settings.search.sample_rate == SAMPLE_RATE
    assert settings.search.phase_min == PHASE_MIN
    assert settings.search.phase_max == PHASE_MAX
    assert settings.search.error_max is None
    assert settings.search.window == PHASE_MAX - PHASE_MIN
    assert settings.average.offsets == [0, 1015, 2320, 7060]


def test_from_env(monkeypatch, settings):
    monkeypatch.setenv("PERIODSCAN_SEARCH__PHASE_MIN", "400")
    monkeypatch.setenv("PERIODSCAN_SEARCH__SAMPLE_RATE", "44100")
    s = Settings.from_env()
    assert s.search.phase_min == 400
    assert s.search.sample_rate == 44100
    assert s.search.window == PHASE_MAX - 400


def test_from_env_offsets(monkeypatch, settings):
    monkeypatch.setenv("PERIODSCAN_AVERAGE__OFFSETS", "0,100,300")
    s = Settings.from_env()
    assert s.average.offsets == [0, 100, 300]


def test_load_settings_json(tmp_path):
    p = tmp_path / "cfg.json"
    p.write_text(json.dumps({"search": {"phase_min": 100, "phase_max": 300}, "average": {"workers": 2}}))
    s = load_settings(p)
    assert s.search.window == 200
    assert s.average.workers == 2


def test_load_settings_yaml(tmp_path):
    p = tmp_path / "cfg.yaml"
    p.write_text("search:\n  metric: squared\n  seed_index: zero\naverage:\n  offsets: [5, 6]\n")
    s = load_settings(p)
    assert s.search.metric == "squared"
    assert s.search.seed_index == "zero"
    assert s.average.offsets == [5, 6]


def test_invalid_settings(tmp_path):
    with pytest.raises(ValidationError):
        Settings.model_validate({"search": {"phase_min": 700, "phase_max": 700}})
    with pytest.raises(ValidationError):
        Settings.model_validate({"source": {"sample_bits": 12}})
    with pytest.raises(ValidationError):
        Settings.model_validate({"search": {"seed_index": "middle"}})
    p = tmp_path / "list.json"
    p.write_text("[1, 2]")
    with pytest.raises(TypeError):
        load_settings(p)
