import json

import pytest
from pydantic import ValidationError

from sigscope.config import Settings, load_settings


def test_defaults():
    s = Settings()
    assert s.spectrum.window == "hanning"
    assert s.spectrum.window_size == 256
    assert s.filter.order == 2
    assert s.statistics.histogram_bins == 10
    assert s.generator.seed is None


def test_from_env(monkeypatch):
    monkeypatch.setenv("SIGSCOPE_SPECTRUM__WINDOW", "HAMMING")
    monkeypatch.setenv("SIGSCOPE_FILTER__ORDER", "1")
    s = Settings()
    assert s.spectrum.window == "hamming"
    assert s.filter.order == 1


def test_invalid_values_rejected():
    with pytest.raises(ValidationError):
        Settings.model_validate({"spectrum": {"window": "triangle"}})
    with pytest.raises(ValidationError):
        Settings.model_validate({"spectrum": {"overlap": 1.0}})
    s = Settings()
    with pytest.raises(ValidationError):
        s.statistics.ema_alpha = 0.0


def test_load_settings_json(tmp_path):
    p = tmp_path / "cfg.json"
    p.write_text(json.dumps({"spectrum": {"window_size": 128}, "statistics": {"outlier_factor": 3}}))
    s = load_settings(p)
    assert s.spectrum.window_size == 128
    assert s.statistics.outlier_factor == 3.0


def test_load_settings_rejects_non_mapping(tmp_path):
    p = tmp_path / "cfg.json"
    p.write_text("[1, 2]")
    with pytest.raises(TypeError):
        load_settings(p)


try:
    import yaml  # type: ignore
except Exception:  # pragma: no cover
    yaml = None


@pytest.mark.skipif(yaml is None, reason="PyYAML not installed")
def test_load_settings_yaml(tmp_path):
    p = tmp_path / "cfg.yaml"
    p.write_text("generator:\n  sample_rate: 48000\nlogging:\n  level: DEBUG\n")
    s = load_settings(p)
    assert s.generator.sample_rate == 48000.0
    assert s.logging.level == "DEBUG"
