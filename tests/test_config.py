"""YAML defaults and sampling settings."""

import pytest

from inelastic_mc.config import SamplingConfig, get_default, load_defaults
from inelastic_mc.exceptions import ConfigurationError


def test_packaged_defaults():
    assert get_default('model.calc_type') == 'rudd1991'
    assert get_default('model.species') == 'H'
    assert get_default('sampling.energy_transfer_bins') == 5000
    assert get_default('sampling.angle_bins') == 400
    assert get_default('generation.max_attempts_factor') == 10


def test_missing_key_fallback():
    assert get_default('nonexistent.key', 'fallback') == 'fallback'
    assert get_default('sampling.angle_bins.deeper', 7) == 7


def test_defaults_are_cached():
    assert load_defaults() is load_defaults()


def test_sampling_config_from_defaults():
    sampling = SamplingConfig.from_defaults()
    assert sampling.energy_transfer_bins == 5000
    assert sampling.angle_bins == 400


@pytest.mark.parametrize("kwargs", [
    {'energy_transfer_bins': 1},
    {'angle_bins': 0},
    {'angle_bins': 10.5},
    {'energy_transfer_bins': True},
])
def test_invalid_sampling_config(kwargs):
    with pytest.raises(ConfigurationError):
        SamplingConfig(**kwargs)


def test_sampling_config_reports_every_error():
    with pytest.raises(ConfigurationError, match="2 error"):
        SamplingConfig(energy_transfer_bins=0, angle_bins=-3)


def test_environment_override(tmp_path, monkeypatch):
    override = tmp_path / "defaults.yaml"
    override.write_text("sampling:\n  energy_transfer_bins: 250\n  angle_bins: 50\n")
    monkeypatch.setenv("INELASTIC_MC_DEFAULTS_PATH", str(override))
    try:
        load_defaults.cache_clear()
        assert SamplingConfig().energy_transfer_bins == 250
        assert SamplingConfig().angle_bins == 50
        assert get_default('model.calc_type', 'rudd1991') == 'rudd1991'
        assert get_default('model.calc_type') is None
    finally:
        monkeypatch.delenv("INELASTIC_MC_DEFAULTS_PATH")
        load_defaults.cache_clear()
    assert get_default('sampling.energy_transfer_bins') == 5000


def test_missing_override_file(tmp_path, monkeypatch):
    monkeypatch.setenv("INELASTIC_MC_DEFAULTS_PATH", str(tmp_path / "absent.yaml"))
    load_defaults.cache_clear()
    try:
        with pytest.raises(ConfigurationError, match="not found"):
            get_default('sampling.angle_bins')
    finally:
        monkeypatch.delenv("INELASTIC_MC_DEFAULTS_PATH")
        load_defaults.cache_clear()


def test_override_must_be_a_mapping(tmp_path, monkeypatch):
    override = tmp_path / "defaults.yaml"
    override.write_text("- just\n- a list\n")
    monkeypatch.setenv("INELASTIC_MC_DEFAULTS_PATH", str(override))
    load_defaults.cache_clear()
    try:
        with pytest.raises(ConfigurationError, match="mapping"):
            load_defaults()
    finally:
        monkeypatch.delenv("INELASTIC_MC_DEFAULTS_PATH")
        load_defaults.cache_clear()
