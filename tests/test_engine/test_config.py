"""Tests for settings and system configuration."""

import pytest
from pydantic import ValidationError

from percepta.config import Settings, SystemConfig
from percepta.engine.config import CodecConfig


def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("PERCEPTA_MODE", "rich")
    monkeypatch.setenv("PERCEPTA_MAX_MEMORY_SIZE", "7")
    s = Settings()
    assert s.mode == "rich"
    assert s.max_memory_size == 7


def test_from_settings_applies_non_none_overrides():
    cfg = SystemConfig.from_settings(Settings(), mode="compact", culture=None, seed=3)
    assert cfg.mode == "compact"
    assert cfg.culture == "universal"
    assert cfg.seed == 3


def test_system_config_validates():
    with pytest.raises(ValidationError):
        SystemConfig(mode="huge")
    with pytest.raises(ValidationError):
        SystemConfig(confidence_threshold=1.5)
    with pytest.raises(ValidationError):
        SystemConfig(max_memory_size=0)


def test_codec_threshold_per_mode():
    cfg = CodecConfig()
    assert cfg.threshold_for("compact") == cfg.edge_threshold_compact
    assert cfg.threshold_for("balanced") == cfg.edge_threshold
    assert cfg.threshold_for("rich") == cfg.edge_threshold
