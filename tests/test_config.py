from pathlib import Path
import pytest
from kvprobe.config import AppConfig
from kvprobe.exceptions import ConfigurationError

def test_defaults(monkeypatch):
    for key in ("TARGETS", "INTERVAL_MS", "OUTPUT_DIR", "LOG_LEVEL", "MAX_TICKS"):
        monkeypatch.delenv(f"KVPROBE_{key}", raising=False)
    config = AppConfig()

    assert config.targets == []
    assert config.interval_ms == 1000
    assert config.output_dir == Path("Results")
    assert config.log_level == "INFO"
    assert config.max_ticks is None

def test_from_yaml(tmp_path):
    path = tmp_path / "kvprobe.yaml"
    path.write_text(
        "targets:\n"
        "  - cache01:6379\n"
        "  - redis://cache02:6380\n"
        "interval_ms: 500\n"
        "output_dir: out\n"
        "log_level: debug\n"
    )

    config = AppConfig.from_yaml(path)

    assert config.targets == ["cache01:6379", "redis://cache02:6380"]
    assert config.interval_ms == 500
    assert config.output_dir == Path("out")
    assert config.log_level == "DEBUG"

def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        AppConfig.from_yaml(tmp_path / "nope.yaml")

@pytest.mark.parametrize("content", [
    "interval_ms: 0\n",
    "interval_ms: [1, 2\n",
    "log_level: chatty\n",
    "- just\n- a list\n",
])
def test_invalid_file(tmp_path, content):
    path = tmp_path / "bad.yaml"
    path.write_text(content)

    with pytest.raises(ConfigurationError):
        AppConfig.from_yaml(path)

def test_env_vars(monkeypatch):
    monkeypatch.setenv("KVPROBE_INTERVAL_MS", "250")
    monkeypatch.setenv("KVPROBE_TARGETS", '["a:1", "b:2"]')

    config = AppConfig()

    assert config.interval_ms == 250
    assert config.targets == ["a:1", "b:2"]

def test_overrides_skip_unset_values():
    base = AppConfig(targets=["from-file:1"], interval_ms=200)

    assert base.with_overrides(targets=None, interval_ms=None).targets == ["from-file:1"]
    assert base.with_overrides(targets=[]).targets == ["from-file:1"]

    updated = base.with_overrides(targets=["cli:1"], max_ticks=5)
    assert updated.targets == ["cli:1"]
    assert updated.interval_ms == 200
    assert updated.max_ticks == 5

def test_overrides_are_validated():
    with pytest.raises(ConfigurationError):
        AppConfig().with_overrides(interval_ms=-1)
