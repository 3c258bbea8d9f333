"""
Unit tests for configuration loading
"""
import json
import pytest
from core.config import DEFAULT_CONFIG, ConfigError, load_config


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    monkeypatch.delenv("TOXIROVER_FIREBASE_DATABASE_URL", raising=False)
    monkeypatch.delenv("TOXIROVER_FIREBASE_AUTH", raising=False)


class TestLoadConfig:
    """Test load_config"""

    def test_missing_file_uses_defaults(self, tmp_path):
        """Test a missing file gives the defaults"""
        config = load_config(tmp_path / "missing.json")
        assert config == DEFAULT_CONFIG
        assert config is not DEFAULT_CONFIG

    def test_merges_sections(self, tmp_path):
        """Test file values override defaults key by key"""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "firebase": {"database_url": "https://rover.firebaseio.com"},
            "update_rate": 1.0,
        }))
        config = load_config(path)
        assert config["firebase"]["database_url"] == "https://rover.firebaseio.com"
        assert config["firebase"]["reconnect_delay"] == 1.0
        assert config["update_rate"] == 1.0
        assert config["remote_console"]["port"] == 8765

    def test_invalid_json(self, tmp_path):
        """Test broken JSON raises ConfigError"""
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_non_object(self, tmp_path):
        """Test a JSON list is rejected"""
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_env_overrides(self, tmp_path, monkeypatch):
        """Test environment variables win over the file"""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"firebase": {"database_url": "https://a.firebaseio.com"}}))
        monkeypatch.setenv("TOXIROVER_FIREBASE_DATABASE_URL", "https://b.firebaseio.com")
        monkeypatch.setenv("TOXIROVER_FIREBASE_AUTH", "secret")
        config = load_config(path)
        assert config["firebase"]["database_url"] == "https://b.firebaseio.com"
        assert config["firebase"]["auth"] == "secret"
