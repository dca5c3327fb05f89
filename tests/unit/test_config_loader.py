import pytest
import yaml

from autopanel.config_loader import DEFAULTS, ConfigLoader
from autopanel.errors import ConfigurationError


@pytest.fixture(autouse=True)
def _reset_config():
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()


def test_env_override_and_defaults(monkeypatch, tmp_path):
    config_path = tmp_path / "autopanel.yaml"
    config_path.write_text(
        yaml.dump({"browser": {"base_url": "http://example.com", "headless": False}}),
        encoding="utf-8",
    )

    loader = ConfigLoader(config_path=config_path)
    assert loader.get("browser.base_url") == "http://example.com"
    assert loader.get("browser.headless") is False
    assert loader.get("finder.timeout") == DEFAULTS["finder.timeout"]
    assert loader.get("finder.unknown", 7) == 7

    ConfigLoader.reset()
    monkeypatch.setenv("BROWSER_BASE_URL", "http://env.example.com")
    monkeypatch.setenv("FINDER_TIMEOUT", "250")
    monkeypatch.setenv("BROWSER_HEADLESS", "yes")
    loader = ConfigLoader(config_path=config_path)
    assert loader.get("browser.base_url") == "http://env.example.com"
    assert loader.get("finder.timeout") == 250
    assert loader.get("browser.headless") is True


def test_config_path_from_environment(monkeypatch, tmp_path):
    config_path = tmp_path / "other.yaml"
    config_path.write_text(yaml.dump({"browser": {"type": "firefox"}}), encoding="utf-8")
    monkeypatch.setenv("AUTOPANEL_CONFIG", str(config_path))

    assert ConfigLoader().get("browser.type") == "firefox"


def test_missing_file_uses_defaults(tmp_path):
    loader = ConfigLoader(config_path=tmp_path / "missing.yaml")
    assert loader.get("browser.type") == "chromium"
    assert loader.get_section("browser") == {}


def test_singleton():
    assert ConfigLoader() is ConfigLoader()


def test_reload_updates_values(tmp_path):
    config_path = tmp_path / "autopanel.yaml"
    config_path.write_text(yaml.dump({"finder": {"timeout": 5}}), encoding="utf-8")

    loader = ConfigLoader(config_path=config_path)
    assert loader.get("finder.timeout") == 5

    config_path.write_text(yaml.dump({"finder": {"timeout": 15}}), encoding="utf-8")
    loader.reload()
    assert loader.get("finder.timeout") == 15
    assert loader.get_section("finder") == {"timeout": 15}


def test_invalid_yaml(tmp_path):
    config_path = tmp_path / "broken.yaml"
    config_path.write_text("browser: [unclosed", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        ConfigLoader(config_path=config_path)
