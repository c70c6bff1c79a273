"""Tests for configuration loading and saving."""

import pytest

from ljkit.config import (
    ClientConfig,
    Config,
    ServerConfig,
    ensure_directories,
    get_xdg_config_home,
    get_xdg_data_home,
)
from ljkit.errors import ConfigError
from ljkit.protocol.transport import DEFAULT_SERVER_URL, HTTPTransport


@pytest.fixture
def xdg_dirs(temp_dir, monkeypatch):
    """Point the XDG directories at a temporary location."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(temp_dir / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(temp_dir / "data"))
    return temp_dir


class TestPaths:

    def test_xdg_environment(self, xdg_dirs):
        assert get_xdg_config_home() == xdg_dirs / "config" / "ljkit"
        assert get_xdg_data_home() == xdg_dirs / "data" / "ljkit"
        assert Config.config_file_path() == xdg_dirs / "config" / "ljkit" / "config.toml"

    def test_home_fallback(self, monkeypatch, temp_dir):
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setenv("HOME", str(temp_dir))
        assert get_xdg_config_home() == temp_dir / ".config" / "ljkit"

    def test_ensure_directories(self, xdg_dirs):
        dirs = ensure_directories()
        assert dirs["config"].is_dir()
        assert (dirs["data"] / "accounts").is_dir()

    def test_snapshot_path_is_safe(self, xdg_dirs):
        path = Config.snapshot_path("alice@www.livejournal.com:443")
        assert path.name == "alice@www.livejournal.com_443.json"
        assert path.parent == xdg_dirs / "data" / "ljkit" / "accounts"


class TestConfig:

    def test_defaults_without_file(self, xdg_dirs):
        config = Config.load()

        assert config.default_account == ""
        assert config.client.version_string == "LJKit/1.0.0"
        assert config.server.url == DEFAULT_SERVER_URL
        assert config.server.timeout == 30

    def test_save_and_load(self, xdg_dirs):
        config = Config(
            default_account="alice@www.livejournal.com:443",
            client=ClientConfig(name="MyApp", version="2.1"),
            server=ServerConfig(url="http://localhost:8080/interface/flat", proxy_url="http://proxy:3128", timeout=10),
        )
        config.save()

        loaded = Config.load()

        assert loaded == config
        assert loaded.client.version_string == "MyApp/2.1"

    def test_explicit_path(self, temp_dir):
        path = temp_dir / "custom.toml"
        path.write_text('[client]\nname = "Other"\n')

        assert Config.load(path).client.version_string == "Other/1.0.0"

    def test_invalid_toml(self, temp_dir):
        path = temp_dir / "config.toml"
        path.write_text("[server\n")
        with pytest.raises(ConfigError):
            Config.load(path)

    @pytest.mark.parametrize("timeout", ["30", 0, -5, True])
    def test_invalid_timeout(self, temp_dir, timeout):
        path = temp_dir / "config.toml"
        value = f'"{timeout}"' if isinstance(timeout, str) else str(timeout).lower()
        path.write_text(f"[server]\ntimeout = {value}\n")
        with pytest.raises(ConfigError):
            Config.load(path)

    def test_wrong_type(self, temp_dir):
        path = temp_dir / "config.toml"
        path.write_text("[server]\nurl = 5\n")
        with pytest.raises(ConfigError):
            Config.load(path)

    def test_make_transport(self):
        server = ServerConfig(url="http://localhost:8080/flat", proxy_url="", timeout=5)
        transport = server.make_transport()

        assert isinstance(transport, HTTPTransport)
        assert transport.proxy_url is None
        assert transport.timeout == 5
        assert (transport.host, transport.port) == ("localhost", 8080)
        transport.close()
