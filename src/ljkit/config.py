# =============================================================================
# Configuration Management
# =============================================================================
# Handles loading, saving, and validating LJKit configuration.
#
# XDG Base Directory Compliance (https://specifications.freedesktop.org/basedir-spec/):
#   - Config:  $XDG_CONFIG_HOME/ljkit/  (default: ~/.config/ljkit/)
#   - Data:    $XDG_DATA_HOME/ljkit/    (default: ~/.local/share/ljkit/)
#
# Files:
#   - config.toml: Client identification, server settings, default account
#   - accounts/<identifier>.json: Saved account snapshots (in data directory)
#
# Example config.toml:
#
#     [general]
#     default_account = "alice@www.livejournal.com:443"
#
#     [client]
#     name = "MyJournalApp"
#     version = "2.1"
#
#     [server]
#     url = "https://www.livejournal.com/interface/flat"
#     proxy_url = ""
#     timeout = 30
# =============================================================================

import os
import re
import tomllib  # Built into Python 3.11+
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w  # For writing TOML (tomllib is read-only)

from ljkit.errors import ConfigError
from ljkit.protocol.account import DEFAULT_CLIENT_NAME, DEFAULT_CLIENT_VERSION
from ljkit.protocol.transport import DEFAULT_SERVER_URL, HTTPTransport


# =============================================================================
# XDG Directory Management
# =============================================================================

# Application identifier used in all XDG paths
APP_NAME = "ljkit"


def get_xdg_config_home() -> Path:
    """
    Returns the XDG config directory for LJKit.

    Respects $XDG_CONFIG_HOME if set, otherwise uses ~/.config/ljkit/
    """
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        base = Path(xdg_config)
    else:
        base = Path.home() / ".config"
    return base / APP_NAME


def get_xdg_data_home() -> Path:
    """
    Returns the XDG data directory for LJKit.

    Respects $XDG_DATA_HOME if set, otherwise uses ~/.local/share/ljkit/
    This is where account snapshots live.
    """
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        base = Path(xdg_data)
    else:
        base = Path.home() / ".local" / "share"
    return base / APP_NAME


def ensure_directories() -> dict[str, Path]:
    """
    Creates all required XDG directories if they don't exist.

    Returns:
        Dictionary mapping directory type to path.
    """
    dirs = {
        "config": get_xdg_config_home(),
        "data": get_xdg_data_home(),
    }

    for dir_path in dirs.values():
        dir_path.mkdir(parents=True, exist_ok=True)

    (dirs["data"] / "accounts").mkdir(exist_ok=True)

    return dirs


# =============================================================================
# Configuration Data Structures
# =============================================================================

@dataclass
class ClientConfig:
    """
    How the client identifies itself to the server.

    Attributes:
        name: Client program name. Empty means DEFAULT_CLIENT_NAME.
        version: Client version. Empty means DEFAULT_CLIENT_VERSION.
    """
    name: str = ""
    version: str = ""

    @property
    def version_string(self) -> str:
        """The "clientversion" value sent at login, e.g. "LJKit/1.0.0"."""
        name = self.name or DEFAULT_CLIENT_NAME
        version = self.version or DEFAULT_CLIENT_VERSION
        return f"{name}/{version}"


@dataclass
class ServerConfig:
    """
    Where and how to reach the server.

    Attributes:
        url: Flat protocol endpoint.
        proxy_url: HTTP proxy URL, empty for a direct connection.
        timeout: Request timeout in seconds.
    """
    url: str = DEFAULT_SERVER_URL
    proxy_url: str = ""
    timeout: float = 30

    def make_transport(self) -> HTTPTransport:
        """Build an HTTPTransport from these settings."""
        return HTTPTransport(
            url=self.url,
            proxy_url=self.proxy_url or None,
            timeout=self.timeout,
        )


@dataclass
class Config:
    """
    Main configuration container for LJKit.

    Attributes:
        default_account: Identifier of the default account
                         ("username@host:port").
        client: Client identification.
        server: Server settings.

    Usage:
        >>> config = Config.load()
        >>> config.client.version_string
        'LJKit/1.0.0'
    """
    default_account: str = ""
    client: ClientConfig = field(default_factory=ClientConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    # -------------------------------------------------------------------------
    # File Paths
    # -------------------------------------------------------------------------

    @staticmethod
    def config_file_path() -> Path:
        """Returns the path to the main config file."""
        return get_xdg_config_home() / "config.toml"

    @staticmethod
    def snapshot_dir() -> Path:
        """Returns the directory holding saved account snapshots."""
        return get_xdg_data_home() / "accounts"

    @classmethod
    def snapshot_path(cls, identifier: str) -> Path:
        """
        Returns the snapshot file for an account identifier.

        Characters that aren't safe in file names are replaced, so
        "alice@www.livejournal.com:443" becomes
        "alice@www.livejournal.com_443.json".
        """
        safe = re.sub(r"[^A-Za-z0-9@._-]", "_", identifier)
        return cls.snapshot_dir() / f"{safe}.json"

    # -------------------------------------------------------------------------
    # Loading and Saving
    # -------------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """
        Load configuration from the config file.

        If the config file doesn't exist, returns default configuration.

        Args:
            path: Config file to read. Defaults to the XDG location.

        Returns:
            Loaded Config object.

        Raises:
            ConfigError: If the config file exists but is invalid.
        """
        config_path = path or cls.config_file_path()

        if not config_path.exists():
            # No config file yet - return defaults
            return cls()

        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file: {e}") from e

        return cls._from_dict(data)

    def save(self, path: Path | None = None) -> None:
        """
        Save configuration to the config file.

        Creates the config directory if it doesn't exist.
        """
        config_path = path or self.config_file_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "wb") as f:
            tomli_w.dump(self._to_dict(), f)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "Config":
        """
        Create a Config object from a dictionary (parsed TOML).

        Raises:
            ConfigError: If a value has the wrong type.
        """
        config = cls()

        general = data.get("general", {})
        config.default_account = general.get("default_account", "")

        client = data.get("client", {})
        config.client = ClientConfig(
            name=client.get("name", ""),
            version=str(client.get("version", "")),
        )

        server = data.get("server", {})
        timeout = server.get("timeout", 30)
        if not isinstance(timeout, (int, float)) or isinstance(timeout, bool) or timeout <= 0:
            raise ConfigError(f"server.timeout must be a positive number, got {timeout!r}")
        config.server = ServerConfig(
            url=server.get("url", DEFAULT_SERVER_URL),
            proxy_url=server.get("proxy_url", ""),
            timeout=timeout,
        )

        for value, name in (
            (config.default_account, "general.default_account"),
            (config.client.name, "client.name"),
            (config.server.url, "server.url"),
            (config.server.proxy_url, "server.proxy_url"),
        ):
            if not isinstance(value, str):
                raise ConfigError(f"{name} must be a string, got {value!r}")

        return config

    def _to_dict(self) -> dict[str, Any]:
        """
        Convert Config to a dictionary for TOML serialization.
        """
        return {
            "general": {
                "default_account": self.default_account,
            },
            "client": {
                "name": self.client.name,
                "version": self.client.version,
            },
            "server": {
                "url": self.server.url,
                "proxy_url": self.server.proxy_url,
                "timeout": self.server.timeout,
            },
        }


# =============================================================================
# Utility Functions
# =============================================================================

def print_paths() -> None:
    """
    Print all XDG paths for debugging.
    Useful for users wondering where their config/data is stored.
    """
    print(f"Config:  {get_xdg_config_home()}")
    print(f"Data:    {get_xdg_data_home()}")
    print()
    print(f"Config file:  {Config.config_file_path()}")
    print(f"Snapshots:    {Config.snapshot_dir()}")
