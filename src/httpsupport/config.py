"""
Configuration management for httpsupport.

Loads client defaults from environment variables or a .env file.
"""

import os
from pathlib import Path
from dataclasses import dataclass

from dotenv import load_dotenv

# Check common locations for .env
env_locations = [
    Path.home() / ".httpsupport" / ".env",
    Path.home() / ".config" / "httpsupport" / ".env",
    Path.cwd() / ".env",
]
for env_path in env_locations:
    if env_path.exists():
        load_dotenv(env_path)
        break


DEFAULT_USER_AGENT = "httpsupport/0.1.0"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() not in ("0", "false", "no", "off")


@dataclass
class ClientConfig:
    """HTTP client defaults."""

    # Prefix for relative endpoints ("" means endpoints must be absolute)
    base_uri: str = ""

    timeout: float = 30.0
    verify_ssl: bool = True
    follow_redirects: bool = True
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Load configuration from environment variables."""
        return cls(
            base_uri=os.getenv("HTTPSUPPORT_BASE_URI", ""),
            timeout=float(os.getenv("HTTPSUPPORT_TIMEOUT", "30.0")),
            verify_ssl=_env_bool("HTTPSUPPORT_VERIFY_SSL", True),
            follow_redirects=_env_bool("HTTPSUPPORT_FOLLOW_REDIRECTS", True),
            user_agent=os.getenv("HTTPSUPPORT_USER_AGENT", DEFAULT_USER_AGENT),
        )


# Global config instance
_config: ClientConfig | None = None


def get_config() -> ClientConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ClientConfig.from_env()
    return _config


def set_config(config: ClientConfig | None) -> None:
    """Set the global configuration instance (None reloads from env on next use)."""
    global _config
    _config = config
