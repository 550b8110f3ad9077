"""Configuration of the local cache root and default refresh settings"""

import configparser
import logging
import os
import platform
from pathlib import Path
from typing import Any, Optional

import humanfriendly
from pydantic import BaseModel, Field, field_validator

from gitle.model.policy import UpdatePolicy
from gitle.network import DEFAULT_PROBE_TIMEOUT, DEFAULT_PROBE_URL

logger = logging.getLogger(__name__)

APP_NAME = "gitle"

_home = os.path.expanduser("~")

xdg_config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.join(_home, ".config")
xdg_cache_home = os.environ.get("XDG_CACHE_HOME") or os.path.join(_home, ".cache")

DEFAULT_COMMAND_TIMEOUT = "30m"

default_cfg = {
    "dirs": {"root": os.path.join(xdg_cache_home, APP_NAME)},
}

if platform.system() == "Darwin":
    # macOS
    config_dir = Path("~/Library/Application Support/gitle").expanduser()
else:
    # Linux or others
    config_dir = Path(os.path.join(xdg_config_home, APP_NAME))


def get_config_file():
    return config_dir / f"{APP_NAME}.cfg"


def init_dirs():
    """Initialize the configuration directory.

    Fails gracefully if the directory cannot be created (e.g., read-only filesystem).
    """
    try:
        os.makedirs(config_dir, exist_ok=True)
    except OSError as e:
        logger.warning(
            f"Could not create config directory {config_dir}: {e}. "
            "Using in-memory configuration only."
        )


def parse_timeout(value: Any) -> Optional[float]:
    """
    Parse a command timeout.

    Accepts numbers (seconds), human friendly timespans ("90s", "10m", "1h")
    and "none"/"" to disable the timeout.

    Raises:
        ValueError: if the value is not a valid timespan
    """
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value) if value > 0 else None

    text = str(value).strip()
    if text.lower() in ("", "none", "0"):
        return None
    try:
        return float(humanfriendly.parse_timespan(text))
    except humanfriendly.InvalidTimespan as e:
        raise ValueError(f"Invalid timeout value: {value}") from e


class GitleSettings(BaseModel):
    """Settings shared by every dependency of a refresh."""

    offline_mode: bool = Field(False, description="Behave as if no network were available")
    show_output: bool = Field(
        False,
        description="Stream git/build output to the console. May expose "
        "credentials, SSH host keys or user names.",
    )
    default_update_policy: UpdatePolicy = Field(
        UpdatePolicy.default(), description="Policy for dependencies without one"
    )
    command_timeout: Optional[float] = Field(
        parse_timeout(DEFAULT_COMMAND_TIMEOUT),
        description="Seconds before an external command is terminated",
    )
    continue_on_error: bool = Field(
        False, description="Keep refreshing other dependencies after a failure"
    )
    rewrite_marker: bool = Field(
        True,
        description="Rewrite the freshness marker after every time-based update",
    )
    probe_url: str = Field(DEFAULT_PROBE_URL, description="URL used to probe connectivity")
    probe_timeout: float = Field(DEFAULT_PROBE_TIMEOUT, description="Probe timeout (s)")

    @field_validator("default_update_policy", mode="before")
    @classmethod
    def validate_policy(cls, v: Any) -> UpdatePolicy:
        return UpdatePolicy.parse(v)

    @field_validator("command_timeout", mode="before")
    @classmethod
    def validate_timeout(cls, v: Any) -> Optional[float]:
        return parse_timeout(v)

    def merged(self, **overrides: Any) -> "GitleSettings":
        """Return a copy with every non-None override applied and validated."""
        values = self.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return GitleSettings.model_validate(values)


class ConfigAccessor:
    """
    Read-only access to gitle.cfg.

    Missing files, sections and keys fall back to defaults. The file is never
    written by gitle; users edit it by hand.

    Usage:
        config = ConfigAccessor()
        root = config.get("dirs", "root", default="~/.cache/gitle")
    """

    def __init__(self, config_path: Optional[Path] = None):
        if config_path is None:
            self.config_path = get_config_file()
            init_dirs()
        else:
            self.config_path = Path(config_path)

        self.config = configparser.ConfigParser()
        if self.config_path.exists():
            self.config.read(self.config_path)

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """
        Get a configuration value from the specified section and key.

        Returns:
            The configuration value if it exists, otherwise the default value
        """
        try:
            return self.config[section][key]
        except (KeyError, configparser.NoSectionError, configparser.NoOptionError):
            return default


def load_settings(accessor: Optional[ConfigAccessor] = None) -> GitleSettings:
    """
    Read the `[gitle]` section of the config file into GitleSettings.

    Missing keys keep their defaults.
    """
    if accessor is None:
        accessor = ConfigAccessor()

    values = {
        key: accessor.get(APP_NAME, key)
        for key in GitleSettings.model_fields
        if accessor.get(APP_NAME, key) is not None
    }
    return GitleSettings.model_validate(values)


def get_root_dir(accessor: Optional[ConfigAccessor] = None) -> Path:
    """
    Get the configured root directory holding every cloned dependency.

    Returns:
        Path to the cache root (defaults to ~/.cache/gitle), created if missing
    """
    if accessor is None:
        accessor = ConfigAccessor()

    root_str = accessor.get("dirs", "root", default_cfg["dirs"]["root"])
    root = Path(root_str).expanduser()

    root.mkdir(parents=True, exist_ok=True)

    return root
