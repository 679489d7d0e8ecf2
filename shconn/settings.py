"""
Runtime settings and their defaults.

Values come from three layers: the defaults below, the optional ``settings``
mapping in the configuration file, and command line options.
"""

import dataclasses
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Optional

from shconn.errors import ConfigMalformedError

# ------------------------------
# Configuration
# ------------------------------
CONFIG_FILENAME = ".shconfig.yml"
USER_CONFIG_PATH = Path("~") / CONFIG_FILENAME
SYSTEM_CONFIG_PATH = Path("/etc") / CONFIG_FILENAME
CONFIG_ENV_VAR = "SHCONN_CONFIG"

ROOT_KEY = "servers"
SETTINGS_KEY = "settings"
LABEL_PREFIX_LENGTH = 2  # "01Home" is shown as "Home"

DEFAULT_COLUMNS = 2
DEFAULT_AUTO_COLUMNS = True
DEFAULT_GROUP_STEP = 10  # group 1 starts at 1, group 2 at 11, group 3 at 21
DEFAULT_INPUT_WAIT = 5  # seconds before the service prompt falls back to ssh
DEFAULT_COLORED = True


def default_mount_dir() -> str:
    user = os.environ.get("USER") or str(os.getuid())
    return os.path.join("/media", user, "shmount")


def config_search_paths() -> List[Path]:
    """User-level file first, then the system-wide one."""
    return [USER_CONFIG_PATH.expanduser(), SYSTEM_CONFIG_PATH]


@dataclass(frozen=True)
class Settings:
    """Menu and connection settings."""

    columns: int = DEFAULT_COLUMNS
    auto_columns: bool = DEFAULT_AUTO_COLUMNS
    debug: bool = False
    group_step: int = DEFAULT_GROUP_STEP
    input_wait: int = DEFAULT_INPUT_WAIT
    colored: bool = DEFAULT_COLORED
    mount_dir: str = field(default_factory=default_mount_dir)

    def __post_init__(self) -> None:
        if self.columns < 1:
            raise ConfigMalformedError("'columns' must be at least 1", SETTINGS_KEY)
        if self.group_step < 1:
            raise ConfigMalformedError("'group_step' must be at least 1", SETTINGS_KEY)
        if self.input_wait < 0:
            raise ConfigMalformedError("'input_wait' must not be negative", SETTINGS_KEY)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "Settings":
        """
        Build settings from the ``settings`` section of the config file.

        Args:
            data: The parsed mapping, or None when the section is absent.

        Returns:
            Settings with unspecified fields left at their defaults.

        Raises:
            ConfigMalformedError: On unknown keys or values of the wrong type.
        """
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigMalformedError("expected a mapping", SETTINGS_KEY)

        known = {f.name: f for f in dataclasses.fields(cls)}
        values = {}
        for key, value in data.items():
            key = str(key)
            if key not in known:
                raise ConfigMalformedError(f"unknown setting '{key}'", SETTINGS_KEY)
            values[key] = _check_type(key, value, known[key].type)
        return cls(**values)

    def override(self, **changes: Any) -> "Settings":
        """Return a copy with every change that is not None applied."""
        changes = {k: v for k, v in changes.items() if v is not None}
        return dataclasses.replace(self, **changes)


def _check_type(key: str, value: Any, expected: Any) -> Any:
    if expected is bool:
        if not isinstance(value, bool):
            raise ConfigMalformedError(f"'{key}' must be true or false", SETTINGS_KEY)
        return value
    if expected is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigMalformedError(f"'{key}' must be an integer", SETTINGS_KEY)
        return value
    if value is None or isinstance(value, (dict, list)):
        raise ConfigMalformedError(f"'{key}' must be a string", SETTINGS_KEY)
    return os.path.expanduser(str(value))
