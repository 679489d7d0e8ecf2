"""
Configuration loading.

The configuration is a YAML document with a fixed ``servers`` root key holding
groups, each holding entries::

    servers:
      01Home:
        server:
          name: "Home Server"
          ip: 192.168.1.10
          ssh: root
          lftp: backup
          mount: root:sshfs:/srv
    settings:
      group_step: 10

Loading is strict: a single malformed entry rejects the whole file.
"""

import logging
import os
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

import yaml

from shconn.errors import ConfigMalformedError, ConfigNotFoundError
from shconn.models import ConfigTree, Entry, Group, MountSpec
from shconn.settings import (
    CONFIG_ENV_VAR,
    ROOT_KEY,
    SETTINGS_KEY,
    Settings,
    config_search_paths,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "ip")
CONNECT_FIELDS = ("ssh", "lftp", "mount")


# ------------------------------
# Locating the file
# ------------------------------
def find_config(explicit: Optional[Union[str, Path]] = None) -> Path:
    """
    Locate the configuration file.

    Args:
        explicit: A path given on the command line. When set, no other
            location is considered.

    Returns:
        The first existing candidate path.

    Raises:
        ConfigNotFoundError: If none of the candidates exists.
    """
    if explicit is None and os.environ.get(CONFIG_ENV_VAR):
        explicit = os.environ[CONFIG_ENV_VAR]
    if explicit is not None:
        candidates: List[Path] = [Path(explicit).expanduser()]
    else:
        candidates = config_search_paths()

    for candidate in candidates:
        if candidate.is_file():
            logger.debug(f"Using configuration file {candidate}")
            return candidate
    raise ConfigNotFoundError(str(c) for c in candidates)


# ------------------------------
# Parsing
# ------------------------------
def load_config(path: Union[str, Path]) -> ConfigTree:
    """
    Read and validate a configuration file.

    Args:
        path: Path to the YAML document.

    Returns:
        The immutable configuration tree.

    Raises:
        ConfigNotFoundError: If the file cannot be read.
        ConfigMalformedError: If it is not valid YAML or has the wrong shape.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        logger.debug(f"Could not read {path}: {e}")
        raise ConfigNotFoundError([str(path)]) from e
    tree = parse_config(text, path=path)
    logger.debug(
        f"Loaded {len(tree.groups)} groups with {len(tree)} entries from {path}"
    )
    return tree


def parse_config(text: str, path: Optional[Path] = None) -> ConfigTree:
    """Parse configuration text into a ConfigTree."""
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigMalformedError(f"invalid YAML: {e}", str(path) if path else None)

    if not isinstance(document, Mapping):
        raise ConfigMalformedError("expected a mapping at the top level")
    if ROOT_KEY not in document:
        raise ConfigMalformedError(f"missing root key '{ROOT_KEY}'")

    raw_groups = document[ROOT_KEY]
    if raw_groups is None:
        raw_groups = {}
    if not isinstance(raw_groups, Mapping):
        raise ConfigMalformedError("expected a mapping of groups", ROOT_KEY)

    groups = []
    for group_name, raw_entries in raw_groups.items():
        group = _parse_group(str(group_name), raw_entries)
        if group is None:
            continue
        groups.append(group)

    settings = Settings.from_mapping(document.get(SETTINGS_KEY))
    return ConfigTree(groups=tuple(groups), settings=settings, path=path)


def _parse_group(name: str, raw_entries: Any) -> Optional[Group]:
    location = f"{ROOT_KEY}.{name}"
    if raw_entries is None or raw_entries == {}:
        logger.debug(f"Skipping empty group '{name}'")
        return None
    if not isinstance(raw_entries, Mapping):
        raise ConfigMalformedError("expected a mapping of entries", location)

    entries = [
        _parse_entry(str(key), raw, f"{location}.{key}")
        for key, raw in raw_entries.items()
    ]
    # entry order comes from the keys, not from the document
    entries.sort(key=lambda e: e.sort_key)
    return Group(name=name, entries=tuple(entries))


def _parse_entry(key: str, raw: Any, location: str) -> Entry:
    if not isinstance(raw, Mapping):
        raise ConfigMalformedError("expected a mapping of host fields", location)

    fields = {str(k): _scalar(v, f"{location}.{k}") for k, v in raw.items()}
    for required in REQUIRED_FIELDS:
        if not fields.get(required):
            raise ConfigMalformedError(f"missing '{required}'", location)
    if not any(fields.get(f) for f in CONNECT_FIELDS):
        raise ConfigMalformedError(
            "needs at least one of 'ssh', 'lftp' or 'mount'", location
        )

    mount = None
    if fields.get("mount"):
        mount = MountSpec.parse(fields["mount"])
        if mount is None:
            raise ConfigMalformedError(
                f"'mount' must look like user:type:path, got '{fields['mount']}'",
                location,
            )

    return Entry(
        key=key,
        name=fields["name"],
        address=fields["ip"],
        ssh_user=fields.get("ssh") or None,
        transfer_user=fields.get("lftp") or None,
        mount=mount,
    )


def _scalar(value: Any, location: str) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (Mapping, list)):
        raise ConfigMalformedError("expected a single value", location)
    return str(value).strip()
