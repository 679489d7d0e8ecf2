"""Data model for the host menu: groups, entries and their indexed form."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from shconn.settings import LABEL_PREFIX_LENGTH, Settings


# ------------------------------
# Enums
# ------------------------------
class Capability(str, Enum):
    """Connection modes an entry can offer, in menu order."""

    SSH = "ssh"
    TRANSFER = "lftp"
    MOUNT = "mount"

    @property
    def display_name(self) -> str:
        return {"ssh": "SSH", "lftp": "LFTP", "mount": "Mount"}[self.value]


# ------------------------------
# Data Models
# ------------------------------
@dataclass(frozen=True)
class MountSpec:
    """Parsed ``user:type:path`` mount description."""

    user: str
    fs_type: str
    remote_path: str

    @classmethod
    def parse(cls, value: str) -> Optional["MountSpec"]:
        """Split a mount string; returns None unless all three parts are present."""
        parts = value.split(":", 2)
        if len(parts) != 3 or not all(p.strip() for p in parts):
            return None
        user, fs_type, remote_path = (p.strip() for p in parts)
        return cls(user=user, fs_type=fs_type, remote_path=remote_path)

    def __str__(self) -> str:
        return f"{self.user}:{self.fs_type}:{self.remote_path}"


@dataclass(frozen=True)
class Entry:
    """A single connectable host."""

    key: str
    name: str
    address: str
    ssh_user: Optional[str] = None
    transfer_user: Optional[str] = None
    mount: Optional[MountSpec] = None

    @property
    def sort_key(self) -> str:
        return self.key

    @property
    def capabilities(self) -> Tuple[Capability, ...]:
        caps = []
        if self.ssh_user:
            caps.append(Capability.SSH)
        if self.transfer_user:
            caps.append(Capability.TRANSFER)
        if self.mount:
            caps.append(Capability.MOUNT)
        return tuple(caps)


@dataclass(frozen=True)
class Group:
    """A named collection of entries, shown as one menu column."""

    name: str
    entries: Tuple[Entry, ...] = ()
    sort_key: str = field(init=False)
    label: str = field(init=False)

    def __post_init__(self) -> None:
        # frozen: derived fields are set once here
        object.__setattr__(self, "sort_key", self.name)
        object.__setattr__(self, "label", self.name[LABEL_PREFIX_LENGTH:])


@dataclass(frozen=True)
class ConfigTree:
    """The loaded configuration. Read-only after load."""

    groups: Tuple[Group, ...] = ()
    settings: Settings = field(default_factory=Settings)
    path: Optional[Path] = None

    def __len__(self) -> int:
        return sum(len(g.entries) for g in self.groups)


@dataclass(frozen=True)
class IndexedEntry:
    """An entry paired with its menu number and owning group."""

    index: int
    entry: Entry
    group_label: str
    column: int
    row: int
