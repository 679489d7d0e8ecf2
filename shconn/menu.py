"""
Menu numbering.

``flatten`` is the single traversal shared by rendering and lookup. Both paths
call it on the same tree so the number shown next to a host is always the
number that selects it.
"""

import logging
from typing import List, NamedTuple

from shconn.models import ConfigTree, IndexedEntry
from shconn.settings import DEFAULT_GROUP_STEP

logger = logging.getLogger(__name__)


class Flattened(NamedTuple):
    entries: List[IndexedEntry]
    labels: List[str]


def group_offset(position: int, group_step: int = DEFAULT_GROUP_STEP) -> int:
    """Index of the slot before the first entry of the group at ``position``."""
    return position * group_step


def flatten(tree: ConfigTree, group_step: int = DEFAULT_GROUP_STEP) -> Flattened:
    """
    Number every entry of the tree.

    Groups are ordered by sort key, entries by key. The group at position i
    numbers its entries from ``i * group_step + 1`` upwards. A group holding
    more than ``group_step`` entries runs into the next group's numbers.

    Args:
        tree: The loaded configuration.
        group_step: Number of indices reserved per group.

    Returns:
        The indexed entries in menu order and the group labels in column order.
    """
    entries: List[IndexedEntry] = []
    labels: List[str] = []
    groups = sorted(tree.groups, key=lambda g: g.sort_key)
    for position, group in enumerate(groups):
        labels.append(group.label)
        offset = group_offset(position, group_step)
        if len(group.entries) > group_step:
            logger.debug(
                f"Group '{group.name}' has {len(group.entries)} entries, more than "
                f"the group step of {group_step}; its indices overlap the next group"
            )
        for row, entry in enumerate(sorted(group.entries, key=lambda e: e.sort_key)):
            entries.append(
                IndexedEntry(
                    index=offset + row + 1,
                    entry=entry,
                    group_label=group.label,
                    column=position,
                    row=row,
                )
            )
    return Flattened(entries=entries, labels=labels)
