"""Map a typed menu number back to the configuration entry it was shown for."""

import logging
from dataclasses import dataclass
from typing import Tuple

from shconn.errors import EntryNotFoundError
from shconn.menu import flatten
from shconn.models import Capability, ConfigTree, IndexedEntry
from shconn.settings import DEFAULT_GROUP_STEP

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    indexed: IndexedEntry
    capabilities: Tuple[Capability, ...]

    @property
    def entry(self):
        return self.indexed.entry


def resolve(
    tree: ConfigTree, index: int, group_step: int = DEFAULT_GROUP_STEP
) -> Resolution:
    """
    Find the entry shown with ``index``.

    The tree is flattened again with the same function the menu used. When
    an oversized group makes indices collide, the first entry in menu order
    wins.

    Raises:
        EntryNotFoundError: If no entry carries that index.
    """
    for indexed in flatten(tree, group_step).entries:
        if indexed.index == index:
            logger.debug(
                f"Index {index} resolved to '{indexed.entry.name}' "
                f"in group '{indexed.group_label}'"
            )
            return Resolution(
                indexed=indexed, capabilities=indexed.entry.capabilities
            )
    raise EntryNotFoundError(index)
