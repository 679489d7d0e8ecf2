"""
Connection mode selection.

An entry offering a single capability resolves straight away. Otherwise the
user is shown numbered options (ssh, then lftp, then mount) and the answer is
fed back. No answer falls back to the default; an answer that matches no
option is rejected.
"""

from enum import Enum
from typing import List, Optional, Sequence, Tuple

from shconn.errors import InvalidModeChoiceError, SelectionError
from shconn.models import Capability

MODE_ORDER = (Capability.SSH, Capability.TRANSFER, Capability.MOUNT)


class ModeState(str, Enum):
    AWAITING = "awaiting"
    RESOLVED = "resolved"


class ModeSelection:
    """Tracks the mode choice for one resolved entry."""

    def __init__(self, capabilities: Sequence[Capability]) -> None:
        ordered = [c for c in MODE_ORDER if c in capabilities]
        if not ordered:
            raise SelectionError("Entry offers no connection mode")
        self.options: List[Tuple[int, Capability]] = list(enumerate(ordered, start=1))
        self.mode: Optional[Capability] = ordered[0] if len(ordered) == 1 else None

    @property
    def state(self) -> ModeState:
        return ModeState.AWAITING if self.mode is None else ModeState.RESOLVED

    @property
    def default(self) -> Capability:
        """SSH when offered, otherwise the first option."""
        for _, capability in self.options:
            if capability is Capability.SSH:
                return capability
        return self.options[0][1]

    def prompt_lines(self, timeout: int) -> List[str]:
        lines = []
        for number, capability in self.options:
            line = f"({number}) {capability.display_name}"
            if capability is self.default:
                line += f" [default - automatically selected in {timeout} seconds]"
            lines.append(line)
        return lines

    def feed(self, answer: Optional[str]) -> Capability:
        """
        Resolve the selection from the user's answer.

        Args:
            answer: The typed text, or None when the prompt timed out.

        Returns:
            The chosen capability. Once resolved, further answers are ignored.

        Raises:
            InvalidModeChoiceError: If a non-empty answer matches no option.
        """
        if self.mode is not None:
            return self.mode
        text = (answer or "").strip()
        if not text:
            self.mode = self.default
            return self.mode
        for number, capability in self.options:
            if text == str(number):
                self.mode = capability
                return self.mode
        raise InvalidModeChoiceError(text)
