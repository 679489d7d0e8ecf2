"""
Exception hierarchy for shconn.

Configuration errors are fatal for the invocation. Selection errors are
reported to the user and end the run without a connection attempt.
"""

from typing import Iterable, Optional


class ShconnError(Exception):
    """Base exception for all shconn errors."""

    pass


# ------------------------------
# Configuration
# ------------------------------
class ConfigError(ShconnError):
    """Base exception for configuration problems."""

    pass


class ConfigNotFoundError(ConfigError):
    """Raised when no configuration file exists at any search location."""

    def __init__(self, searched: Iterable[str]) -> None:
        self.searched = list(searched)
        super().__init__(
            "No configuration file found (searched: {})".format(
                ", ".join(self.searched) or "nothing"
            )
        )


class ConfigMalformedError(ConfigError):
    """Raised when the document does not have the expected shape."""

    def __init__(self, message: str, location: Optional[str] = None) -> None:
        self.location = location
        if location:
            message = f"{location}: {message}"
        super().__init__(message)


# ------------------------------
# Selection
# ------------------------------
class SelectionError(ShconnError):
    """Base exception for menu and mode selection problems."""

    pass


class EntryNotFoundError(SelectionError):
    """Raised when a menu index does not map to any entry."""

    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"{index} is not a valid server selection")


class InvalidModeChoiceError(SelectionError):
    """Raised when the service choice matches none of the offered options."""

    def __init__(self, answer: str) -> None:
        self.answer = answer
        super().__init__(f"Invalid service selection: {answer!r}")


# ------------------------------
# Connection launch
# ------------------------------
class ConnectionLaunchError(ShconnError):
    """Raised when an external client program cannot be started."""

    def __init__(self, program: str) -> None:
        self.program = program
        super().__init__(f"'{program}' command not found. Is it installed and in PATH?")
