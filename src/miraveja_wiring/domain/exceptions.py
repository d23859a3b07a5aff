from typing import Optional


class WiringException(Exception):
    """Base exception for wiring-index errors."""


class ConfigurationError(WiringException):
    """Raised for invalid settings or annotation table files.

    Attributes:
        source: Where the invalid configuration came from, if known.
    """

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        self.source = source
        if source:
            message = f"{message} (source: {source})"
        super().__init__(message)


class ScanSupersededError(WiringException):
    """Raised when a scan session is used after a newer scan started.

    Attributes:
        generation: Generation of the stale session.
        current_generation: Generation of the scan that superseded it.
    """

    def __init__(self, generation: int, current_generation: int) -> None:
        self.generation = generation
        self.current_generation = current_generation
        super().__init__(
            f"Scan generation {generation} was superseded by generation {current_generation}"
        )
