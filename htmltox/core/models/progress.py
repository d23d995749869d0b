"""Conversion progress snapshot."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Progress:
    """Progress of a running conversion, read fresh on every progress callback.

    Attributes:
        phase: Index of the current phase (0-based)
        phase_description: Short human-readable phase name, e.g. "Loading pages"
        phase_count: Total number of phases
        phase_progress: Percent done within the current phase (0-100)
    """

    phase: int
    phase_description: str
    phase_count: int
    phase_progress: int

    def __str__(self) -> str:
        return (
            f"{self.phase_description} ({self.phase + 1}/{self.phase_count}): "
            f"{self.phase_progress}%"
        )
