"""Shared data type definitions (SizeUnit, FillPolicy, FillSpec)."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional


class SizeUnit(Enum):
    """Size unit; each level is 1024 times the previous one."""

    B = 0
    KB = 1
    MB = 2
    GB = 3

    @classmethod
    def parse(cls, text: str) -> Optional["SizeUnit"]:
        """
        Parse a unit name case-insensitively.

        Args:
            text: Unit name (e.g., 'kb', 'MB')

        Returns:
            Matching SizeUnit, or None if the name is unknown
        """
        return cls.__members__.get(text.strip().upper())

    def smaller(self) -> "SizeUnit":
        """Return the unit one level below this one (B stays B)."""
        return SizeUnit(max(self.value - 1, 0))


class FillPolicy(Enum):
    """Strategy that determines what content is written."""

    NULL = "Null"
    RANDOM = "Random"
    FIXED = "Fixed"

    @classmethod
    def parse(cls, text: str) -> Optional["FillPolicy"]:
        """
        Parse a fill policy name case-insensitively.

        Args:
            text: Policy name (e.g., 'random', 'FIXED')

        Returns:
            Matching FillPolicy, or None if the name is unknown
        """
        return cls.__members__.get(text.strip().upper())


@dataclass(frozen=True)
class FillSpec:
    """
    Everything needed to produce one sized file.
    """
    path: Path
    size: int
    unit: SizeUnit
    policy: FillPolicy
    template: str = ""
    append: bool = False


ProgressCallback = Callable[[float], None]
