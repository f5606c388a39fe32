"""Converts a size magnitude and unit into an exact byte count."""

from common.constants import MAX_FILE_SIZE_BYTES
from filler.exceptions import FillSpecValidationError
from filler.types import SizeUnit

UNIT_MULTIPLIER = 1024


def resolve_size(magnitude: int, unit: SizeUnit) -> int:
    """
    Resolve a (magnitude, unit) pair into bytes.

    Steps the unit down one level at a time, multiplying by 1024 each step
    until the byte unit is reached.

    Args:
        magnitude: Non-negative size in the given unit
        unit: Unit of the magnitude

    Returns:
        Exact size in bytes

    Raises:
        FillSpecValidationError: If magnitude is negative or the result does
            not fit in a file offset
    """
    if magnitude < 0:
        raise FillSpecValidationError("Invalid --SIZE value.")

    total = magnitude
    while unit is not SizeUnit.B:
        total *= UNIT_MULTIPLIER
        unit = unit.smaller()

    if total > MAX_FILE_SIZE_BYTES:
        raise FillSpecValidationError("Invalid --SIZE value.")

    return total
