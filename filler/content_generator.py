"""Produces chunks of fill content for each fill policy."""

import random

from filler.types import FillPolicy

NULL_CHAR = "\0"


def generate_content(policy: FillPolicy, template: str, offset: int, length: int) -> str:
    """
    Generate `length` characters of content for the given policy.

    Fixed content is keyed by absolute offset, so consecutive chunks line up
    no matter where a chunk boundary falls. Random content is drawn from a
    fresh random source on every call.

    Args:
        policy: Fill policy to apply
        template: Characters to fill with (ignored for NULL)
        offset: Absolute position of the first generated character
        length: Number of characters to generate

    Returns:
        Generated content string

    Raises:
        ValueError: On negative offset/length or an empty template for a
            policy that needs one
    """
    if offset < 0 or length < 0:
        raise ValueError(f"offset and length must be non-negative (offset={offset}, length={length})")

    if policy is FillPolicy.NULL:
        return NULL_CHAR * length

    if not template:
        raise ValueError(f"{policy.value} fill requires a non-empty template")

    if policy is FillPolicy.FIXED:
        return _fixed_content(template, offset, length)

    rng = random.Random()
    return "".join(rng.choices(template, k=length))


def _fixed_content(template: str, offset: int, length: int) -> str:
    """Repeat the template cyclically starting at template[offset % len]."""
    start = offset % len(template)
    rotated = template[start:] + template[:start]
    repeats = length // len(rotated) + 1
    return (rotated * repeats)[:length]
