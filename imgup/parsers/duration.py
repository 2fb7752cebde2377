"""Expiration duration parsing."""

from __future__ import annotations

import re

from imgup.errors import ValidationError
from imgup.models.request import MAX_EXPIRATION_SECONDS, MIN_EXPIRATION_SECONDS

NO_EXPIRATION_VALUES = {"0", "none", "never"}

UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}

DURATION_PATTERN = re.compile(r"([0-9]+)([smhd]?)")


def parse_duration(value: str) -> int | None:
    """
    Convert a duration string into seconds of expiration.

    Accepts ``0``, ``none`` or ``never`` for no expiration, otherwise
    ``<integer>[s|m|h|d]`` where a missing unit means minutes.

    Args:
        value: Duration as typed by the user

    Returns:
        int | None: Expiration in seconds, or None for no expiration

    Raises:
        ValidationError: If the string is malformed or out of range
    """
    if value in NO_EXPIRATION_VALUES:
        return None

    match = DURATION_PATTERN.fullmatch(value)
    if not match:
        raise ValidationError(
            f"Invalid expiration '{value}': expected <number>[s|m|h|d] "
            + "(s=seconds, m=minutes, h=hours, d=days; minutes if no unit), "
            + "or 0/none/never for no expiration"
        )

    amount, unit = match.groups()
    seconds = int(amount) * UNIT_SECONDS[unit or "m"]

    if not MIN_EXPIRATION_SECONDS <= seconds <= MAX_EXPIRATION_SECONDS:
        raise ValidationError(
            f"Expiration '{value}' is {seconds} seconds, outside the allowed range "
            + f"of {MIN_EXPIRATION_SECONDS} to {MAX_EXPIRATION_SECONDS} seconds (1m to 180d)"
        )

    return seconds
