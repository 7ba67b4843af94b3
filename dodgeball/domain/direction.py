"""Compass direction codes.

Directions are numbered clockwise starting at North, so turning by one step
is ``(code + 1) & 7`` and the opposite direction is ``(code + 4) & 7``.
"""

from dodgeball.errors import UnknownDirection

DIRECTIONS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")

_DIRECTION_CODES = {token: code for code, token in enumerate(DIRECTIONS)}


def encode(token: str, position: int | None = None) -> int:
    """Convert a direction token to its code

    Args:
        token (str): One of N, NE, E, SE, S, SW, W, NW (case-insensitive, surrounding whitespace ignored)
        position (int, optional): Token position reported in the error. Defaults to None.

    Raises:
        UnknownDirection: If the token is not one of the eight directions

    Returns:
        int: Code in 0..7
    """
    if not isinstance(token, str):
        raise UnknownDirection(token, position)
    code = _DIRECTION_CODES.get(token.strip().upper())
    if code is None:
        raise UnknownDirection(token, position)
    return code


def decode(code: int) -> str:
    """Convert a direction code back to its canonical token."""
    if isinstance(code, bool) or not isinstance(code, int) or not 0 <= code < len(DIRECTIONS):
        raise ValueError(f"direction code must be between 0 and 7, got {code!r}")
    return DIRECTIONS[code]
