"""SCPI number parsing and formatting utilities.

Handles NR1 (integer), NR2 (fixed-point), and NR3 (scientific notation)
numeric formats, the special values NAN, INF and NINF, hexadecimal status
words, and ON/OFF tokens.

Responses may arrive padded with NUL bytes by transports that read fixed-size
blocks, so every parser strips NULs and whitespace from both ends. Interior
bytes are left alone so a corrupted reading fails to parse.
"""

from __future__ import annotations

import math

from psuctl_scpi.errors import DecodeError

_SPECIAL_FLOAT_MAP: dict[str, float] = {
    "NAN": float("nan"),
    "INF": float("inf"),
    "NINF": float("-inf"),
    "-INF": float("-inf"),
}

# Digits after the decimal point for every numeric command argument.
FIXED_DECIMALS = 6


def clean_response(text: str) -> str:
    """Strip NUL padding and surrounding whitespace from a response.

    Args:
        text: The raw response string.

    Returns:
        The trimmed response, possibly empty.
    """
    return text.strip("\x00 \t\r\n")


def parse_number(text: str) -> float:
    """Parse a SCPI numeric response into a float.

    Accepts NR1 (``"42"``), NR2 (``"1.23"``), NR3 (``"1.23E+4"``),
    and the special tokens ``NAN``, ``INF``, ``NINF``, and ``-INF``.

    Args:
        text: The raw response string (NUL padding and whitespace are stripped).

    Returns:
        The parsed float value.

    Raises:
        DecodeError: If *text* is empty or cannot be parsed as a SCPI number.
    """
    token = clean_response(text).upper()
    special = _SPECIAL_FLOAT_MAP.get(token)
    if special is not None:
        return special
    if "_" in token:
        raise DecodeError("Invalid SCPI number", text)
    try:
        return float(token)
    except ValueError:
        raise DecodeError("Invalid SCPI number", text) from None


def parse_numbers(text: str) -> tuple[float, ...]:
    """Parse a comma-separated list of SCPI numbers.

    Args:
        text: Comma-separated numeric values (e.g. ``"1.0,2.0,3.0"``).

    Returns:
        A tuple of parsed float values.

    Raises:
        DecodeError: If any element cannot be parsed.
    """
    return tuple(parse_number(part) for part in clean_response(text).split(","))


def parse_int(text: str) -> int:
    """Parse a SCPI NR1 (integer) response.

    Args:
        text: The raw response string.

    Returns:
        The parsed integer.

    Raises:
        DecodeError: If *text* is not a valid integer.
    """
    token = clean_response(text)
    if "_" in token:
        raise DecodeError("Invalid SCPI integer", text)
    try:
        return int(token)
    except ValueError:
        raise DecodeError("Invalid SCPI integer", text) from None


def parse_hex(text: str, *, bits: int = 32) -> int:
    """Parse a hexadecimal response, with or without a ``0x`` prefix.

    Args:
        text: The raw response string (e.g. ``"0x0224"`` or ``"224"``).
        bits: Width the value must fit in.

    Returns:
        The parsed unsigned integer.

    Raises:
        DecodeError: If *text* is not hexadecimal or does not fit in *bits*.
    """
    token = clean_response(text)
    if token[:2] in ("0x", "0X"):
        token = token[2:].strip()
    if "_" in token:
        raise DecodeError("Invalid hexadecimal value", text)
    try:
        value = int(token, 16)
    except ValueError:
        raise DecodeError("Invalid hexadecimal value", text) from None
    if value < 0 or value >= 1 << bits:
        raise DecodeError(f"Hexadecimal value does not fit in {bits} bits", text)
    return value


def parse_on_off(text: str) -> bool:
    """Leniently parse an ON/OFF response.

    ``"ON"`` in any case and the literal ``"1"`` are True. Everything else is
    False, because firmware variants differ in the exact casing and format of
    the negative answer.

    Args:
        text: The raw response string.

    Returns:
        The parsed boolean.
    """
    token = clean_response(text)
    return token.upper() == "ON" or token == "1"


def format_number(value: float) -> str:
    """Format a float for use in a SCPI command.

    Finite values are rendered with exactly six digits after the decimal
    point regardless of magnitude (``3.3`` becomes ``"3.300000"``). ``nan``,
    ``inf``, and ``-inf`` are rendered as ``NAN``, ``INF``, and ``NINF``.

    Args:
        value: The numeric value to format.

    Returns:
        A SCPI-compatible string representation.
    """
    if math.isnan(value):
        return "NAN"
    if math.isinf(value):
        return "NINF" if value < 0 else "INF"
    return f"{value:.{FIXED_DECIMALS}f}"


def format_on_off(value: bool) -> str:
    """Format a boolean as an ON/OFF token.

    Args:
        value: The boolean to format.

    Returns:
        ``"ON"`` for True, ``"OFF"`` for False.
    """
    return "ON" if value else "OFF"
