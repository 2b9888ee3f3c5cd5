"""SPD3303X response decoding.

Turns trimmed response text into driver types. Generic numeric and ON/OFF
parsing lives in :mod:`psuctl_scpi.number`; this module adds the shapes that
are specific to this instrument family.
"""

from __future__ import annotations

from psuctl_scpi.errors import DecodeError
from psuctl_scpi.number import clean_response, parse_hex, parse_int, parse_number, parse_on_off

from psuctl_siglent.status import SystemStatus
from psuctl_siglent.types import Channel, DhcpState, TimerEntry, TrackMode

_TIMER_FIELDS = ("voltage", "current", "duration")


def parse_channel(text: str) -> Channel:
    """Parse an ``INST?`` response.

    Raises:
        UnknownValueError: If the text is not a channel token.
    """
    return Channel.parse(clean_response(text))


def parse_track_mode(text: str) -> TrackMode:
    """Parse an ``OUTP:TRACK?`` response (``0``, ``1`` or ``2``).

    Raises:
        DecodeError: If the text is not an integer.
        UnknownValueError: If the integer is not a track mode.
    """
    return TrackMode.from_value(parse_int(text))


def parse_timer_entry(group: int, text: str) -> TimerEntry:
    """Parse a ``TIMER:SET?`` response into a :class:`TimerEntry`.

    The response is ``<voltage>,<current>,<duration>``. It does not echo the
    group, so the caller's group index is attached to the result.

    Args:
        group: The queried timer group.
        text: The response text.

    Raises:
        DecodeError: If a field is missing or not numeric.
    """
    parts = clean_response(text).split(",")
    if len(parts) < len(_TIMER_FIELDS):
        missing = _TIMER_FIELDS[len(parts)]
        raise DecodeError(f"Missing {missing} in timer response", text)
    voltage, current, duration = (parse_number(part) for part in parts[: len(_TIMER_FIELDS)])
    return TimerEntry(group=group, voltage=voltage, current=current, duration=duration)


def parse_status(text: str) -> SystemStatus:
    """Parse a ``SYST:STAT?`` response (hex word, optional ``0x`` prefix).

    Raises:
        DecodeError: If the text is not a 32-bit hexadecimal value.
    """
    return SystemStatus.from_word(parse_hex(text))


def parse_dhcp(text: str) -> DhcpState:
    """Leniently parse a ``DHCP?`` response.

    ``ON`` in any case and ``1`` mean enabled; anything else is disabled.
    """
    return DhcpState.from_bool(parse_on_off(text))
