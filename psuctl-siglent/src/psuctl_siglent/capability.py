"""Per-channel capability rules for the SPD3303X.

CH1 and CH2 are fully programmable. CH3 is a fixed-output channel: it can be
switched on and off, but it has no setpoints, no measurement, no timer and
no waveform display, and its output state is not observable either through
the status word or a direct query.

All checks run before a command string is built or a byte is sent.
"""

from __future__ import annotations

from enum import Enum

from psuctl_siglent.errors import ChannelCapabilityError, RangeViolationError
from psuctl_siglent.types import Channel

SLOT_MIN = 1
SLOT_MAX = 5
TIMER_GROUP_MIN = 1
TIMER_GROUP_MAX = 5


class Capability(Enum):
    """Operations whose availability depends on the channel."""

    OUTPUT_CONTROL = "output control"
    OUTPUT_QUERY = "output state query"
    SETPOINT = "voltage/current setpoint"
    MEASURE = "measurement"
    TIMER = "timer"
    WAVE_DISPLAY = "waveform display"


_PROGRAMMABLE = frozenset(Capability)

CHANNEL_CAPABILITIES: dict[Channel, frozenset[Capability]] = {
    Channel.CH1: _PROGRAMMABLE,
    Channel.CH2: _PROGRAMMABLE,
    Channel.CH3: frozenset({Capability.OUTPUT_CONTROL}),
}

_CH3_OUTPUT_QUERY_MESSAGE = (
    "CH3 does not support querying output state: it is not reported by SYST:STAT? "
    "and only on/off control (OUTPut CH3,ON/OFF) is available"
)


def supports(channel: Channel, capability: Capability) -> bool:
    """Return True if *channel* supports *capability*."""
    return capability in CHANNEL_CAPABILITIES[channel]


def is_programmable(channel: Channel) -> bool:
    """Return True for channels with setpoints and measurement (CH1, CH2)."""
    return supports(channel, Capability.SETPOINT)


def require(channel: Channel, capability: Capability) -> None:
    """Reject *capability* on a channel that does not support it.

    Args:
        channel: The addressed channel.
        capability: The requested operation class.

    Raises:
        ChannelCapabilityError: If the channel lacks the capability. Output
            state queries get a dedicated explanation.
    """
    if supports(channel, capability):
        return
    message = _CH3_OUTPUT_QUERY_MESSAGE if capability is Capability.OUTPUT_QUERY else None
    raise ChannelCapabilityError(channel, capability.value, message)


def _is_index_in(value: int, low: int, high: int) -> bool:
    # bool is an int subclass but never a valid index
    if not isinstance(value, int) or isinstance(value, bool):
        return False
    return low <= value <= high


def require_slot(slot: int) -> None:
    """Validate a ``*SAV``/``*RCL`` slot number.

    Raises:
        RangeViolationError: If *slot* is not an integer in 1-5.
    """
    if not _is_index_in(slot, SLOT_MIN, SLOT_MAX):
        raise RangeViolationError("slot", slot, SLOT_MIN, SLOT_MAX)


def require_timer_group(group: int) -> None:
    """Validate a timer group index.

    Raises:
        RangeViolationError: If *group* is not an integer in 1-5.
    """
    if not _is_index_in(group, TIMER_GROUP_MIN, TIMER_GROUP_MAX):
        raise RangeViolationError("timer group", group, TIMER_GROUP_MIN, TIMER_GROUP_MAX)
