"""SPD3303X data types.

Enumerations for channels and the on/off, track and regulation modes used on
the wire, and the immutable records returned by composite reads.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from psuctl_scpi.errors import UnknownValueError


class Channel(Enum):
    """Output channel identifier.

    CH1 and CH2 are programmable. CH3 is a fixed-output channel that only
    supports output on/off; see :mod:`psuctl_siglent.capability`.
    """

    CH1 = "CH1"
    CH2 = "CH2"
    CH3 = "CH3"

    @property
    def scpi(self) -> str:
        """Canonical three-character channel token."""
        return self.value

    @classmethod
    def parse(cls, text: str) -> Channel:
        """Parse a channel token, ignoring case and surrounding whitespace.

        Raises:
            UnknownValueError: If *text* is not ``CH1``, ``CH2`` or ``CH3``.
        """
        try:
            return cls(text.strip().upper())
        except ValueError:
            raise UnknownValueError("Unrecognized channel", text) from None


class _OnOff(Enum):
    """Base for binary tags encoded as ``ON``/``OFF`` on the wire."""

    @property
    def scpi(self) -> str:
        """Uppercase wire encoding."""
        return str(self.value)

    @property
    def is_on(self) -> bool:
        """True for the ``ON`` member."""
        return self.value == "ON"

    @classmethod
    def from_bool(cls: type[_OnOffT], value: bool) -> _OnOffT:
        """Return the ``ON`` member for True and ``OFF`` for False."""
        return cls("ON" if value else "OFF")


_OnOffT = TypeVar("_OnOffT", bound=_OnOff)


class OutputState(_OnOff):
    """Channel output state."""

    ON = "ON"
    OFF = "OFF"


class TimerState(_OnOff):
    """Timer run state."""

    ON = "ON"
    OFF = "OFF"


class DhcpState(_OnOff):
    """DHCP client state of the LAN interface."""

    ON = "ON"
    OFF = "OFF"


class TrackMode(Enum):
    """Relationship between CH1 and CH2.

    Member values are the ``OUTP:TRACK`` write encoding.
    """

    INDEPENDENT = 0
    SERIES = 1
    PARALLEL = 2

    @classmethod
    def from_value(cls, value: int) -> TrackMode:
        """Decode the ``OUTP:TRACK`` integer encoding.

        Raises:
            UnknownValueError: If *value* is not 0, 1 or 2.
        """
        try:
            return cls(value)
        except ValueError:
            raise UnknownValueError("Unknown track mode value", str(value)) from None


class RegulationMode(Enum):
    """Regulation mode of a programmable channel."""

    CONSTANT_VOLTAGE = "CV"
    CONSTANT_CURRENT = "CC"


@dataclass(frozen=True)
class ChannelStatus:
    """Setpoints and measurements of one programmable channel.

    Attributes:
        set_voltage: Voltage setpoint in volts.
        set_current: Current setpoint in amps.
        measured_voltage: Measured output voltage in volts.
        measured_current: Measured output current in amps.
        measured_power: Measured output power in watts.
    """

    set_voltage: float
    set_current: float
    measured_voltage: float
    measured_current: float
    measured_power: float


@dataclass(frozen=True)
class TimerEntry:
    """One programmed timer step.

    Attributes:
        group: Timer group index (1-5).
        voltage: Step voltage in volts.
        current: Step current in amps.
        duration: Step duration in seconds.
    """

    group: int
    voltage: float
    current: float
    duration: float


@dataclass(frozen=True)
class NetworkConfig:
    """LAN settings as reported by the instrument.

    Addresses are kept as the dotted-decimal strings the device returns.
    """

    ip: str
    mask: str
    gateway: str
    dhcp: bool
