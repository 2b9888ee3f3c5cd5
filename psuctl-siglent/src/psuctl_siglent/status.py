"""SPD3303X status word decoding.

``SYST:STAT?`` returns a packed word (hex encoded) whose low eleven bits
describe the instrument state. The layout, LSB first:

====  ==========================================
Bit   Meaning
====  ==========================================
0     CH1 regulation (0 = CV, 1 = CC)
1     CH2 regulation (0 = CV, 1 = CC)
2-3   Track mode (01 independent, 11 series, 10 parallel)
4     CH1 output on
5     CH2 output on
6     Timer 1 on
7     Timer 2 on
8     CH1 waveform display
9     CH2 waveform display
10    Parallel mode
====  ==========================================

Decoding is total: every 32-bit word yields a :class:`SystemStatus`. A track
pattern of ``00`` is reported as ``None`` rather than an error, since the
word is polled telemetry and not a command acknowledgment.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from psuctl_siglent.types import RegulationMode, TrackMode


class StatusBit(IntEnum):
    """Bit positions within the status word."""

    CH1_REGULATION = 0
    CH2_REGULATION = 1
    TRACK_LOW = 2
    TRACK_HIGH = 3
    CH1_OUTPUT = 4
    CH2_OUTPUT = 5
    TIMER1 = 6
    TIMER2 = 7
    CH1_WAVE_DISPLAY = 8
    CH2_WAVE_DISPLAY = 9
    PARALLEL = 10


TRACK_MASK = 0b11
"""Mask applied after shifting the word right by ``StatusBit.TRACK_LOW``."""

_TRACK_PATTERNS: dict[int, TrackMode] = {
    0b01: TrackMode.INDEPENDENT,
    0b11: TrackMode.SERIES,
    0b10: TrackMode.PARALLEL,
}


def _bit(word: int, bit: StatusBit) -> bool:
    return bool((word >> bit) & 1)


def _regulation(word: int, bit: StatusBit) -> RegulationMode:
    return RegulationMode.CONSTANT_CURRENT if _bit(word, bit) else RegulationMode.CONSTANT_VOLTAGE


def track_mode_from_bits(pattern: int) -> TrackMode | None:
    """Map a 2-bit track pattern to a :class:`TrackMode`.

    Args:
        pattern: Bits 2-3 of the status word, shifted down.

    Returns:
        The track mode, or None for the unmapped ``00`` pattern.
    """
    return _TRACK_PATTERNS.get(pattern & TRACK_MASK)


@dataclass(frozen=True)
class SystemStatus:
    """Decoded snapshot of the status word.

    Attributes:
        raw: The word as read from the instrument.
        ch1_regulation: CH1 regulation mode.
        ch2_regulation: CH2 regulation mode.
        track_mode: Track mode, or None when the pattern is not a valid mode.
        ch1_output_on: CH1 output enabled.
        ch2_output_on: CH2 output enabled.
        timer1_on: CH1 timer running.
        timer2_on: CH2 timer running.
        ch1_wave_display: CH1 waveform display enabled.
        ch2_wave_display: CH2 waveform display enabled.
        parallel_mode: Parallel mode flag.
    """

    raw: int
    ch1_regulation: RegulationMode
    ch2_regulation: RegulationMode
    track_mode: TrackMode | None
    ch1_output_on: bool
    ch2_output_on: bool
    timer1_on: bool
    timer2_on: bool
    ch1_wave_display: bool
    ch2_wave_display: bool
    parallel_mode: bool

    @classmethod
    def from_word(cls, word: int) -> SystemStatus:
        """Decode a raw status word. Never fails."""
        return cls(
            raw=word,
            ch1_regulation=_regulation(word, StatusBit.CH1_REGULATION),
            ch2_regulation=_regulation(word, StatusBit.CH2_REGULATION),
            track_mode=track_mode_from_bits(word >> StatusBit.TRACK_LOW),
            ch1_output_on=_bit(word, StatusBit.CH1_OUTPUT),
            ch2_output_on=_bit(word, StatusBit.CH2_OUTPUT),
            timer1_on=_bit(word, StatusBit.TIMER1),
            timer2_on=_bit(word, StatusBit.TIMER2),
            ch1_wave_display=_bit(word, StatusBit.CH1_WAVE_DISPLAY),
            ch2_wave_display=_bit(word, StatusBit.CH2_WAVE_DISPLAY),
            parallel_mode=_bit(word, StatusBit.PARALLEL),
        )


def decode_status_word(word: int) -> SystemStatus:
    """Decode a raw status word into a :class:`SystemStatus`.

    Args:
        word: The status word (only the low eleven bits are meaningful).

    Returns:
        The decoded snapshot.
    """
    return SystemStatus.from_word(word)
