"""Siglent SPD3303X power supply emulator.

Provides an in-process SCPI emulator implementing the ``ScpiTransport``
protocol: bytes written are parsed as command lines, and the response to the
last query is returned by the next read.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from psuctl_scpi.number import format_on_off

from psuctl_siglent.status import StatusBit
from psuctl_siglent.types import Channel, RegulationMode, TrackMode

# ---------------------------------------------------------------------------
# Long-form -> short-form SCPI keyword map
# ---------------------------------------------------------------------------

_LONG_TO_SHORT: dict[str, str] = {
    "INSTRUMENT": "INST",
    "VOLTAGE": "VOLT",
    "CURRENT": "CURR",
    "OUTPUT": "OUTP",
    "MEASURE": "MEAS",
    "POWER": "POWE",
    "SYSTEM": "SYST",
    "ERROR": "ERR",
    "VERSION": "VERS",
    "STATUS": "STAT",
    "IPADDR": "IP",
    "MASKADDR": "MASK",
    "GATEADDR": "GATE",
}

_TRACK_BITS: dict[TrackMode, int] = {
    TrackMode.INDEPENDENT: 0b01,
    TrackMode.SERIES: 0b11,
    TrackMode.PARALLEL: 0b10,
}

_SLOTS = range(1, 6)
_TIMER_GROUPS = range(1, 6)


def _normalize_header(header: str) -> str:
    """Normalize a SCPI header to canonical short form.

    1. Uppercase
    2. Strip leading colon
    3. Split on ``:``
    4. Map long forms to short forms
    5. Rejoin with ``:``, restoring a trailing ``?``
    """
    upper = header.upper().lstrip(":")
    suffix = "?" if upper.endswith("?") else ""
    segments = upper.rstrip("?").split(":")
    return ":".join(_LONG_TO_SHORT.get(seg, seg) for seg in segments) + suffix


class _ParameterError(Exception):
    """Internal signal for a malformed or out-of-range parameter."""


def _parse_on_off(token: str) -> bool:
    token = token.strip().upper()
    if token in ("ON", "1"):
        return True
    if token in ("OFF", "0"):
        return False
    raise _ParameterError(token)


def _parse_float(token: str) -> float:
    try:
        return float(token.strip())
    except ValueError:
        raise _ParameterError(token) from None


def _parse_channel(token: str) -> Channel:
    try:
        return Channel(token.strip().upper())
    except ValueError:
        raise _ParameterError(token) from None


def _parse_index(token: str, valid: range) -> int:
    try:
        value = int(token.strip())
    except ValueError:
        raise _ParameterError(token) from None
    if value not in valid:
        raise _ParameterError(token)
    return value


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Spd3303xEmulatorConfig:
    """Configuration for an SPD3303X emulator instance.

    Args:
        identity: ``*IDN?`` response string.
        version: ``SYST:VERS?`` response string.
        max_voltage: Maximum CH1/CH2 voltage in volts (> 0).
        max_current: Maximum CH1/CH2 current in amps (> 0).
        nul_padding: Number of NUL bytes appended to every response, as
            transports reading fixed-size blocks do.
    """

    identity: str
    version: str = "1.01.01.02.05"
    max_voltage: float = 32.0
    max_current: float = 3.2
    nul_padding: int = 0

    def __post_init__(self) -> None:
        if not self.identity:
            raise ValueError("identity must be non-empty")
        if self.max_voltage <= 0:
            raise ValueError("max_voltage must be > 0")
        if self.max_current <= 0:
            raise ValueError("max_current must be > 0")
        if self.nul_padding < 0:
            raise ValueError("nul_padding must be >= 0")


# ---------------------------------------------------------------------------
# Internal state
# ---------------------------------------------------------------------------


@dataclass
class _ChannelState:
    voltage_setpoint: float = 0.0
    current_setpoint: float = 0.0
    output_enabled: bool = False
    wave_display: bool = False
    timer_enabled: bool = False
    regulation: RegulationMode = RegulationMode.CONSTANT_VOLTAGE
    timers: dict[int, tuple[float, float, float]] = field(
        default_factory=lambda: {group: (0.0, 0.0, 0.0) for group in _TIMER_GROUPS}
    )
    measured_voltage: float | None = None
    measured_current: float | None = None


@dataclass
class _SavedState:
    setpoints: dict[Channel, tuple[float, float]]
    track_mode: TrackMode


# ---------------------------------------------------------------------------
# Emulator
# ---------------------------------------------------------------------------


class Spd3303xEmulator:
    """In-process SPD3303X emulator implementing ``ScpiTransport``.

    Every received line is recorded in :attr:`received`, which makes the
    emulator convenient for asserting command order.

    Args:
        config: Emulator configuration specifying model characteristics.
    """

    def __init__(self, config: Spd3303xEmulatorConfig) -> None:
        self._config = config
        self._channels: dict[Channel, _ChannelState] = {ch: _ChannelState() for ch in Channel}
        self._selected_channel = Channel.CH1
        self._track_mode = TrackMode.INDEPENDENT
        self._saved: dict[int, _SavedState] = {}
        self._ip = "192.168.0.232"
        self._mask = "255.255.255.0"
        self._gateway = "192.168.0.1"
        self._dhcp = False
        self._response_buffer = b""
        self._error_queue: list[tuple[int, str]] = []
        self.received: list[str] = []
        self.closed = False

        # Build dispatch tables
        self._set_handlers: dict[str, Callable[[str], None]] = {
            "*SAV": self._save,
            "*RCL": self._recall,
            "INST": self._set_selected_channel,
            "OUTP": self._set_output,
            "OUTP:TRACK": self._set_track_mode,
            "OUTP:WAVE": self._set_wave_display,
            "TIMER": self._set_timer_state,
            "TIMER:SET": self._set_timer,
            "IP": self._set_ip,
            "MASK": self._set_mask,
            "GATE": self._set_gateway,
            "DHCP": self._set_dhcp,
        }

        self._channel_set_handlers: dict[str, Callable[[_ChannelState, str], None]] = {
            "VOLT": self._set_voltage,
            "CURR": self._set_current,
        }

        self._query_handlers: dict[str, Callable[[str], str]] = {
            "*IDN?": lambda _: self._config.identity,
            "INST?": lambda _: self._selected_channel.value,
            "OUTP:TRACK?": lambda _: str(self._track_mode.value),
            "MEAS:VOLT?": self._measure_voltage,
            "MEAS:CURR?": self._measure_current,
            "MEAS:POWE?": self._measure_power,
            "TIMER:SET?": self._get_timer,
            "SYST:ERR?": lambda _: self._pop_error(),
            "SYST:VERS?": lambda _: self._config.version,
            "SYST:STAT?": lambda _: f"0x{self.status_word():X}",
            "IP?": lambda _: self._ip,
            "MASK?": lambda _: self._mask,
            "GATE?": lambda _: self._gateway,
            "DHCP?": lambda _: format_on_off(self._dhcp),
        }

        self._channel_query_handlers: dict[str, Callable[[_ChannelState], str]] = {
            "VOLT?": lambda ch: f"{ch.voltage_setpoint:.3f}",
            "CURR?": lambda ch: f"{ch.current_setpoint:.3f}",
        }

    # -- Transport interface ------------------------------------------------

    def write(self, data: bytes) -> None:
        """Process one or more newline-terminated SCPI lines."""
        for raw_line in data.decode("ascii").splitlines():
            line = raw_line.strip()
            if line:
                self.received.append(line)
                self._process_line(line)

    def read(self, max_bytes: int) -> bytes:
        """Return and clear the buffered response, truncated to *max_bytes*."""
        resp = self._response_buffer[:max_bytes]
        self._response_buffer = b""
        return resp

    def close(self) -> None:
        """Close the emulator (no I/O resources to release)."""
        self.closed = True

    # -- Test helpers -------------------------------------------------------

    def set_measured_voltage(self, value: float, channel: Channel = Channel.CH1) -> None:
        """Set a fixed measured voltage override for ``MEAS:VOLT?``."""
        self._channels[channel].measured_voltage = value

    def set_measured_current(self, value: float, channel: Channel = Channel.CH1) -> None:
        """Set a fixed measured current override for ``MEAS:CURR?``."""
        self._channels[channel].measured_current = value

    def set_regulation_mode(self, mode: RegulationMode, channel: Channel = Channel.CH1) -> None:
        """Set the regulation mode reported in the status word."""
        self._channels[channel].regulation = mode

    def is_output_on(self, channel: Channel) -> bool:
        """Return the emulated output state, including CH3."""
        return self._channels[channel].output_enabled

    def status_word(self) -> int:
        """Build the ``SYST:STAT?`` word from the emulated state."""
        ch1 = self._channels[Channel.CH1]
        ch2 = self._channels[Channel.CH2]
        flags = {
            StatusBit.CH1_REGULATION: ch1.regulation is RegulationMode.CONSTANT_CURRENT,
            StatusBit.CH2_REGULATION: ch2.regulation is RegulationMode.CONSTANT_CURRENT,
            StatusBit.CH1_OUTPUT: ch1.output_enabled,
            StatusBit.CH2_OUTPUT: ch2.output_enabled,
            StatusBit.TIMER1: ch1.timer_enabled,
            StatusBit.TIMER2: ch2.timer_enabled,
            StatusBit.CH1_WAVE_DISPLAY: ch1.wave_display,
            StatusBit.CH2_WAVE_DISPLAY: ch2.wave_display,
            StatusBit.PARALLEL: self._track_mode is TrackMode.PARALLEL,
        }
        word = _TRACK_BITS[self._track_mode] << StatusBit.TRACK_LOW
        for bit, on in flags.items():
            if on:
                word |= 1 << bit
        return word

    # -- Line processing ----------------------------------------------------

    def _process_line(self, line: str) -> None:
        is_query, header, args = self._parse_line(line)
        norm = _normalize_header(header)
        channel, _, rest = norm.partition(":")
        try:
            if channel in Channel.__members__ and rest:
                self._dispatch_channel(Channel(channel), rest, args, is_query)
            else:
                self._dispatch(norm, args, is_query)
        except _ParameterError:
            self._error_queue.append((-220, "Parameter error"))

    def _parse_line(self, line: str) -> tuple[bool, str, str]:
        """Parse a SCPI line into (is_query, header, args)."""
        is_query = "?" in line
        if is_query:
            qmark_idx = line.index("?")
            header = line[: qmark_idx + 1]
            args = line[qmark_idx + 1 :].strip()
        else:
            parts = line.split(None, 1)
            header = parts[0]
            args = parts[1] if len(parts) > 1 else ""
        return is_query, header, args

    def _dispatch(self, header: str, args: str, is_query: bool) -> None:
        if is_query:
            query = self._query_handlers.get(header)
            if query is None:
                self._error_queue.append((-100, "Command error"))
                return
            self._respond(query(args))
        else:
            handler = self._set_handlers.get(header)
            if handler is None:
                self._error_queue.append((-100, "Command error"))
                return
            handler(args)

    def _dispatch_channel(self, channel: Channel, header: str, args: str, is_query: bool) -> None:
        if channel is Channel.CH3:
            # Fixed-output channel: no setpoints to program or read back.
            self._error_queue.append((-221, "Settings conflict"))
            return
        state = self._channels[channel]
        if is_query:
            query = self._channel_query_handlers.get(header)
            if query is None:
                self._error_queue.append((-100, "Command error"))
                return
            self._respond(query(state))
        else:
            handler = self._channel_set_handlers.get(header)
            if handler is None:
                self._error_queue.append((-100, "Command error"))
                return
            handler(state, args)

    def _respond(self, text: str) -> None:
        self._response_buffer = (text + "\n").encode("ascii") + b"\x00" * self._config.nul_padding

    def _pop_error(self) -> str:
        if self._error_queue:
            code, msg = self._error_queue.pop(0)
            return f'{code},"{msg}"'
        return '0,"No error"'

    def _split_args(self, args: str, count: int) -> list[str]:
        parts = [p.strip() for p in args.split(",")]
        if len(parts) != count:
            raise _ParameterError(args)
        return parts

    def _programmable(self, token: str) -> _ChannelState:
        channel = _parse_channel(token)
        if channel is Channel.CH3:
            raise _ParameterError(token)
        return self._channels[channel]

    def _check_limits(self, voltage: float, current: float) -> None:
        if not 0.0 <= voltage <= self._config.max_voltage:
            raise _ParameterError(str(voltage))
        if not 0.0 <= current <= self._config.max_current:
            raise _ParameterError(str(current))

    # -- Set handlers -------------------------------------------------------

    def _save(self, args: str) -> None:
        slot = _parse_index(args, _SLOTS)
        self._saved[slot] = _SavedState(
            setpoints={
                ch: (state.voltage_setpoint, state.current_setpoint)
                for ch, state in self._channels.items()
            },
            track_mode=self._track_mode,
        )

    def _recall(self, args: str) -> None:
        slot = _parse_index(args, _SLOTS)
        saved = self._saved.get(slot)
        if saved is None:
            return
        for ch, (voltage, current) in saved.setpoints.items():
            self._channels[ch].voltage_setpoint = voltage
            self._channels[ch].current_setpoint = current
        self._track_mode = saved.track_mode

    def _set_selected_channel(self, args: str) -> None:
        self._selected_channel = _parse_channel(args)

    def _set_voltage(self, state: _ChannelState, args: str) -> None:
        value = _parse_float(args)
        self._check_limits(value, 0.0)
        state.voltage_setpoint = value

    def _set_current(self, state: _ChannelState, args: str) -> None:
        value = _parse_float(args)
        self._check_limits(0.0, value)
        state.current_setpoint = value

    def _set_output(self, args: str) -> None:
        channel_token, state_token = self._split_args(args, 2)
        enabled = _parse_on_off(state_token)
        self._channels[_parse_channel(channel_token)].output_enabled = enabled

    def _set_track_mode(self, args: str) -> None:
        value = _parse_index(args, range(3))
        self._track_mode = TrackMode(value)

    def _set_wave_display(self, args: str) -> None:
        channel_token, state_token = self._split_args(args, 2)
        enabled = _parse_on_off(state_token)
        self._programmable(channel_token).wave_display = enabled

    def _set_timer_state(self, args: str) -> None:
        channel_token, state_token = self._split_args(args, 2)
        enabled = _parse_on_off(state_token)
        self._programmable(channel_token).timer_enabled = enabled

    def _set_timer(self, args: str) -> None:
        channel_token, group_token, v, i, t = self._split_args(args, 5)
        state = self._programmable(channel_token)
        group = _parse_index(group_token, _TIMER_GROUPS)
        voltage, current, seconds = _parse_float(v), _parse_float(i), _parse_float(t)
        self._check_limits(voltage, current)
        state.timers[group] = (voltage, current, seconds)

    def _set_ip(self, args: str) -> None:
        self._ip = args.strip()

    def _set_mask(self, args: str) -> None:
        self._mask = args.strip()

    def _set_gateway(self, args: str) -> None:
        self._gateway = args.strip()

    def _set_dhcp(self, args: str) -> None:
        self._dhcp = _parse_on_off(args)

    # -- Query handlers -----------------------------------------------------

    def _measured_channel(self, args: str) -> _ChannelState:
        if not args:
            return self._channels[self._selected_channel]
        return self._programmable(args)

    def _voltage_reading(self, state: _ChannelState) -> float:
        if state.measured_voltage is not None:
            return state.measured_voltage
        return state.voltage_setpoint if state.output_enabled else 0.0

    def _current_reading(self, state: _ChannelState) -> float:
        if state.measured_current is not None:
            return state.measured_current
        return 0.0

    def _measure_voltage(self, args: str) -> str:
        return f"{self._voltage_reading(self._measured_channel(args)):.3f}"

    def _measure_current(self, args: str) -> str:
        return f"{self._current_reading(self._measured_channel(args)):.3f}"

    def _measure_power(self, args: str) -> str:
        state = self._measured_channel(args)
        return f"{self._voltage_reading(state) * self._current_reading(state):.3f}"

    def _get_timer(self, args: str) -> str:
        channel_token, group_token = self._split_args(args, 2)
        state = self._programmable(channel_token)
        voltage, current, seconds = state.timers[_parse_index(group_token, _TIMER_GROUPS)]
        return f"{voltage:.3f},{current:.3f},{seconds:.3f}"


# ---------------------------------------------------------------------------
# Factory functions
# ---------------------------------------------------------------------------


def make_spd3303x_emulator(
    serial: str = "SPD3XGB4150080",
    *,
    nul_padding: int = 0,
) -> Spd3303xEmulator:
    """Create an SPD3303X emulator.

    Args:
        serial: Serial number for the ``*IDN?`` response.
        nul_padding: NUL bytes appended to every response.

    Returns:
        Configured emulator instance (32 V, 3.2 A on CH1/CH2).
    """
    config = Spd3303xEmulatorConfig(
        identity=f"Siglent Technologies,SPD3303X,{serial},1.01.01.02.05,V3.0",
        nul_padding=nul_padding,
    )
    return Spd3303xEmulator(config)
