"""SPD3303X command encoder.

Pure builders for every command line the driver sends. Arguments are assumed
to be validated already (see :mod:`psuctl_siglent.capability`), so nothing
here can fail or perform I/O. The line terminator is appended by
:class:`psuctl_scpi.ScpiConnection` when the line is written.
"""

from __future__ import annotations

from psuctl_scpi.number import format_number

from psuctl_siglent.types import Channel, DhcpState, OutputState, TimerState, TrackMode

# -- IEEE 488.2 --------------------------------------------------------------

IDN = "*IDN?"


def save_state(slot: int) -> str:
    """``*SAV <slot>``: store the current settings in a memory slot."""
    return f"*SAV {slot}"


def recall_state(slot: int) -> str:
    """``*RCL <slot>``: restore the settings stored in a memory slot."""
    return f"*RCL {slot}"


# -- Channel selection ---------------------------------------------------------

SELECTED_CHANNEL = "INST?"


def select_channel(channel: Channel) -> str:
    """``INST CHn``: make *channel* the front-panel selected channel."""
    return f"INST {channel.scpi}"


# -- Setpoints -----------------------------------------------------------------


def set_voltage(channel: Channel, volts: float) -> str:
    """``CHn:VOLT <v>``: program the voltage setpoint."""
    return f"{channel.scpi}:VOLT {format_number(volts)}"


def voltage(channel: Channel) -> str:
    """``CHn:VOLT?``: query the voltage setpoint."""
    return f"{channel.scpi}:VOLT?"


def set_current(channel: Channel, amps: float) -> str:
    """``CHn:CURR <a>``: program the current limit."""
    return f"{channel.scpi}:CURR {format_number(amps)}"


def current(channel: Channel) -> str:
    """``CHn:CURR?``: query the current limit."""
    return f"{channel.scpi}:CURR?"


# -- Output, tracking, waveform display ----------------------------------------

TRACK_MODE = "OUTP:TRACK?"


def set_output(channel: Channel, state: OutputState) -> str:
    """``OUTPut CHn,ON|OFF``: switch a channel output."""
    return f"OUTPut {channel.scpi},{state.scpi}"


def set_track_mode(mode: TrackMode) -> str:
    """``OUTP:TRACK <n>``: 0 independent, 1 series, 2 parallel."""
    return f"OUTP:TRACK {mode.value}"


def set_wave_display(channel: Channel, state: OutputState) -> str:
    """``OUTP:WAVE CHn,ON|OFF``: toggle the waveform display."""
    return f"OUTP:WAVE {channel.scpi},{state.scpi}"


# -- Measurement ---------------------------------------------------------------


def _measure(quantity: str, channel: Channel | None) -> str:
    # No suffix queries the aggregate/default reading.
    suffix = f" {channel.scpi}" if channel is not None else ""
    return f"MEAS:{quantity}?{suffix}"


def measure_voltage(channel: Channel | None = None) -> str:
    """``MEAS:VOLT? [CHn]``: measured output voltage."""
    return _measure("VOLT", channel)


def measure_current(channel: Channel | None = None) -> str:
    """``MEAS:CURR? [CHn]``: measured output current."""
    return _measure("CURR", channel)


def measure_power(channel: Channel | None = None) -> str:
    """``MEAS:POWEr? [CHn]``: measured output power."""
    # Full POWEr mnemonic; some firmware revisions ignore the short POW form.
    return _measure("POWEr", channel)


# -- Timer ---------------------------------------------------------------------


def set_timer(channel: Channel, group: int, volts: float, amps: float, seconds: float) -> str:
    """``TIMER:SET CHn,<group>,<v>,<a>,<s>``: program one timer step."""
    return (
        f"TIMER:SET {channel.scpi},{group},"
        f"{format_number(volts)},{format_number(amps)},{format_number(seconds)}"
    )


def timer(channel: Channel, group: int) -> str:
    """``TIMER:SET? CHn,<group>``: query one timer step."""
    return f"TIMER:SET? {channel.scpi},{group}"


def set_timer_state(channel: Channel, state: TimerState) -> str:
    """``TIMER CHn,ON|OFF``: start or stop the timer sequence."""
    return f"TIMER {channel.scpi},{state.scpi}"


# -- System --------------------------------------------------------------------

SYSTEM_ERROR = "SYST:ERR?"
SYSTEM_VERSION = "SYST:VERS?"
SYSTEM_STATUS = "SYST:STAT?"

# -- Network -------------------------------------------------------------------

IP_ADDRESS = "IPaddr?"
SUBNET_MASK = "MASKaddr?"
GATEWAY = "GATEaddr?"
DHCP = "DHCP?"


def set_ip(address: str) -> str:
    """``IPaddr <addr>``: static IP address."""
    return f"IPaddr {address}"


def set_mask(mask: str) -> str:
    """``MASKaddr <mask>``: static subnet mask."""
    return f"MASKaddr {mask}"


def set_gateway(gateway: str) -> str:
    """``GATEaddr <addr>``: static gateway address."""
    return f"GATEaddr {gateway}"


def set_dhcp(state: DhcpState) -> str:
    """``DHCP ON|OFF``: enable or disable DHCP."""
    return f"DHCP {state.scpi}"
