"""Siglent SPD3303X power supply instrument driver.

Wraps a ``ScpiConnection`` with typed methods for controlling SPD3303X /
SPD3303X-E triple output bench supplies. Every set operation follows
guard -> encode -> write; every query follows guard -> encode -> write ->
read -> trim -> decode. Composite operations run an ordered list of single
steps and stop at the first failure, re-raising it unchanged.

Example:
    Connect over VXI-11 and bring the supply into a known state::

        from psuctl_siglent import Channel, OutputState, connect

        psu = connect("192.168.0.232")
        psu.soft_reset()
        psu.set_voltage(Channel.CH1, 5.0)
        psu.set_current(Channel.CH1, 1.0)
        psu.set_output(Channel.CH1, OutputState.ON)
        print(psu.get_channel_status(Channel.CH1))
        psu.close()
"""

from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING, Any, Callable

from psuctl_core import InstrumentIdentity
from psuctl_scpi import ScpiConnection, VisaResource, vxi11_address

from psuctl_siglent import commands
from psuctl_siglent.capability import Capability, require, require_slot, require_timer_group
from psuctl_siglent.responses import (
    parse_channel,
    parse_dhcp,
    parse_status,
    parse_timer_entry,
    parse_track_mode,
)
from psuctl_siglent.status import SystemStatus
from psuctl_siglent.types import (
    Channel,
    ChannelStatus,
    DhcpState,
    NetworkConfig,
    OutputState,
    TimerEntry,
    TimerState,
    TrackMode,
)

if TYPE_CHECKING:
    from psuctl_siglent.config import Spd3303xConfig

logger = logging.getLogger(__name__)

Step = tuple[str, Callable[[], Any]]
"""A named step of a composite sequence."""


def run_steps(name: str, steps: list[Step]) -> list[Any]:
    """Run *steps* in order, stopping at the first failure.

    No rollback is attempted: a failure leaves the instrument in whatever
    state the completed steps produced.

    Args:
        name: Sequence name used in log messages.
        steps: Ordered ``(description, callable)`` pairs.

    Returns:
        The result of each step, in order.
    """
    results: list[Any] = []
    for description, step in steps:
        logger.debug("%s: %s", name, description)
        results.append(step())
    return results


class Spd3303x:
    """High-level driver for Siglent SPD3303X power supplies.

    Args:
        connection: An open ``ScpiConnection`` to the instrument. The driver
            owns it for its lifetime; :meth:`close` is terminal.
    """

    def __init__(self, connection: ScpiConnection) -> None:
        self._conn = connection

    # -- Identity / lifecycle -----------------------------------------------

    def identify(self) -> str:
        """Query instrument identification string (``*IDN?``)."""
        return self._conn.query(commands.IDN)

    def get_identity(self) -> InstrumentIdentity:
        """Query and parse instrument identification (``*IDN?``)."""
        return self._conn.get_identity()

    def close(self) -> None:
        """Close the underlying connection."""
        self._conn.close()

    # -- Saved states -------------------------------------------------------

    def save_state(self, slot: int) -> None:
        """Save the current settings to memory slot 1-5 (``*SAV``)."""
        require_slot(slot)
        self._conn.command(commands.save_state(slot))

    def recall_state(self, slot: int) -> None:
        """Recall settings from memory slot 1-5 (``*RCL``)."""
        require_slot(slot)
        self._conn.command(commands.recall_state(slot))

    # -- Channel selection --------------------------------------------------

    def select_channel(self, channel: Channel) -> None:
        """Select the channel shown as active on the front panel."""
        self._conn.command(commands.select_channel(channel))

    def get_selected_channel(self) -> Channel:
        """Query the currently selected channel."""
        return parse_channel(self._conn.query(commands.SELECTED_CHANNEL))

    # -- Setpoints ----------------------------------------------------------

    def set_voltage(self, channel: Channel, volts: float) -> None:
        """Set the voltage setpoint of a programmable channel.

        Args:
            channel: CH1 or CH2.
            volts: Voltage in volts.

        Raises:
            ChannelCapabilityError: For CH3.
        """
        require(channel, Capability.SETPOINT)
        self._conn.command(commands.set_voltage(channel, volts))

    def get_voltage(self, channel: Channel) -> float:
        """Query the voltage setpoint of a programmable channel."""
        require(channel, Capability.SETPOINT)
        return self._conn.query_number(commands.voltage(channel))

    def set_current(self, channel: Channel, amps: float) -> None:
        """Set the current setpoint of a programmable channel.

        Args:
            channel: CH1 or CH2.
            amps: Current in amps.

        Raises:
            ChannelCapabilityError: For CH3.
        """
        require(channel, Capability.SETPOINT)
        self._conn.command(commands.set_current(channel, amps))

    def get_current(self, channel: Channel) -> float:
        """Query the current setpoint of a programmable channel."""
        require(channel, Capability.SETPOINT)
        return self._conn.query_number(commands.current(channel))

    # -- Output -------------------------------------------------------------

    def set_output(self, channel: Channel, state: OutputState) -> None:
        """Switch a channel output on or off. Supported on every channel."""
        require(channel, Capability.OUTPUT_CONTROL)
        self._conn.command(commands.set_output(channel, state))

    def is_output_enabled(self, channel: Channel) -> bool:
        """Query whether a channel output is on.

        The dedicated output query is undocumented on this family, so CH1 and
        CH2 are answered from the status word.

        Raises:
            ChannelCapabilityError: For CH3, whose output state is not observable.
        """
        require(channel, Capability.OUTPUT_QUERY)
        status = self.get_system_status()
        if channel is Channel.CH1:
            return status.ch1_output_on
        return status.ch2_output_on

    # -- Tracking and waveform display --------------------------------------

    def set_track_mode(self, mode: TrackMode) -> None:
        """Set the CH1/CH2 track mode."""
        self._conn.command(commands.set_track_mode(mode))

    def get_track_mode(self) -> TrackMode:
        """Query the track mode (``OUTP:TRACK?``).

        Raises:
            UnknownValueError: If the instrument reports an unmapped value.
        """
        return parse_track_mode(self._conn.query(commands.TRACK_MODE))

    def set_wave_display(self, channel: Channel, state: OutputState) -> None:
        """Toggle the waveform display of a programmable channel."""
        require(channel, Capability.WAVE_DISPLAY)
        self._conn.command(commands.set_wave_display(channel, state))

    # -- Measurements -------------------------------------------------------

    def measure_voltage(self, channel: Channel | None = None) -> float:
        """Measure output voltage of a channel, or the default reading if None."""
        self._require_measure(channel)
        return self._conn.query_number(commands.measure_voltage(channel))

    def measure_current(self, channel: Channel | None = None) -> float:
        """Measure output current of a channel, or the default reading if None."""
        self._require_measure(channel)
        return self._conn.query_number(commands.measure_current(channel))

    def measure_power(self, channel: Channel | None = None) -> float:
        """Measure output power of a channel, or the default reading if None."""
        self._require_measure(channel)
        return self._conn.query_number(commands.measure_power(channel))

    def get_channel_status(self, channel: Channel) -> ChannelStatus:
        """Read setpoints and measurements of a programmable channel.

        Five queries are issued in order: set voltage, set current, measured
        voltage, measured current, measured power. The instrument may change
        state between them; the result is not an atomic snapshot.
        """
        set_voltage, set_current, voltage, current, power = run_steps(
            f"channel_status {channel.scpi}",
            [
                ("set voltage", partial(self.get_voltage, channel)),
                ("set current", partial(self.get_current, channel)),
                ("measured voltage", partial(self.measure_voltage, channel)),
                ("measured current", partial(self.measure_current, channel)),
                ("measured power", partial(self.measure_power, channel)),
            ],
        )
        return ChannelStatus(
            set_voltage=set_voltage,
            set_current=set_current,
            measured_voltage=voltage,
            measured_current=current,
            measured_power=power,
        )

    # -- Timer --------------------------------------------------------------

    def set_timer(
        self,
        channel: Channel,
        group: int,
        volts: float,
        amps: float,
        seconds: float,
    ) -> None:
        """Program one timer step.

        Args:
            channel: CH1 or CH2.
            group: Timer group 1-5.
            volts: Step voltage in volts.
            amps: Step current in amps.
            seconds: Step duration in seconds.
        """
        require(channel, Capability.TIMER)
        require_timer_group(group)
        self._conn.command(commands.set_timer(channel, group, volts, amps, seconds))

    def get_timer(self, channel: Channel, group: int) -> TimerEntry:
        """Query one programmed timer step."""
        require(channel, Capability.TIMER)
        require_timer_group(group)
        return parse_timer_entry(group, self._conn.query(commands.timer(channel, group)))

    def set_timer_state(self, channel: Channel, state: TimerState) -> None:
        """Start or stop the timer of a programmable channel."""
        require(channel, Capability.TIMER)
        self._conn.command(commands.set_timer_state(channel, state))

    # -- System -------------------------------------------------------------

    def get_system_error(self) -> str:
        """Query the error queue head (``SYST:ERR?``) as raw text."""
        return self._conn.query(commands.SYSTEM_ERROR)

    def get_system_version(self) -> str:
        """Query the firmware version (``SYST:VERS?``)."""
        return self._conn.query(commands.SYSTEM_VERSION)

    def get_system_status(self) -> SystemStatus:
        """Query and decode the status word (``SYST:STAT?``)."""
        return parse_status(self._conn.query(commands.SYSTEM_STATUS))

    # -- Network ------------------------------------------------------------

    def set_ip(self, address: str) -> None:
        """Set the static IP address."""
        self._conn.command(commands.set_ip(address))

    def get_ip(self) -> str:
        """Query the IP address."""
        return self._conn.query(commands.IP_ADDRESS)

    def set_mask(self, mask: str) -> None:
        """Set the subnet mask."""
        self._conn.command(commands.set_mask(mask))

    def get_mask(self) -> str:
        """Query the subnet mask."""
        return self._conn.query(commands.SUBNET_MASK)

    def set_gateway(self, gateway: str) -> None:
        """Set the default gateway."""
        self._conn.command(commands.set_gateway(gateway))

    def get_gateway(self) -> str:
        """Query the default gateway."""
        return self._conn.query(commands.GATEWAY)

    def set_dhcp(self, state: DhcpState) -> None:
        """Enable or disable DHCP."""
        self._conn.command(commands.set_dhcp(state))

    def get_dhcp(self) -> DhcpState:
        """Query the DHCP state."""
        return parse_dhcp(self._conn.query(commands.DHCP))

    def get_network_config(self) -> NetworkConfig:
        """Read IP, mask, gateway and DHCP state, in that order."""
        ip, mask, gateway, dhcp = run_steps(
            "network_config",
            [
                ("ip", self.get_ip),
                ("mask", self.get_mask),
                ("gateway", self.get_gateway),
                ("dhcp", self.get_dhcp),
            ],
        )
        return NetworkConfig(ip=ip, mask=mask, gateway=gateway, dhcp=dhcp.is_on)

    # -- Soft reset ---------------------------------------------------------

    def soft_reset_steps(self) -> list[Step]:
        """Return the ordered steps of :meth:`soft_reset`.

        Outputs are switched off before track mode or setpoints change, so
        no unintended voltage is delivered while reconfiguring.
        """
        off = OutputState.OFF
        return [
            ("output CH1 off", partial(self.set_output, Channel.CH1, off)),
            ("output CH2 off", partial(self.set_output, Channel.CH2, off)),
            ("output CH3 off", partial(self.set_output, Channel.CH3, off)),
            ("track mode independent", partial(self.set_track_mode, TrackMode.INDEPENDENT)),
            ("timer CH1 off", partial(self.set_timer_state, Channel.CH1, TimerState.OFF)),
            ("timer CH2 off", partial(self.set_timer_state, Channel.CH2, TimerState.OFF)),
            ("wave display CH1 off", partial(self.set_wave_display, Channel.CH1, off)),
            ("wave display CH2 off", partial(self.set_wave_display, Channel.CH2, off)),
            ("CH1 voltage 0 V", partial(self.set_voltage, Channel.CH1, 0.0)),
            ("CH1 current 0 A", partial(self.set_current, Channel.CH1, 0.0)),
            ("CH2 voltage 0 V", partial(self.set_voltage, Channel.CH2, 0.0)),
            ("CH2 current 0 A", partial(self.set_current, Channel.CH2, 0.0)),
        ]

    def soft_reset(self) -> None:
        """Bring the instrument into a known, safe state.

        Does not rely on a vendor reset command. Turns all outputs off, sets
        independent tracking, stops the timers, disables waveform display and
        zeroes the CH1/CH2 setpoints. Aborts at the first failing step.
        """
        run_steps("soft_reset", self.soft_reset_steps())
        logger.debug("soft_reset: complete")

    # -- Private helpers ----------------------------------------------------

    @staticmethod
    def _require_measure(channel: Channel | None) -> None:
        if channel is not None:
            require(channel, Capability.MEASURE)


def create_instrument(visa_address: str, *, timeout_ms: int = 5000) -> Spd3303x:
    """Create an SPD3303X driver from a VISA address.

    Opens the VISA resource, wraps it in a :class:`ScpiConnection`, and
    returns a ready-to-use :class:`Spd3303x`.

    Args:
        visa_address: VISA resource string
            (e.g. ``"TCPIP::192.168.0.232::inst0::INSTR"``).
        timeout_ms: I/O timeout in milliseconds.

    Returns:
        Connected driver instance.
    """
    resource = VisaResource(visa_address, timeout_ms=timeout_ms)
    resource.open()
    return Spd3303x(ScpiConnection(resource))


def connect(host: str, resource: str = "inst0", *, timeout_ms: int = 5000) -> Spd3303x:
    """Connect to an SPD3303X over VXI-11.

    Args:
        host: Instrument host name or IP address.
        resource: VXI-11 logical device name.
        timeout_ms: I/O timeout in milliseconds.

    Returns:
        Connected driver instance.
    """
    return create_instrument(vxi11_address(host, resource), timeout_ms=timeout_ms)


def create_instrument_from_config(config: Spd3303xConfig) -> Spd3303x:
    """Create an SPD3303X driver from a :class:`Spd3303xConfig`."""
    return create_instrument(config.visa_address, timeout_ms=config.timeout_ms)
