"""Siglent SPD3303X power supply driver and emulator for psuctl.

This package provides a typed driver for Siglent SPD3303X / SPD3303X-E
triple output bench supplies, plus an in-process emulator for testing
without hardware.

Modules:
    psu: High-level driver and connection factories.
    commands: Pure command-line encoder.
    responses: Response decoders.
    status: ``SYST:STAT?`` status word decoding.
    capability: Per-channel capability and range checks.
    config: YAML connection configuration.
    emulator: In-process SCPI emulator.
    server: TCP server for exposing the emulator to external tools.

Example:
    Connect to a real instrument::

        from psuctl_siglent import Channel, OutputState, connect

        psu = connect("192.168.0.232")
        psu.set_voltage(Channel.CH1, 12.0)
        psu.set_output(Channel.CH1, OutputState.ON)

    Drive the emulator instead::

        from psuctl_scpi import ScpiConnection
        from psuctl_siglent import Spd3303x, make_spd3303x_emulator

        psu = Spd3303x(ScpiConnection(make_spd3303x_emulator()))
        psu.soft_reset()
"""

from psuctl_siglent.capability import (
    CHANNEL_CAPABILITIES,
    Capability,
    is_programmable,
    require,
    require_slot,
    require_timer_group,
    supports,
)
from psuctl_siglent.config import Spd3303xConfig, load_config
from psuctl_siglent.emulator import (
    Spd3303xEmulator,
    Spd3303xEmulatorConfig,
    make_spd3303x_emulator,
)
from psuctl_siglent.errors import ChannelCapabilityError, RangeViolationError
from psuctl_siglent.psu import (
    Spd3303x,
    Step,
    connect,
    create_instrument,
    create_instrument_from_config,
    run_steps,
)
from psuctl_siglent.server import EmulatorServer
from psuctl_siglent.status import StatusBit, SystemStatus, decode_status_word
from psuctl_siglent.types import (
    Channel,
    ChannelStatus,
    DhcpState,
    NetworkConfig,
    OutputState,
    RegulationMode,
    TimerEntry,
    TimerState,
    TrackMode,
)

__all__ = [
    # Capability
    "CHANNEL_CAPABILITIES",
    "Capability",
    "is_programmable",
    "require",
    "require_slot",
    "require_timer_group",
    "supports",
    # Config
    "Spd3303xConfig",
    "load_config",
    # Emulator
    "Spd3303xEmulator",
    "Spd3303xEmulatorConfig",
    "make_spd3303x_emulator",
    # Errors
    "ChannelCapabilityError",
    "RangeViolationError",
    # Driver
    "Spd3303x",
    "Step",
    "connect",
    "create_instrument",
    "create_instrument_from_config",
    "run_steps",
    # Server
    "EmulatorServer",
    # Status
    "StatusBit",
    "SystemStatus",
    "decode_status_word",
    # Types
    "Channel",
    "ChannelStatus",
    "DhcpState",
    "NetworkConfig",
    "OutputState",
    "RegulationMode",
    "TimerEntry",
    "TimerState",
    "TrackMode",
]
