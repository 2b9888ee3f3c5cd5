"""Tests for the SPD3303X emulator."""

from __future__ import annotations

import pytest

from psuctl_siglent.emulator import (
    Spd3303xEmulator,
    Spd3303xEmulatorConfig,
    _normalize_header,
    make_spd3303x_emulator,
)
from psuctl_siglent.types import Channel, RegulationMode


def _query(emu: Spd3303xEmulator, line: str) -> str:
    emu.write((line + "\n").encode("ascii"))
    return emu.read(4096).decode("ascii").rstrip("\n")


class TestConfig:
    """Tests for Spd3303xEmulatorConfig validation."""

    def test_defaults(self) -> None:
        config = Spd3303xEmulatorConfig(identity="Siglent,SPD3303X,SN,1.0")
        assert config.max_voltage == pytest.approx(32.0)
        assert config.max_current == pytest.approx(3.2)

    @pytest.mark.parametrize(
        ("kwargs", "message"),
        [
            ({"identity": ""}, "identity"),
            ({"identity": "x", "max_voltage": 0}, "max_voltage"),
            ({"identity": "x", "max_current": -1}, "max_current"),
            ({"identity": "x", "nul_padding": -1}, "nul_padding"),
        ],
    )
    def test_invalid(self, kwargs: dict[str, object], message: str) -> None:
        with pytest.raises(ValueError, match=message):
            Spd3303xEmulatorConfig(**kwargs)  # type: ignore[arg-type]


class TestNormalizeHeader:
    """Tests for long/short form normalization."""

    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            ("OUTPut", "OUTP"),
            ("MEAS:POWEr?", "MEAS:POWE?"),
            ("measure:voltage?", "MEAS:VOLT?"),
            ("SYSTem:STATus?", "SYST:STAT?"),
            ("IPaddr?", "IP?"),
            (":INST?", "INST?"),
            ("CH1:VOLT", "CH1:VOLT"),
        ],
    )
    def test_normalize(self, header: str, expected: str) -> None:
        assert _normalize_header(header) == expected


class TestTransport:
    """Tests for the bytes transport behaviour."""

    def test_idn(self) -> None:
        emu = make_spd3303x_emulator("SN123")
        assert _query(emu, "*IDN?") == "Siglent Technologies,SPD3303X,SN123,1.01.01.02.05,V3.0"

    def test_read_without_query_is_empty(self) -> None:
        emu = make_spd3303x_emulator()
        emu.write(b"CH1:VOLT 5\n")
        assert emu.read(4096) == b""

    def test_read_truncates(self) -> None:
        emu = make_spd3303x_emulator()
        emu.write(b"*IDN?\n")
        assert emu.read(8) == b"Siglent "

    def test_nul_padding(self) -> None:
        emu = make_spd3303x_emulator(nul_padding=4)
        emu.write(b"INST?\n")
        assert emu.read(4096) == b"CH1\n\x00\x00\x00\x00"

    def test_records_received_lines(self) -> None:
        emu = make_spd3303x_emulator()
        emu.write(b"OUTPut CH1,ON\nOUTPut CH2,ON\n")
        assert emu.received == ["OUTPut CH1,ON", "OUTPut CH2,ON"]

    def test_close(self) -> None:
        emu = make_spd3303x_emulator()
        emu.close()
        assert emu.closed


class TestCommands:
    """Tests for emulated command handling."""

    def test_setpoints(self) -> None:
        emu = make_spd3303x_emulator()
        emu.write(b"CH2:VOLT 12.500000\n")
        assert _query(emu, "CH2:VOLT?") == "12.500"

    def test_out_of_range_rejected(self) -> None:
        emu = make_spd3303x_emulator()
        emu.write(b"CH1:VOLT 40\n")
        assert _query(emu, "CH1:VOLT?") == "0.000"
        assert _query(emu, "SYST:ERR?") == '-220,"Parameter error"'
        assert _query(emu, "SYST:ERR?") == '0,"No error"'

    def test_unknown_command(self) -> None:
        emu = make_spd3303x_emulator()
        emu.write(b"*RST\n")
        assert _query(emu, "SYST:ERR?") == '-100,"Command error"'

    def test_ch3_setpoint_rejected(self) -> None:
        emu = make_spd3303x_emulator()
        emu.write(b"CH3:VOLT 5\n")
        assert _query(emu, "SYST:ERR?").startswith("-221")

    def test_ch3_output(self) -> None:
        emu = make_spd3303x_emulator()
        emu.write(b"OUTPut CH3,ON\n")
        assert emu.is_output_on(Channel.CH3)

    def test_measure_follows_output(self) -> None:
        emu = make_spd3303x_emulator()
        emu.write(b"CH1:VOLT 5\n")
        assert _query(emu, "MEAS:VOLT? CH1") == "0.000"
        emu.write(b"OUTPut CH1,ON\n")
        assert _query(emu, "MEAS:VOLT? CH1") == "5.000"

    def test_measure_default_is_selected_channel(self) -> None:
        emu = make_spd3303x_emulator()
        emu.set_measured_voltage(7.5, Channel.CH2)
        emu.write(b"INST CH2\n")
        assert _query(emu, "MEAS:VOLT?") == "7.500"

    def test_power(self) -> None:
        emu = make_spd3303x_emulator()
        emu.set_measured_voltage(5.0)
        emu.set_measured_current(0.5)
        assert _query(emu, "MEAS:POWEr? CH1") == "2.500"

    def test_timer(self) -> None:
        emu = make_spd3303x_emulator()
        emu.write(b"TIMER:SET CH1,2,5.000000,1.000000,2.000000\n")
        assert _query(emu, "TIMER:SET? CH1,2") == "5.000,1.000,2.000"
        assert _query(emu, "TIMER:SET? CH1,3") == "0.000,0.000,0.000"


class TestStatusWord:
    """Tests for the emulated SYST:STAT? word."""

    def test_initial(self) -> None:
        assert _query(make_spd3303x_emulator(), "SYST:STAT?") == "0x4"

    def test_series(self) -> None:
        emu = make_spd3303x_emulator()
        emu.write(b"OUTP:TRACK 1\n")
        assert emu.status_word() == 0b1100

    def test_parallel_sets_bit10(self) -> None:
        emu = make_spd3303x_emulator()
        emu.write(b"OUTP:TRACK 2\n")
        assert emu.status_word() == (1 << 10) | 0b1000

    def test_flags(self) -> None:
        emu = make_spd3303x_emulator()
        emu.write(b"OUTPut CH1,ON\nTIMER CH2,ON\nOUTP:WAVE CH1,ON\n")
        emu.set_regulation_mode(RegulationMode.CONSTANT_CURRENT, Channel.CH1)
        assert emu.status_word() == 0b1 | 0b100 | (1 << 4) | (1 << 7) | (1 << 8)
