"""Tests for SPD3303X data types."""

from __future__ import annotations

import dataclasses

import pytest

from psuctl_scpi.errors import DecodeError, UnknownValueError

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


class TestChannel:
    """Tests for Channel."""

    def test_scpi_tokens(self) -> None:
        assert [ch.scpi for ch in Channel] == ["CH1", "CH2", "CH3"]

    @pytest.mark.parametrize("text", ["CH2", "ch2", " Ch2 \n"])
    def test_parse_case_and_whitespace(self, text: str) -> None:
        assert Channel.parse(text) is Channel.CH2

    @pytest.mark.parametrize("text", ["CH4", "", "1"])
    def test_parse_unknown(self, text: str) -> None:
        with pytest.raises(UnknownValueError, match="Unrecognized channel"):
            Channel.parse(text)

    def test_unknown_value_is_decode_error(self) -> None:
        with pytest.raises(DecodeError):
            Channel.parse("CH9")


class TestTrackMode:
    """Tests for TrackMode encoding."""

    @pytest.mark.parametrize(
        ("value", "mode"),
        [(0, TrackMode.INDEPENDENT), (1, TrackMode.SERIES), (2, TrackMode.PARALLEL)],
    )
    def test_from_value(self, value: int, mode: TrackMode) -> None:
        assert TrackMode.from_value(value) is mode
        assert mode.value == value

    @pytest.mark.parametrize("value", [3, -1, 10])
    def test_from_value_unknown(self, value: int) -> None:
        with pytest.raises(UnknownValueError, match="Unknown track mode value") as exc_info:
            TrackMode.from_value(value)
        assert exc_info.value.response == str(value)


class TestOnOffTags:
    """Tests for the ON/OFF tag enumerations."""

    @pytest.mark.parametrize("cls", [OutputState, TimerState, DhcpState])
    def test_from_bool(self, cls: type[OutputState]) -> None:
        assert cls.from_bool(True) is cls.ON
        assert cls.from_bool(False) is cls.OFF

    def test_scpi_and_is_on(self) -> None:
        assert OutputState.ON.scpi == "ON"
        assert OutputState.OFF.scpi == "OFF"
        assert TimerState.ON.is_on
        assert not DhcpState.OFF.is_on

    def test_tags_are_distinct_types(self) -> None:
        assert OutputState.ON is not TimerState.ON


class TestRecords:
    """Tests for the immutable result records."""

    def test_channel_status_frozen(self) -> None:
        status = ChannelStatus(5.0, 1.0, 4.99, 0.5, 2.495)
        with pytest.raises(dataclasses.FrozenInstanceError):
            status.set_voltage = 1.0  # type: ignore[misc]

    def test_timer_entry_fields(self) -> None:
        entry = TimerEntry(group=2, voltage=5.0, current=1.0, duration=2.0)
        assert dataclasses.astuple(entry) == (2, 5.0, 1.0, 2.0)

    def test_network_config_equality(self) -> None:
        a = NetworkConfig("10.0.0.5", "255.255.255.0", "10.0.0.1", False)
        b = NetworkConfig(ip="10.0.0.5", mask="255.255.255.0", gateway="10.0.0.1", dhcp=False)
        assert a == b
