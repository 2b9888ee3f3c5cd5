"""Tests for per-channel capability and range checks."""

from __future__ import annotations

import pytest

from psuctl_core.errors import PsuctlError

from psuctl_siglent.capability import (
    CHANNEL_CAPABILITIES,
    Capability,
    is_programmable,
    require,
    require_slot,
    require_timer_group,
    supports,
)
from psuctl_siglent.errors import ChannelCapabilityError, RangeViolationError
from psuctl_siglent.types import Channel


class TestCapabilityTable:
    """Tests for the channel capability table."""

    @pytest.mark.parametrize("channel", [Channel.CH1, Channel.CH2])
    @pytest.mark.parametrize("capability", list(Capability))
    def test_programmable_channels_support_everything(
        self, channel: Channel, capability: Capability
    ) -> None:
        assert supports(channel, capability)

    def test_ch3_output_control_only(self) -> None:
        assert CHANNEL_CAPABILITIES[Channel.CH3] == frozenset({Capability.OUTPUT_CONTROL})

    def test_is_programmable(self) -> None:
        assert is_programmable(Channel.CH1)
        assert is_programmable(Channel.CH2)
        assert not is_programmable(Channel.CH3)


class TestRequire:
    """Tests for require()."""

    def test_allowed_returns_none(self) -> None:
        assert require(Channel.CH3, Capability.OUTPUT_CONTROL) is None

    @pytest.mark.parametrize(
        "capability",
        [Capability.SETPOINT, Capability.MEASURE, Capability.TIMER, Capability.WAVE_DISPLAY],
    )
    def test_ch3_rejected(self, capability: Capability) -> None:
        with pytest.raises(ChannelCapabilityError) as exc_info:
            require(Channel.CH3, capability)
        err = exc_info.value
        assert err.channel is Channel.CH3
        assert err.operation == capability.value
        assert str(err) == f"Channel CH3 does not support this operation: {capability.value}"

    def test_ch3_output_query_message(self) -> None:
        with pytest.raises(ChannelCapabilityError, match="querying output state"):
            require(Channel.CH3, Capability.OUTPUT_QUERY)

    def test_is_psuctl_error(self) -> None:
        with pytest.raises(PsuctlError):
            require(Channel.CH3, Capability.SETPOINT)


class TestRanges:
    """Tests for slot and timer group validation."""

    @pytest.mark.parametrize("value", [1, 2, 3, 4, 5])
    def test_valid(self, value: int) -> None:
        require_slot(value)
        require_timer_group(value)

    @pytest.mark.parametrize("value", [0, 6, -1])
    def test_slot_rejected(self, value: int) -> None:
        with pytest.raises(RangeViolationError) as exc_info:
            require_slot(value)
        assert exc_info.value.name == "slot"
        assert exc_info.value.value == value
        assert str(exc_info.value) == f"slot must be 1..=5, got {value}"

    @pytest.mark.parametrize("value", [0, 6])
    def test_timer_group_rejected(self, value: int) -> None:
        with pytest.raises(RangeViolationError, match="timer group must be 1..=5"):
            require_timer_group(value)

    @pytest.mark.parametrize("value", [2.5, 3.0, "3", True])
    def test_non_integer_rejected(self, value: object) -> None:
        with pytest.raises(RangeViolationError):
            require_slot(value)  # type: ignore[arg-type]
        with pytest.raises(RangeViolationError):
            require_timer_group(value)  # type: ignore[arg-type]

    def test_range_violation_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            require_slot(0)
