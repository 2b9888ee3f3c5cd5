"""SPD3303X driver error types.

Validation failures raised before any command is encoded or sent. Protocol
and transport failures come from :mod:`psuctl_scpi.errors`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from psuctl_core.errors import PsuctlError

if TYPE_CHECKING:
    from psuctl_siglent.types import Channel


class ChannelCapabilityError(PsuctlError):
    """Raised when an operation is not supported by the addressed channel.

    Attributes:
        channel: The channel the operation was addressed to.
        operation: Short name of the rejected operation.
    """

    def __init__(self, channel: Channel, operation: str, message: str | None = None) -> None:
        """Initialize the error.

        Args:
            channel: The channel the operation was addressed to.
            operation: Short name of the rejected operation.
            message: Optional explanation replacing the default message.
        """
        self.channel = channel
        self.operation = operation
        super().__init__(
            message or f"Channel {channel.value} does not support this operation: {operation}"
        )


class RangeViolationError(PsuctlError, ValueError):
    """Raised when a slot number or timer group index is outside 1-5.

    Attributes:
        name: Name of the offending parameter (e.g. ``"slot"``).
        value: The rejected value.
    """

    def __init__(self, name: str, value: object, low: int, high: int) -> None:
        """Initialize the error.

        Args:
            name: Name of the offending parameter.
            value: The rejected value.
            low: Inclusive lower bound.
            high: Inclusive upper bound.
        """
        self.name = name
        self.value = value
        super().__init__(f"{name} must be {low}..={high}, got {value}")
