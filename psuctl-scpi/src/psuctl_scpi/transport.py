"""SCPI transport protocol definition.

This module defines the :class:`ScpiTransport` protocol, the only surface the
SCPI layer consumes from an instrument session: send raw bytes, and read up to
N bytes blocking until data arrives or an error occurs. Framing, connection
setup and I/O timeouts all belong to the transport.

Implementations include:
- :class:`psuctl_scpi.VisaResource`: PyVISA-backed transport for real hardware
- :class:`psuctl_siglent.Spd3303xEmulator`: in-process SPD3303X emulator
"""

from __future__ import annotations

from typing import Protocol

MAX_READ = 4096
"""Upper bound on the size of a single response read."""


class ScpiTransport(Protocol):
    """Byte-level transport consumed by :class:`ScpiConnection`.

    Matched structurally: nothing needs to subclass it. Writes carry whole
    terminated lines and reads are bounded by the caller.

    Example:
        >>> class MyTransport:
        ...     def write(self, data: bytes) -> None:
        ...         pass
        ...     def read(self, max_bytes: int) -> bytes:
        ...         return b"response\\n"
        ...     def close(self) -> None:
        ...         pass
        ...
        >>> transport: ScpiTransport = MyTransport()  # Type checks OK
    """

    def write(self, data: bytes) -> None:
        """Send raw bytes to the instrument.

        Args:
            data: A complete, terminated command line.
        """
        ...

    def read(self, max_bytes: int) -> bytes:
        """Read a response from the instrument.

        Blocks until data is available or the transport fails.

        Args:
            max_bytes: Maximum number of bytes to return.

        Returns:
            The raw response bytes, possibly padded or terminated.
        """
        ...

    def close(self) -> None:
        """Close the transport and release resources."""
        ...
