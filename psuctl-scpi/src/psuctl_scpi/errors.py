"""SCPI protocol error types.

This module defines exception classes for SCPI protocol errors that may occur
during communication with instruments. All exceptions inherit from
:class:`psuctl_core.errors.PsuctlError`.

Exception hierarchy:
    ScpiError
    +-- TransportError: I/O failure reported by the transport
    +-- EmptyResponseError: Query answered with no meaningful bytes
    +-- DecodeError: Response present but not in the expected shape
        +-- UnknownValueError: Value outside a closed enumeration
"""

from __future__ import annotations

from psuctl_core.errors import PsuctlError


class ScpiError(PsuctlError):
    """Base exception for SCPI protocol errors.

    All SCPI-related exceptions inherit from this class, allowing callers
    to catch all SCPI errors with a single except clause.
    """


class TransportError(ScpiError):
    """Raised when the underlying transport fails to send or receive.

    The original transport exception, when there is one, is chained as
    ``__cause__``. The connection never retries after this error.
    """


class EmptyResponseError(ScpiError):
    """Raised when a query response is empty after trimming.

    The instrument (or transport) accepted the request but returned nothing
    parseable. This is distinct from :class:`TransportError`, which signals
    an I/O level failure.

    Attributes:
        command: The query that produced the empty response.
    """

    def __init__(self, command: str) -> None:
        """Initialize the error.

        Args:
            command: The query that produced the empty response.
        """
        self.command = command
        super().__init__(f"Empty response from device for command {command!r}")


class DecodeError(ScpiError, ValueError):
    """Raised when a response cannot be decoded into the expected type.

    Also a :class:`ValueError`, so callers of the plain parsing helpers can
    keep catching ``ValueError``.

    Attributes:
        response: The offending response text.
    """

    def __init__(self, message: str, response: str) -> None:
        """Initialize the error.

        Args:
            message: Description of the expected shape.
            response: The offending response text.
        """
        self.response = response
        super().__init__(f"{message}: {response!r}")


class UnknownValueError(DecodeError):
    """Raised when a value does not map onto a closed enumeration.

    Used for enumerations that have no "unknown" fallback, such as channel
    identifiers or the track mode write encoding.
    """
