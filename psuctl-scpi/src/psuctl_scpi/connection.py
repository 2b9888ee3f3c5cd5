"""Half-duplex SCPI connection over a raw byte transport.

This module provides the :class:`ScpiConnection` class, which owns a transport
and performs SCPI exchanges on it: a command is one terminated line written to
the transport, a query is a line written followed by one bounded read whose
result is trimmed, checked for emptiness and decoded.

The protocol is strictly request/response with one exchange in flight, so
every exchange runs under a lock. Concurrent callers sharing a connection
block until the previous exchange has completed; responses can never be
attributed to the wrong request.

Typical usage::

    from psuctl_scpi import VisaResource, ScpiConnection

    transport = VisaResource("TCPIP::192.168.0.232::inst0::INSTR")
    transport.open()
    conn = ScpiConnection(transport)

    identity = conn.get_identity()
    conn.command("CH1:VOLT 5.000000")
    voltage = conn.query_number("MEAS:VOLT? CH1")

    conn.close()
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from psuctl_core.types.common import InstrumentIdentity

from psuctl_scpi.errors import DecodeError, EmptyResponseError, ScpiError
from psuctl_scpi.number import (
    clean_response,
    parse_hex,
    parse_int,
    parse_number,
    parse_numbers,
    parse_on_off,
)
from psuctl_scpi.transport import MAX_READ

if TYPE_CHECKING:
    from psuctl_scpi.transport import ScpiTransport

logger = logging.getLogger(__name__)

LINE_TERMINATOR = "\n"


def parse_idn_response(response: str) -> InstrumentIdentity:
    """Parse a SCPI ``*IDN?`` response into an :class:`InstrumentIdentity`.

    The standard ``*IDN?`` response format is four comma-separated fields::

        manufacturer,model,serial_number,firmware_version

    If the response contains more than four comma-separated fields, the
    extra fields are joined into the firmware string.

    Args:
        response: The raw ``*IDN?`` response string.

    Returns:
        Parsed identity with manufacturer, model, serial, and firmware.

    Raises:
        DecodeError: If the response has fewer than four fields.
    """
    parts = [p.strip() for p in clean_response(response).split(",")]
    if len(parts) < 4:
        raise DecodeError(
            f"Expected at least 4 comma-separated fields in *IDN? response, got {len(parts)}",
            response,
        )
    return InstrumentIdentity(
        manufacturer=parts[0],
        model=parts[1],
        serial=parts[2],
        firmware=",".join(parts[3:]),
    )


class ScpiConnection:
    """SCPI connection owning one transport.

    Provides command/query methods, typed query variants, and ``*IDN?``
    helpers. No error queue polling and no retries are performed: a command
    is accepted once its bytes are written, and any transport failure is
    surfaced unchanged to the caller.

    Args:
        transport: An open :class:`ScpiTransport` instance. The connection
            takes exclusive ownership and closes it in :meth:`close`.
        max_read: Upper bound on the bytes requested for one response.
        encoding: Text encoding used on the wire.

    Example:
        >>> conn = ScpiConnection(transport)
        >>> conn.command("OUTPut CH1,ON")
        >>> voltage = conn.query_number("MEAS:VOLT? CH1")
    """

    def __init__(
        self,
        transport: ScpiTransport,
        *,
        max_read: int = MAX_READ,
        encoding: str = "ascii",
    ) -> None:
        self._transport = transport
        self._max_read = max_read
        self._encoding = encoding
        self._lock = threading.Lock()
        self._closed = False

    @property
    def is_closed(self) -> bool:
        """Return True once :meth:`close` has been called."""
        return self._closed

    # -- Core operations -----------------------------------------------------

    def command(self, cmd: str) -> None:
        """Send a SCPI command (no response expected).

        Args:
            cmd: The SCPI command string without terminator
                (e.g. ``"CH1:VOLT 5.000000"``).

        Raises:
            ScpiError: If the connection is closed.
        """
        with self._lock:
            self._ensure_open()
            logger.debug("SCPI write  -> %s", cmd)
            self._send(cmd)

    def query(self, cmd: str) -> str:
        """Send a SCPI query and return the trimmed response.

        NUL padding and surrounding whitespace are removed before the
        response is returned.

        Args:
            cmd: The SCPI query string without terminator (e.g. ``"SYST:STAT?"``).

        Returns:
            The non-empty trimmed response.

        Raises:
            ScpiError: If the connection is closed.
            EmptyResponseError: If nothing remains after trimming.
            DecodeError: If the response bytes are not valid text.
        """
        with self._lock:
            self._ensure_open()
            logger.debug("SCPI query  -> %s", cmd)
            self._send(cmd)
            raw = self._transport.read(self._max_read)

        try:
            text = raw.decode(self._encoding)
        except UnicodeDecodeError:
            raise DecodeError("Response is not valid text", repr(raw)) from None
        response = clean_response(text)
        logger.debug("SCPI result <- %s", response)
        if not response:
            raise EmptyResponseError(cmd)
        return response

    # -- Typed query variants ------------------------------------------------

    def query_number(self, cmd: str) -> float:
        """Query and parse the response as a SCPI number.

        Raises:
            DecodeError: If the response cannot be parsed as a number.
        """
        return parse_number(self.query(cmd))

    def query_numbers(self, cmd: str) -> tuple[float, ...]:
        """Query and parse the response as a comma-separated list of numbers.

        Raises:
            DecodeError: If any element cannot be parsed as a number.
        """
        return parse_numbers(self.query(cmd))

    def query_int(self, cmd: str) -> int:
        """Query and parse the response as an integer.

        Raises:
            DecodeError: If the response is not a valid integer.
        """
        return parse_int(self.query(cmd))

    def query_hex(self, cmd: str) -> int:
        """Query and parse the response as a hexadecimal word.

        Raises:
            DecodeError: If the response is not a 32-bit hexadecimal value.
        """
        return parse_hex(self.query(cmd))

    def query_on_off(self, cmd: str) -> bool:
        """Query and leniently parse the response as ON/OFF.

        ``ON`` (any case) and ``1`` are True; anything else is False.
        """
        return parse_on_off(self.query(cmd))

    # -- IEEE 488.2 convenience methods --------------------------------------

    def identify(self) -> str:
        """Query the instrument identification string (``*IDN?``)."""
        return self.query("*IDN?")

    def get_identity(self) -> InstrumentIdentity:
        """Query and parse the instrument identification (``*IDN?``)."""
        return parse_idn_response(self.identify())

    # -- Lifecycle -----------------------------------------------------------

    def close(self) -> None:
        """Close the underlying transport.

        Terminal: every later command or query raises :class:`ScpiError`.
        Safe to call multiple times.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._transport.close()

    # -- Private helpers -----------------------------------------------------

    def _ensure_open(self) -> None:
        if self._closed:
            raise ScpiError("SCPI connection is closed")

    def _send(self, cmd: str) -> None:
        self._transport.write((cmd + LINE_TERMINATOR).encode(self._encoding))
