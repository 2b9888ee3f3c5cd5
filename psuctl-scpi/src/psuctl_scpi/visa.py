"""PyVISA transport for SCPI instruments.

Byte-level :class:`ScpiTransport` over a VISA session. PyVISA is imported
when a resource is opened, not at module import, so the emulator and the
protocol layer work on machines without a VISA stack.

Resource strings understood by PyVISA include:
- VXI-11: ``TCPIP::192.168.0.232::inst0::INSTR`` (SPD3303X LAN interface)
- Raw socket: ``TCPIP::192.168.0.232::5025::SOCKET``
- USB: ``USB0::0xF4EC::0x1430::SPD3XGB4150080::INSTR``
"""

from __future__ import annotations

import logging
from typing import Any

from psuctl_scpi.errors import TransportError

logger = logging.getLogger(__name__)


def vxi11_address(host: str, resource: str = "inst0") -> str:
    """Build a VISA resource string for a VXI-11 LAN instrument.

    Args:
        host: Instrument host name or IP address.
        resource: VXI-11 logical device name.

    Returns:
        Resource string such as ``"TCPIP::192.168.0.232::inst0::INSTR"``.
    """
    return f"TCPIP::{host}::{resource}::INSTR"


def _import_pyvisa() -> Any:
    try:
        import pyvisa  # type: ignore[import-not-found]  # pylint: disable=import-outside-toplevel
    except ImportError as exc:
        raise TransportError(
            "pyvisa library is not installed. Install with: pip install pyvisa pyvisa-py"
        ) from exc
    return pyvisa


def _release(handle: Any, what: str) -> None:
    """Close a PyVISA handle, logging rather than raising on failure."""
    try:
        handle.close()
    except Exception as exc:  # pylint: disable=broad-except
        logger.debug("ignoring error closing %s: %s", what, exc)


class VisaResource:
    """SCPI transport backed by a PyVISA resource.

    Bytes pass through unchanged in both directions: writes go out with
    ``write_raw`` and reads use ``read_bytes`` bounded by the caller's
    ``max_bytes``, stopping at the termination character. Every PyVISA
    failure surfaces as :class:`TransportError` with the original exception
    chained.

    Can be used as a context manager, which opens on entry and closes on
    exit.

    Args:
        resource_string: VISA resource address.
        timeout_ms: I/O timeout in milliseconds, applied when opened.
        read_termination: Termination character(s) ending a read.
        write_termination: Termination character(s) PyVISA uses for text
            writes. Raw writes already carry their terminator.
    """

    def __init__(
        self,
        resource_string: str,
        *,
        timeout_ms: int = 5000,
        read_termination: str = "\n",
        write_termination: str = "\n",
    ) -> None:
        self._resource_string = resource_string
        self._timeout_ms = timeout_ms
        self._termination = {
            "read_termination": read_termination,
            "write_termination": write_termination,
        }
        self._rm: Any = None
        self._resource: Any = None

    def __enter__(self) -> VisaResource:
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def resource_string(self) -> str:
        """The VISA resource string."""
        return self._resource_string

    @property
    def is_open(self) -> bool:
        """True between a successful :meth:`open` and :meth:`close`."""
        return self._resource is not None

    def open(self) -> None:
        """Open the VISA session. Does nothing if already open.

        Raises:
            TransportError: If ``pyvisa`` is missing or the resource cannot
                be opened. A half-created resource manager is released.
        """
        if self.is_open:
            return
        pyvisa = _import_pyvisa()
        rm = None
        try:
            rm = pyvisa.ResourceManager()
            resource = rm.open_resource(self._resource_string, **self._termination)
            resource.timeout = self._timeout_ms
        except Exception as exc:
            if rm is not None:
                _release(rm, "resource manager")
            raise TransportError(
                f"Failed to open VISA resource {self._resource_string!r}: {exc}"
            ) from exc
        self._rm, self._resource = rm, resource
        logger.debug(
            "opened VISA resource %s (timeout %d ms)", self._resource_string, self._timeout_ms
        )

    def close(self) -> None:
        """Release the resource and its manager. Safe to call repeatedly."""
        resource, rm = self._resource, self._rm
        self._resource = self._rm = None
        if resource is not None:
            _release(resource, self._resource_string)
        if rm is not None:
            _release(rm, "resource manager")

    def write(self, data: bytes) -> None:
        """Send raw bytes to the instrument.

        Raises:
            TransportError: If the resource is not open or the write fails.
        """
        resource = self._require_open()
        try:
            resource.write_raw(data)
        except Exception as exc:
            raise TransportError(f"Failed to send {data!r}: {exc}") from exc

    def read(self, max_bytes: int) -> bytes:
        """Read at most *max_bytes*, stopping early at the termination character.

        Raises:
            TransportError: If the resource is not open or the read fails
                (including VISA timeouts).
        """
        resource = self._require_open()
        try:
            result: bytes = resource.read_bytes(max_bytes, break_on_termchar=True)
        except Exception as exc:
            raise TransportError(f"Failed to read response: {exc}") from exc
        return result

    def _require_open(self) -> Any:
        if self._resource is None:
            raise TransportError("VISA resource is not open")
        return self._resource
