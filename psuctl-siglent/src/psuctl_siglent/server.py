"""Raw-socket SCPI server in front of an in-process emulator.

Serves any ``ScpiTransport`` (normally :class:`Spd3303xEmulator`) on a TCP
port so that PyVISA ``SOCKET`` resources, telnet or netcat can talk to it
like a networked instrument.

Example:
    Serve an emulated SPD3303X on an ephemeral port::

        from psuctl_siglent import EmulatorServer, make_spd3303x_emulator

        server = EmulatorServer(make_spd3303x_emulator(), port=0)
        server.start()

        host, port = server.address
        print(f"Connect via: TCPIP::{host}::{port}::SOCKET")

        server.stop()
"""

from __future__ import annotations

import logging
import socketserver
import threading
from typing import Any

from psuctl_scpi import MAX_READ, ScpiTransport

logger = logging.getLogger(__name__)


class _ScpiLineHandler(socketserver.StreamRequestHandler):
    """Forward each received line to the transport.

    Queries (lines containing ``?``) are answered with whatever the
    transport returns from a single read.
    """

    server: _ScpiTcpServer

    def handle(self) -> None:
        logger.debug("client connected: %s", self.client_address)
        for raw_line in self.rfile:
            line = raw_line.strip()
            if not line:
                continue
            transport = self.server.transport
            with self.server.lock:
                transport.write(line + b"\n")
                response = transport.read(MAX_READ) if b"?" in line else b""
            if response:
                self.wfile.write(response)
                self.wfile.flush()
        logger.debug("client disconnected: %s", self.client_address)


class _ScpiTcpServer(socketserver.TCPServer):
    """TCPServer carrying the served transport and its lock."""

    allow_reuse_address = True

    def __init__(
        self,
        server_address: tuple[str, int],
        transport: ScpiTransport,
        **kwargs: Any,
    ) -> None:
        self.transport = transport
        self.lock = threading.Lock()
        super().__init__(server_address, _ScpiLineHandler, **kwargs)


class EmulatorServer:
    """Serve a ``ScpiTransport`` over TCP from a background thread.

    One client is handled at a time.

    Args:
        transport: The SCPI transport (typically an emulator) to serve.
        host: Bind address.
        port: Bind port; ``0`` picks an ephemeral port.
    """

    def __init__(
        self,
        transport: ScpiTransport,
        host: str = "127.0.0.1",
        port: int = 5025,
    ) -> None:
        self._server = _ScpiTcpServer((host, port), transport)
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start serving in a daemon thread."""
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()
        logger.debug("emulator server listening on %s:%d", *self.address)

    def stop(self) -> None:
        """Stop serving and close the listening socket."""
        self._server.shutdown()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        self._server.server_close()

    @property
    def address(self) -> tuple[str, int]:
        """The bound ``(host, port)``, useful after binding port 0."""
        addr = self._server.server_address
        return (str(addr[0]), int(addr[1]))
