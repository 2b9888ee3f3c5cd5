"""SCPI protocol library for psuctl instrument control.

This package provides SCPI (Standard Commands for Programmable Instruments)
communication infrastructure. It includes:

- Transport abstraction over raw byte writes and bounded reads
- PyVISA-backed transport for real instruments
- Half-duplex connection serializing write-then-read exchanges
- Number, hexadecimal and ON/OFF parsing and formatting utilities
- Custom exception types for SCPI protocol errors

Typical usage::

    from psuctl_scpi import VisaResource, ScpiConnection

    transport = VisaResource("TCPIP::192.168.0.232::inst0::INSTR")
    transport.open()
    conn = ScpiConnection(transport)
    identity = conn.get_identity()
    print(f"Connected to {identity.manufacturer} {identity.model}")
    conn.close()
"""

from psuctl_scpi.connection import LINE_TERMINATOR, ScpiConnection, parse_idn_response
from psuctl_scpi.errors import (
    DecodeError,
    EmptyResponseError,
    ScpiError,
    TransportError,
    UnknownValueError,
)
from psuctl_scpi.number import (
    clean_response,
    format_number,
    format_on_off,
    parse_hex,
    parse_int,
    parse_number,
    parse_numbers,
    parse_on_off,
)
from psuctl_scpi.transport import MAX_READ, ScpiTransport
from psuctl_scpi.visa import VisaResource, vxi11_address

__all__ = [
    # Connection
    "LINE_TERMINATOR",
    "ScpiConnection",
    "parse_idn_response",
    # Errors
    "DecodeError",
    "EmptyResponseError",
    "ScpiError",
    "TransportError",
    "UnknownValueError",
    # Number parsing/formatting
    "clean_response",
    "format_number",
    "format_on_off",
    "parse_hex",
    "parse_int",
    "parse_number",
    "parse_numbers",
    "parse_on_off",
    # Transport
    "MAX_READ",
    "ScpiTransport",
    # VISA
    "VisaResource",
    "vxi11_address",
]
