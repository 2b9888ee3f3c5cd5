"""Common types shared across psuctl packages.

Classes:
    InstrumentIdentity: Instrument identification metadata.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class InstrumentIdentity:
    """Instrument identification metadata.

    Represents the four standard fields returned by the SCPI ``*IDN?`` query.

    Attributes:
        manufacturer: Instrument manufacturer name (e.g., "Siglent Technologies").
        model: Instrument model number or name (e.g., "SPD3303X").
        serial: Serial number string.
        firmware: Firmware or hardware version string.

    Example:
        >>> identity = InstrumentIdentity(
        ...     manufacturer="Siglent Technologies",
        ...     model="SPD3303X",
        ...     serial="SPD3XGB4150080",
        ...     firmware="1.01.01.02.05,V3.0"
        ... )
    """

    manufacturer: str
    model: str
    serial: str
    firmware: str

    def __str__(self) -> str:
        """Return the identity in ``*IDN?`` field order."""
        return f"{self.manufacturer},{self.model},{self.serial},{self.firmware}"
