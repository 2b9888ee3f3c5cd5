"""Core library for psuctl instrument control.

This package provides the foundational exception root and shared data types
for the psuctl packages. It has no external dependencies so that it can serve
as the base layer for the SCPI and instrument driver packages.

Example:
    >>> from psuctl_core import InstrumentIdentity
    >>> identity = InstrumentIdentity("Siglent Technologies", "SPD3303X", "SN1", "1.0")
    >>> print(identity.model)
    SPD3303X
"""

from psuctl_core.errors import PsuctlError
from psuctl_core.types import InstrumentIdentity

__all__ = [
    # Errors
    "PsuctlError",
    # Types
    "InstrumentIdentity",
]
