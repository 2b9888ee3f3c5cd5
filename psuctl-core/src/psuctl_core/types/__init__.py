"""Core data types for psuctl.

Submodules:
    common: Base types (InstrumentIdentity)
"""

from psuctl_core.types.common import InstrumentIdentity

__all__ = [
    "InstrumentIdentity",
]
