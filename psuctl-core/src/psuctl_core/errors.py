"""Exception types for psuctl-core.

This module defines the root of the exception hierarchy used throughout psuctl.
All psuctl exceptions inherit from PsuctlError, allowing consumers to catch
every library-specific failure with a single except clause.

Exception hierarchy:
    PsuctlError (base)
    +-- ScpiError (psuctl_scpi): SCPI protocol and transport failures
    +-- ChannelCapabilityError (psuctl_siglent): Unsupported channel operations
    +-- RangeViolationError (psuctl_siglent): Slot or timer group out of range
"""


class PsuctlError(Exception):
    """Base exception for all psuctl errors.

    This is the root of the psuctl exception hierarchy. Catch this to handle
    any library-specific error.
    """
