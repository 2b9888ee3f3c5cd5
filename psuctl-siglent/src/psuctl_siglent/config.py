"""Connection configuration for SPD3303X instruments.

Example YAML configuration::

    host: "192.168.0.232"
    resource: "inst0"
    timeout_ms: 5000

or, for a non-LAN connection, a full VISA address::

    address: "USB0::0xF4EC::0x1430::SPD3XGB4150080::INSTR"
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from psuctl_scpi.visa import vxi11_address


@dataclass(frozen=True)
class Spd3303xConfig:
    """Configuration for connecting to an SPD3303X.

    Attributes:
        host: Instrument host name or IP address (VXI-11 over LAN).
        resource: VXI-11 logical device name.
        address: Full VISA resource string; overrides host and resource.
        timeout_ms: I/O timeout in milliseconds.
    """

    host: str | None = None
    resource: str = "inst0"
    address: str | None = None
    timeout_ms: int = 5000

    def __post_init__(self) -> None:
        """Validate configuration."""
        for name in ("host", "address"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"{name} must be a string, got {value!r}")
        if not isinstance(self.resource, str):
            raise ValueError(f"resource must be a string, got {self.resource!r}")
        if not isinstance(self.timeout_ms, int) or isinstance(self.timeout_ms, bool):
            raise ValueError(f"timeout_ms must be an integer, got {self.timeout_ms!r}")
        if not self.host and not self.address:
            raise ValueError("Either host or address is required")
        if not self.resource:
            raise ValueError("resource must be non-empty")
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")

    @property
    def visa_address(self) -> str:
        """VISA resource string used to open the instrument."""
        if self.address:
            return self.address
        return vxi11_address(str(self.host), self.resource)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Spd3303xConfig:
        """Create config from a mapping.

        Args:
            data: Mapping with any of ``host``, ``resource``, ``address`` and
                ``timeout_ms``.

        Returns:
            Spd3303xConfig instance.

        Raises:
            ValueError: If the mapping has unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)


def load_config(path: str | Path) -> Spd3303xConfig:
    """Load instrument configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Parsed configuration.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValueError: If the config is invalid or missing required fields.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError("Config must be a YAML mapping")

    return Spd3303xConfig.from_dict(data)
