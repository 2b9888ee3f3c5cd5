"""Root conftest.py for the psuctl monorepo.

This provides shared pytest configuration across all packages. Tests marked
``integration`` need a real instrument and are skipped unless
``PSUCTL_VISA_ADDRESS`` is set.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from _pytest.config import Config
    from _pytest.nodes import Item


# Add all package src directories to path for imports
PROJECT_ROOT = Path(__file__).parent
for pkg_dir in PROJECT_ROOT.glob("psuctl-*/src"):
    if str(pkg_dir) not in sys.path:
        sys.path.insert(0, str(pkg_dir))

VISA_ADDRESS_ENV = "PSUCTL_VISA_ADDRESS"


def pytest_configure(config: Config) -> None:
    """Register custom markers.

    Args:
        config: pytest configuration object.
    """
    config.addinivalue_line(
        "markers",
        "integration: Integration test requiring real hardware",
    )
    config.addinivalue_line(
        "markers",
        "slow: Slow-running test",
    )


def pytest_collection_modifyitems(config: Config, items: list[Item]) -> None:
    """Skip hardware tests when no instrument address is configured.

    Args:
        config: pytest configuration object.
        items: List of collected test items.
    """
    if os.environ.get(VISA_ADDRESS_ENV):
        return
    skip_hw = pytest.mark.skip(reason=f"{VISA_ADDRESS_ENV} not set")
    for item in items:
        if item.get_closest_marker("integration"):
            item.add_marker(skip_hw)
