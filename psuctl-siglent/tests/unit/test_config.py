"""Tests for SPD3303X connection configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from psuctl_siglent.config import Spd3303xConfig, load_config


class TestSpd3303xConfig:
    """Tests for Spd3303xConfig."""

    def test_host_builds_vxi11_address(self) -> None:
        config = Spd3303xConfig(host="192.168.0.232")
        assert config.visa_address == "TCPIP::192.168.0.232::inst0::INSTR"
        assert config.timeout_ms == 5000

    def test_address_overrides_host(self) -> None:
        config = Spd3303xConfig(host="10.0.0.1", address="USB0::0xF4EC::0x1430::SN::INSTR")
        assert config.visa_address == "USB0::0xF4EC::0x1430::SN::INSTR"

    @pytest.mark.parametrize(
        ("kwargs", "message"),
        [
            ({}, "Either host or address is required"),
            ({"host": "h", "resource": ""}, "resource must be non-empty"),
            ({"host": "h", "timeout_ms": 0}, "timeout_ms must be positive"),
            ({"host": "h", "timeout_ms": "5000"}, "timeout_ms must be an integer"),
            ({"host": "h", "timeout_ms": 2.5}, "timeout_ms must be an integer"),
            ({"host": 10}, "host must be a string"),
            ({"address": ["x"]}, "address must be a string"),
            ({"host": "h", "resource": 0}, "resource must be a string"),
        ],
    )
    def test_invalid(self, kwargs: dict[str, object], message: str) -> None:
        with pytest.raises(ValueError, match=message):
            Spd3303xConfig(**kwargs)  # type: ignore[arg-type]

    def test_from_dict_unknown_keys(self) -> None:
        with pytest.raises(ValueError, match="Unknown configuration keys: port"):
            Spd3303xConfig.from_dict({"host": "h", "port": 5025})


class TestLoadConfig:
    """Tests for load_config()."""

    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "psu.yaml"
        path.write_text('host: "10.0.0.5"\nresource: inst1\ntimeout_ms: 2000\n')
        config = load_config(path)
        assert config == Spd3303xConfig(host="10.0.0.5", resource="inst1", timeout_ms=2000)
        assert config.visa_address == "TCPIP::10.0.0.5::inst1::INSTR"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_config(tmp_path / "missing.yaml")

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "psu.yaml"
        path.write_text("- 10.0.0.5\n")
        with pytest.raises(ValueError, match="YAML mapping"):
            load_config(path)

    def test_quoted_timeout_is_value_error(self, tmp_path: Path) -> None:
        path = tmp_path / "psu.yaml"
        path.write_text('host: "10.0.0.5"\ntimeout_ms: "5000"\n')
        with pytest.raises(ValueError, match="timeout_ms must be an integer"):
            load_config(path)

    def test_string_path(self, tmp_path: Path) -> None:
        path = tmp_path / "psu.yaml"
        path.write_text("address: TCPIP::10.0.0.5::5025::SOCKET\n")
        assert load_config(str(path)).visa_address == "TCPIP::10.0.0.5::5025::SOCKET"
