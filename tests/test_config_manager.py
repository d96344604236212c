import json

import pytest

from discscan import config
from discscan.common.exceptions import ConfigurationError
from discscan.core.config_manager import ConfigManager
from discscan.manager import get_registry


def test_defaults(monkeypatch):
    monkeypatch.delenv("DISCSCAN_PSP_SCAN_LIMIT", raising=False)
    monkeypatch.delenv("DISCSCAN_ASCII_SCAN_LIMIT", raising=False)
    cm = ConfigManager()
    assert cm.get("psp_scan_limit") == config.PSP_SCAN_LIMIT
    assert cm.get("ascii_scan_limit") == config.ASCII_SCAN_LIMIT
    assert cm.get("standard_msf") is False
    assert ".iso" in cm.get("ascii_serial_extensions")


def test_file_values_merge_over_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("DISCSCAN_PSP_SCAN_LIMIT", raising=False)
    p = tmp_path / "settings.json"
    p.write_text(json.dumps({"psp_scan_limit": 500, "ascii_serial_extensions": ["GCM", ".wbfs"]}))
    cm = ConfigManager(p)
    assert cm.get("psp_scan_limit") == 500
    assert cm.get("ascii_serial_extensions") == [".gcm", ".wbfs"]
    assert cm.get("ascii_scan_limit") == config.ASCII_SCAN_LIMIT


def test_env_overrides_file(tmp_path, monkeypatch):
    p = tmp_path / "settings.json"
    p.write_text(json.dumps({"ascii_scan_limit": 10}))
    monkeypatch.setenv("DISCSCAN_ASCII_SCAN_LIMIT", "42")
    assert ConfigManager(p).get("ascii_scan_limit") == 42


def test_invalid_values(tmp_path, monkeypatch):
    monkeypatch.setenv("DISCSCAN_PSP_SCAN_LIMIT", "lots")
    with pytest.raises(ConfigurationError):
        ConfigManager()
    monkeypatch.delenv("DISCSCAN_PSP_SCAN_LIMIT")

    p = tmp_path / "neg.json"
    p.write_text(json.dumps({"ascii_scan_limit": -1}))
    with pytest.raises(ConfigurationError):
        ConfigManager(p)


def test_missing_and_broken_files(tmp_path):
    with pytest.raises(ConfigurationError):
        ConfigManager(tmp_path / "nope.json")
    p = tmp_path / "broken.json"
    p.write_text("{not json")
    with pytest.raises(ConfigurationError):
        ConfigManager(p)
    p.write_text("[1, 2]")
    with pytest.raises(ConfigurationError):
        ConfigManager(p)


def test_save_roundtrip(tmp_path, monkeypatch):
    monkeypatch.delenv("DISCSCAN_PSP_SCAN_LIMIT", raising=False)
    p = tmp_path / "settings.json"
    p.write_text("{}")
    cm = ConfigManager(p)
    cm.set("standard_msf", True)
    cm.save()
    assert ConfigManager(p).get("standard_msf") is True


def test_registry_uses_settings(tmp_path, monkeypatch):
    monkeypatch.delenv("DISCSCAN_PSP_SCAN_LIMIT", raising=False)
    p = tmp_path / "settings.json"
    p.write_text(json.dumps({"psp_scan_limit": 7, "ascii_serial_extensions": [".gcm"]}))
    registry = get_registry(ConfigManager(p))
    assert registry.get_provider("psp").scan_limit == 7
    assert registry.get_provider("wii").get_supported_extensions() == {".gcm"}
    assert registry.list_systems() == ["ps1", "psp", "wii"]
