from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from discscan import config
from discscan.common.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_ENV_OVERRIDES = {
    "psp_scan_limit": "DISCSCAN_PSP_SCAN_LIMIT",
    "ascii_scan_limit": "DISCSCAN_ASCII_SCAN_LIMIT",
}


class ConfigManager:
    """Gere as definições do utilizador em formato JSON, fundidas com os defaults."""

    def __init__(self, config_file: Optional[Path | str] = None):
        self.config_path = Path(config_file) if config_file else None
        self.values: dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        """Carrega as definições do disco e do ambiente sobre os defaults."""
        self.values = {
            "psp_scan_limit": config.PSP_SCAN_LIMIT,
            "ascii_scan_limit": config.ASCII_SCAN_LIMIT,
            "standard_msf": False,
            "ascii_serial_extensions": sorted(config.ASCII_SERIAL_EXTENSIONS),
            "log_format": "auto",
        }

        if self.config_path is not None:
            if not self.config_path.exists():
                raise ConfigurationError(
                    f"Config file not found: {self.config_path}", {"path": str(self.config_path)}
                )
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    stored = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise ConfigurationError(
                    f"Could not read config file: {e}", {"path": str(self.config_path)}
                ) from e
            if not isinstance(stored, dict):
                raise ConfigurationError("Config file must hold a JSON object")
            self.values.update(stored)

        for key, env in _ENV_OVERRIDES.items():
            raw = os.getenv(env)
            if raw:
                self.values[key] = raw

        self._validate()

    def _validate(self) -> None:
        for key in ("psp_scan_limit", "ascii_scan_limit"):
            try:
                value = int(self.values[key])
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"{key} must be an integer", {key: self.values[key]}) from e
            if value < 0:
                raise ConfigurationError(f"{key} must not be negative", {key: value})
            self.values[key] = value

        exts = self.values["ascii_serial_extensions"]
        if isinstance(exts, str) or not all(isinstance(e, str) for e in exts):
            raise ConfigurationError("ascii_serial_extensions must be a list of strings")
        self.values["ascii_serial_extensions"] = [
            e.lower() if e.startswith(".") else f".{e.lower()}" for e in exts
        ]
        self.values["standard_msf"] = bool(self.values["standard_msf"])

    def save(self, path: Optional[Path | str] = None) -> None:
        """Grava as definições atuais no disco."""
        target = Path(path) if path else self.config_path
        if target is None:
            raise ConfigurationError("No config path to save to")
        with open(target, "w", encoding="utf-8") as f:
            json.dump(self.values, f, indent=4, ensure_ascii=False)
        logger.debug("Saved settings to %s", target)

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.values[key] = value
        self._validate()
