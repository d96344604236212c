from __future__ import annotations

import logging
from pathlib import Path

from .system import SystemProvider
from .. import config
from ..psx.provider import PSXProvider
from ..psp.provider import PSPProvider
from ..wii.provider import WiiProvider

logger = logging.getLogger(__name__)


class SystemRegistry:
    """Registo central: literal do detect_system -> provider."""

    def __init__(
        self,
        psp_scan_limit: int = config.PSP_SCAN_LIMIT,
        ascii_scan_limit: int = config.ASCII_SCAN_LIMIT,
        ascii_serial_extensions: frozenset[str] = config.ASCII_SERIAL_EXTENSIONS,
    ):
        self._providers: dict[str, SystemProvider] = {}
        self._register_defaults(psp_scan_limit, ascii_scan_limit, ascii_serial_extensions)

    def _register_defaults(self, psp_scan_limit, ascii_scan_limit, ascii_serial_extensions):
        for p in (
            PSXProvider(),
            PSPProvider(psp_scan_limit),
            WiiProvider(ascii_scan_limit, ascii_serial_extensions),
        ):
            self.register(p)

    def register(self, provider: SystemProvider):
        self._providers[provider.system_id] = provider

    def get_provider(self, system_id: str) -> SystemProvider | None:
        return self._providers.get(system_id)

    def fallback_provider_for(self, path: Path | None) -> SystemProvider | None:
        """Provider to try when no magic number matched.

        The first provider claiming the file extension wins; streams without
        a path never get one.
        """
        if path is None:
            return None
        suffixes = [s.lower() for s in path.suffixes]
        # game.iso.gz is judged by .iso
        if suffixes and suffixes[-1] in config.GZIP_SUFFIXES:
            suffixes = suffixes[:-1]
        if not suffixes:
            return None
        for provider in self._providers.values():
            if suffixes[-1] in provider.get_supported_extensions():
                logger.debug("Falling back to %s for %s", provider.system_id, path.name)
                return provider
        return None

    def list_systems(self) -> list[str]:
        return sorted(self._providers.keys())
