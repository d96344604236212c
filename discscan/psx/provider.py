from __future__ import annotations

from typing import BinaryIO

from . import metadata
from ..common.system import SystemProvider
from ..config import SYSTEM_DISPLAY_NAMES


class PSXProvider(SystemProvider):
    @property
    def system_id(self) -> str:
        return "ps1"

    @property
    def display_name(self) -> str:
        return SYSTEM_DISPLAY_NAMES[self.system_id]

    def get_supported_extensions(self) -> set[str]:
        # Only reached through the magic number table
        return set()

    def identify(self, stream: BinaryIO) -> str:
        """Lê o SYSTEM.CNF via ISO9660 e devolve o serial (ex: SLUS-00594)."""
        return metadata.detect_ps1_game(stream)
