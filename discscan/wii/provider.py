from __future__ import annotations

from typing import BinaryIO, Iterable

from . import metadata
from ..common.system import SystemProvider
from ..config import ASCII_SERIAL_EXTENSIONS, SYSTEM_DISPLAY_NAMES


class WiiProvider(SystemProvider):
    """GameCube/Wii family: no magic number, only an ASCII serial near the start."""

    def __init__(
        self,
        scan_limit: int = metadata.ASCII_SCAN_LIMIT,
        extensions: Iterable[str] = ASCII_SERIAL_EXTENSIONS,
    ):
        self.scan_limit = scan_limit
        self.extensions = frozenset(e.lower() for e in extensions)

    @property
    def system_id(self) -> str:
        return "wii"

    @property
    def display_name(self) -> str:
        return SYSTEM_DISPLAY_NAMES[self.system_id]

    def get_supported_extensions(self) -> set[str]:
        return set(self.extensions)

    def identify(self, stream: BinaryIO) -> str:
        return metadata.detect_serial_ascii_game(stream, self.scan_limit)
