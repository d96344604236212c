from __future__ import annotations
from typing import BinaryIO
from . import metadata
from ..common.system import SystemProvider
from ..config import SYSTEM_DISPLAY_NAMES

class PSPProvider(SystemProvider):
    def __init__(self, scan_limit: int = metadata.PSP_SCAN_LIMIT):
        self.scan_limit = scan_limit
    @property
    def system_id(self) -> str: return "psp"
    @property
    def display_name(self) -> str: return SYSTEM_DISPLAY_NAMES[self.system_id]
    def get_supported_extensions(self) -> set[str]: return set()
    def identify(self, stream: BinaryIO) -> str:
        return metadata.detect_psp_game(stream, self.scan_limit)
