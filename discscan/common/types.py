"""
Tipos partilhados pelo discscan.
Centraliza os registos imutáveis usados pelos detetores e pelo pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .. import config


@dataclass(frozen=True)
class SignatureRule:
    """One fixed-offset magic pattern mapped to a system literal."""
    offset: int
    system_name: str
    pattern: bytes


@dataclass(frozen=True)
class DiscGeometry:
    """Sector stride and raw header skip for one image."""
    sector_size: int
    data_skip: int

    @classmethod
    def probe_result(cls, is_mode1: bool, sub_channel_mixed: bool) -> "DiscGeometry":
        skip = 0 if is_mode1 else config.MODE2_DATA_SKIP
        if sub_channel_mixed:
            size = config.SECTOR_RAW_SUBCHANNEL
        elif is_mode1:
            size = config.SECTOR_MODE1
        else:
            size = config.SECTOR_RAW
        return cls(sector_size=size, data_skip=skip)

    def sector_offset(self, sector: int) -> int:
        return self.data_skip + sector * self.sector_size


@dataclass(frozen=True)
class DataTrack:
    """First non-audio track of a cue sheet."""
    path: Path
    offset: int


@dataclass
class IdentificationResult:
    """Resultado da identificação de uma imagem."""
    path: Path
    system: Optional[str] = None
    serial: Optional[str] = None
    track: Optional[DataTrack] = None
    error: Optional[str] = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def identified(self) -> bool:
        return self.serial is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "system": self.system,
            "serial": self.serial,
            "track_path": str(self.track.path) if self.track else None,
            "track_offset": self.track.offset if self.track else None,
            "error": self.error,
        }
