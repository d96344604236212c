"""Locate the first data track referenced by a cue sheet.

Only the part of the cue grammar needed for that is understood:

    FILE "<name>" <type>
    TRACK <n> <AUDIO|MODE1/2048|MODE2/2352|...>
    INDEX <n> <MM:SS:FF>

Every other token is read and ignored.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional

from ..common.exceptions import (
    DataTrackNotFoundError,
    MalformedInputError,
    TokenNotFoundError,
)
from ..common.streams import open_stream
from ..common.types import DataTrack
from ..config import MAX_TOKEN_LEN, SECTOR_RAW
from .tokenizer import read_token, scan_until_token

logger = logging.getLogger(__name__)

# Up to two digits per field, anything after the frames field is ignored
MSF_RE = re.compile(rb"(\d{1,2}):(\d{1,2}):(\d{1,2})")

FRAMES_PER_SECOND = 75


def _int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def parse_msf(token: bytes) -> tuple[int, int, int]:
    """Split an ``MM:SS:FF`` timestamp into its three fields."""
    m = MSF_RE.match(token)
    if not m:
        raise MalformedInputError(
            f"could not parse time stamp '{token.decode('latin-1', errors='replace')}'"
        )
    return int(m.group(1)), int(m.group(2)), int(m.group(3))


def legacy_msf_offset(minutes: int, seconds: int, frames: int) -> int:
    """Byte offset as historically computed for cue data tracks.

    The fields are multiplied together rather than summed, so most
    timestamps (including ``00:02:00``) map to 0. The product wraps like a
    signed 32-bit integer.
    """
    return _int32(_int32(_int32(minutes * 60) * _int32(seconds * 75)) * frames * 25)


def msf_to_offset(minutes: int, seconds: int, frames: int, sector_size: int = SECTOR_RAW) -> int:
    """Standard CD addressing: ``((m * 60 + s) * 75 + f) * sector_size``."""
    return ((minutes * 60 + seconds) * FRAMES_PER_SECOND + frames) * sector_size


def find_first_data_track(cue_path: Path | str, standard_msf: bool = False) -> DataTrack:
    """Return the media file and byte offset of the first non-audio track.

    Args:
        cue_path: Path of the cue sheet
        standard_msf: Use standard CD addressing instead of the legacy formula

    Raises:
        StreamIOError: if the cue sheet cannot be opened or read
        MalformedInputError: on a bad timestamp, a missing INDEX or a
            track declared before any FILE
        DataTrackNotFoundError: if only audio tracks are present
    """
    cue_path = Path(cue_path)
    cue_dir = cue_path.parent
    track_path: Optional[Path] = None

    with open_stream(cue_path) as fd:
        logger.debug("Parsing CUE file '%s'...", cue_path)

        while True:
            token = read_token(fd, MAX_TOKEN_LEN)
            if not token:
                break

            if token == b"FILE":
                name = read_token(fd, MAX_TOKEN_LEN)
                if not name:
                    raise MalformedInputError("FILE without a file name", path=str(cue_path))
                track_path = cue_dir / name.decode("utf-8", errors="surrogateescape")

            elif token == b"TRACK":
                read_token(fd, MAX_TOKEN_LEN)
                track_type = read_token(fd, MAX_TOKEN_LEN)
                if track_type == b"AUDIO":
                    continue

                try:
                    scan_until_token(fd, b"INDEX")
                except TokenNotFoundError as e:
                    raise MalformedInputError(
                        f"TRACK {track_type.decode('latin-1')} without INDEX", path=str(cue_path)
                    ) from e
                read_token(fd, MAX_TOKEN_LEN)
                stamp = read_token(fd, MAX_TOKEN_LEN)

                try:
                    m, s, f = parse_msf(stamp)
                except MalformedInputError:
                    logger.debug("Error parsing time stamp '%s'", stamp)
                    raise

                if track_path is None:
                    raise MalformedInputError("TRACK before any FILE", path=str(cue_path))

                offset = msf_to_offset(m, s, f) if standard_msf else legacy_msf_offset(m, s, f)
                logger.debug("First data track: %s @ %d", track_path, offset)
                return DataTrack(path=track_path, offset=offset)

    raise DataTrackNotFoundError(str(cue_path))
