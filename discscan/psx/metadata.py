from __future__ import annotations

import logging
from functools import partial
from typing import BinaryIO, Callable, TypeVar

from .. import config
from ..common.exceptions import (
    BootRecordNotFoundError,
    DetectionNotFound,
    MalformedInputError,
)
from ..common.streams import read_at, stream_size
from ..common.types import DiscGeometry

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Characters after which the executable name starts in a BOOT line,
# e.g. BOOT = cdrom:\SLUS_005.94;1
_PATH_SEPARATORS = b"\\:"


def first_success(*attempts: Callable[[], T]) -> T:
    """Run ``attempts`` in order and return the first result.

    Only "not found" and malformed-input outcomes move on to the next
    attempt; the last of those is re-raised when every attempt fails.
    I/O errors propagate immediately.
    """
    last_error: Exception | None = None
    for attempt in attempts:
        try:
            return attempt()
        except (DetectionNotFound, MalformedInputError) as e:
            logger.debug("Attempt failed: %s", e)
            last_error = e
    if last_error is None:
        raise ValueError("first_success() needs at least one attempt")
    raise last_error


def _le24(buf: bytes, pos: int) -> int:
    """Little-endian 24-bit extent location of the directory record at ``pos``."""
    if pos + 5 > len(buf):
        raise MalformedInputError("truncated directory record", offset=pos)
    return buf[pos + 2] | (buf[pos + 3] << 8) | (buf[pos + 4] << 16)


def probe_geometry(stream: BinaryIO, sub_channel_mixed: bool) -> DiscGeometry:
    """Work out sector size and raw header skip for ``stream``.

    Only images whose length is a multiple of 2048 can be cooked Mode 1;
    those are told apart from raw dumps by the sync pattern at offset 0.
    """
    is_mode1 = False
    size = stream_size(stream)
    if not sub_channel_mixed and not (size & 0x7FF):
        mode_test = read_at(stream, 0, 4)
        if mode_test != config.MODE_TEST_BYTES:
            is_mode1 = True
    return DiscGeometry.probe_result(is_mode1, sub_channel_mixed)


def find_directory_record(window: bytes, name: bytes) -> int:
    """Return the position of the record called ``name`` in ``window``.

    Raises:
        MalformedInputError: on a zero-length or truncated record
        BootRecordNotFoundError: if the walk runs off the window
    """
    name_end = config.DIRECTORY_NAME_OFFSET + len(name)
    wanted = name.upper()
    pos = 0
    while pos < len(window):
        length = window[pos]
        if not length:
            raise MalformedInputError("zero-length directory record", offset=pos)
        if pos + name_end > len(window):
            raise MalformedInputError("directory record crosses window end", offset=pos)
        if window[pos + config.DIRECTORY_NAME_OFFSET:pos + name_end].upper() == wanted:
            return pos
        pos += length
    raise BootRecordNotFoundError(f"{name.decode('ascii')} not in root directory")


def boot_executable(system_cnf: bytes) -> bytes:
    """Return the bare executable name from the ``BOOT`` line of SYSTEM.CNF."""
    start = system_cnf.lower().find(b"boot")
    if start < 0:
        raise BootRecordNotFoundError("no BOOT line in SYSTEM.CNF")

    boot_file = start
    pos = start
    while pos < len(system_cnf) and system_cnf[pos] != ord("\n"):
        if system_cnf[pos] in _PATH_SEPARATORS:
            boot_file = pos + 1
        pos += 1
    return system_cnf[boot_file:]


def game_id_from_executable(name: bytes) -> str:
    """Format an executable name as ``XXXX-NNNNN``.

    ``SLES_123.45;1`` becomes ``SLES-12345``: the prefix is upper-cased, one
    separator after it is dropped and dots inside the number vanish.
    """
    if len(name) < 4:
        raise MalformedInputError(f"boot executable name too short: {name!r}")

    out = bytearray(name[:4].upper())
    out += b"-"

    pos = 4
    if pos < len(name) and not name[pos:pos + 1].isalnum():
        pos += 1

    while pos < len(name) and name[pos:pos + 1].isalnum():
        out.append(name[pos])
        pos += 1
        if name[pos:pos + 1] == b".":
            pos += 1

    return out.decode("latin-1")


def detect_ps1_game_sub(stream: BinaryIO, sub_channel_mixed: bool) -> str:
    """One resolution attempt under a single sector-layout assumption."""
    geometry = probe_geometry(stream, sub_channel_mixed)
    logger.debug(
        "PS1 geometry: sector_size=%d skip=%d (sub_channel_mixed=%s)",
        geometry.sector_size,
        geometry.data_skip,
        sub_channel_mixed,
    )

    record_offset = (
        config.PVD_ROOT_RECORD_OFFSET
        + geometry.data_skip
        + config.PVD_SECTOR * geometry.sector_size
    )
    root_record = read_at(stream, record_offset, config.ROOT_RECORD_READ_LEN)
    if len(root_record) < config.ROOT_RECORD_READ_LEN:
        raise MalformedInputError("truncated root directory record", offset=record_offset)

    root_sector = _le24(root_record, 0)
    window = read_at(stream, geometry.sector_offset(root_sector), config.DIRECTORY_WINDOW_LEN)

    pos = find_directory_record(window, config.SYSTEM_CNF_NAME)
    cnf_sector = _le24(window, pos)

    system_cnf = read_at(stream, geometry.sector_offset(cnf_sector), config.SYSTEM_CNF_READ_LEN)
    system_cnf = system_cnf.split(b"\x00", 1)[0]

    game_id = game_id_from_executable(boot_executable(system_cnf))
    logger.debug("PS1 game id: %s", game_id)
    return game_id


def detect_ps1_game(stream: BinaryIO) -> str:
    """Resolve the PS1 game id, first without and then with subchannel data.

    Raises:
        BootRecordNotFoundError, MalformedInputError: if both attempts fail
        StreamIOError: on an underlying read failure
    """
    return first_success(
        partial(detect_ps1_game_sub, stream, False),
        partial(detect_ps1_game_sub, stream, True),
    )
