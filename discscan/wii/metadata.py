import logging
from typing import BinaryIO

from ..common.exceptions import SerialNotFoundError
from ..common.streams import read_at
from ..config import ASCII_SCAN_LIMIT

logger = logging.getLogger(__name__)

# A-Z, 0-9 and '-'
SERIAL_CHARS = frozenset(b"-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ")
WINDOW_LEN = 15
MIN_SERIAL_LEN = 4
MAX_SERIAL_LEN = 8


def leading_serial_run(data: bytes) -> int:
    """Length of the leading run of serial characters in ``data``."""
    n = 0
    for c in data:
        if c not in SERIAL_CHARS:
            break
        n += 1
    return n


def detect_serial_ascii_game(stream: BinaryIO, limit: int = ASCII_SCAN_LIMIT) -> str:
    """
    Checks for an ASCII serial in the first few bytes of an image (GameCube/Wii).

    Every offset below ``limit`` is tried; the first run of 4 to 8 serial
    characters is returned.
    """
    for pos in range(limit):
        window = read_at(stream, pos, WINDOW_LEN)
        if not window:
            continue
        run = leading_serial_run(window)
        if MIN_SERIAL_LEN <= run <= MAX_SERIAL_LEN:
            serial = window[:run].decode("ascii")
            logger.debug("ASCII serial at offset %d: %s", pos, serial)
            return serial

    raise SerialNotFoundError("ascii", limit)
