import logging
from typing import BinaryIO

from ..common.exceptions import SerialNotFoundError
from ..common.streams import read_at
from ..config import PSP_SCAN_LIMIT

logger = logging.getLogger(__name__)

# Publisher code prefixes of UMD and PSN serials (e.g. ULUS-10041)
PSP_SERIAL_PREFIXES = frozenset(
    p.encode("ascii")
    for p in (
        "ULES-", "ULUS-", "ULJS-",
        "ULEM-", "ULUM-", "ULJM-",
        "UCES-", "UCUS-", "UCJS-", "UCAS-",
        "NPEH-", "NPUH-", "NPJH-",
        "NPEG-", "NPUG-", "NPJG-", "NPHG-",
        "NPEZ-", "NPUZ-", "NPJZ-",
    )
)

PREFIX_LEN = 5
SERIAL_LEN = 10


def detect_psp_game(stream: BinaryIO, limit: int = PSP_SCAN_LIMIT) -> str:
    """
    Scans the first ``limit`` offsets of a PSP image for a publisher-prefixed
    serial and returns the 10 bytes found there (e.g. "ULUS-10041").

    The scan stops at the first short read. The stream must return the same
    bytes when the matching offset is read a second time.
    """
    for pos in range(limit):
        prefix = read_at(stream, pos, PREFIX_LEN)
        if len(prefix) < PREFIX_LEN:
            break
        if prefix in PSP_SERIAL_PREFIXES:
            serial = read_at(stream, pos, SERIAL_LEN)
            if not serial:
                break
            logger.debug("PSP serial at offset %d: %r", pos, serial)
            return serial.decode("latin-1")

    raise SerialNotFoundError("psp", limit)
