"""Fixed-offset magic number matching.

``SIGNATURE_RULES`` is tried in order and the first match wins, so the
table order encodes priority between patterns sharing an offset. Adding
a system means appending a rule.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Sequence

from ..common.exceptions import SystemNotFoundError
from ..common.streams import read_at, read_exact
from ..common.types import SignatureRule
from ..config import MAGIC_LEN, PSP_MARKER, PSP_MARKER_OFFSET

logger = logging.getLogger(__name__)

# Raw sector sync (00 FF*10 00), BCD address 00:02:00, then the mode byte
_SYNC = b"\x00" + b"\xff" * 10 + b"\x00"

SIGNATURE_RULES: tuple[SignatureRule, ...] = (
    SignatureRule(0, "ps1", _SYNC + b"\x00\x02\x00\x02\x00"),
    SignatureRule(
        0x838840,
        "pcecd",
        b"\x82\xb1\x82\xcc\x83\x76\x83\x8d\x83\x4f\x83\x89\x83\x80\x82\xcc\x92",
    ),
    SignatureRule(0, "scd", _SYNC + b"\x00\x02\x00\x01\x53"),
)

assert all(len(r.pattern) == MAGIC_LEN for r in SIGNATURE_RULES)


def match_rules(stream: BinaryIO, rules: Sequence[SignatureRule]) -> str | None:
    """Return the system of the first matching rule, or None.

    A short read at any rule offset raises ``StreamIOError`` without
    trying the remaining rules.
    """
    for rule in rules:
        magic = read_exact(stream, rule.offset, len(rule.pattern))
        if magic == rule.pattern:
            return rule.system_name
    return None


def is_psp_image(stream: BinaryIO) -> bool:
    marker = read_at(stream, PSP_MARKER_OFFSET, len(PSP_MARKER))
    return marker == PSP_MARKER


def detect_system(stream: BinaryIO, rules: Sequence[SignatureRule] = SIGNATURE_RULES) -> str:
    """Classify ``stream`` into one of the known system literals.

    Raises:
        StreamIOError: on a short read at a rule offset
        SystemNotFoundError: when neither the table nor the PSP marker match
    """
    logger.debug("Comparing with known magic numbers...")
    system = match_rules(stream, rules)
    if system is not None:
        logger.debug("Matched magic number for '%s'", system)
        return system

    if is_psp_image(stream):
        logger.debug("Found PSP GAME marker at 0x%x", PSP_MARKER_OFFSET)
        return "psp"

    logger.debug("Could not find compatible system")
    raise SystemNotFoundError()
