"""Byte-at-a-time tokenizer for cue sheets.

Tokens are separated by whitespace; a token starting with a double quote
runs to the next double quote and may contain whitespace.
"""

from __future__ import annotations

import logging
from typing import BinaryIO

from ..common.exceptions import StreamIOError, TokenNotFoundError
from ..config import MAX_TOKEN_LEN

logger = logging.getLogger(__name__)

WHITESPACE = frozenset(b" \t\r\n")
QUOTE = ord('"')


def _read_byte(stream: BinaryIO) -> bytes:
    while True:
        try:
            b = stream.read(1)
        except (InterruptedError, BlockingIOError):
            continue
        except OSError as e:
            raise StreamIOError(f"Token read failed: {e}", errno=e.errno) from e
        # Non-blocking raw streams report "no data yet" as None
        if b is None:
            continue
        return b


def read_token(stream: BinaryIO, max_len: int = MAX_TOKEN_LEN) -> bytes:
    """Read the next token from ``stream``.

    Returns the token without its terminator, truncated to ``max_len``
    bytes, or ``b""`` when the stream is exhausted before any content.
    """
    token = bytearray()
    in_string = False

    while True:
        b = _read_byte(stream)
        if not b:
            return bytes(token)

        c = b[0]
        if c in WHITESPACE:
            if not token:
                continue
            if not in_string:
                return bytes(token)
        elif c == QUOTE:
            if not token:
                in_string = True
                continue
            return bytes(token)

        token.append(c)
        if len(token) == max_len:
            return bytes(token)


def scan_until_token(stream: BinaryIO, target: bytes) -> None:
    """Consume tokens until one matches ``target``.

    Tokens are read at most ``len(target)`` bytes long, so a longer token
    sharing the prefix also matches and its remainder is left in the stream.

    Raises:
        TokenNotFoundError: if the stream runs out first
    """
    width = len(target)
    while True:
        token = read_token(stream, width)
        if not token:
            raise TokenNotFoundError(target)
        if token[:width] == target:
            return
