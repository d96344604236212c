"""Seekable stream helpers shared by every detector.

Detectors accept any binary file object exposing ``seek``/``tell``/``read``.
``open_stream`` is the one place that turns a path into such an object,
gzip containers are decompressed into memory so that seeking from the end
works.
"""

from __future__ import annotations

import gzip
import io
import logging
import os
from pathlib import Path
from typing import BinaryIO

from .. import config
from .exceptions import StreamIOError

logger = logging.getLogger(__name__)


def open_stream(path: Path | str) -> BinaryIO:
    """Open ``path`` for binary reading.

    Raises:
        StreamIOError: if the file cannot be opened or decompressed
    """
    p = Path(path)
    try:
        if p.suffix.lower() in config.GZIP_SUFFIXES:
            with gzip.open(p, "rb") as gz:
                data = gz.read()
            logger.debug("Decompressed %s into memory (%d bytes)", p.name, len(data))
            return io.BytesIO(data)
        return open(p, "rb")
    except (OSError, EOFError) as e:
        raise StreamIOError(
            f"Could not open '{p}': {e}", path=str(p), errno=getattr(e, "errno", None)
        ) from e


def seek(stream: BinaryIO, offset: int, whence: int = os.SEEK_SET) -> int:
    try:
        return stream.seek(offset, whence)
    except (OSError, ValueError) as e:
        raise StreamIOError(
            f"Seek failed: {e}", errno=getattr(e, "errno", None), offset=offset
        ) from e


def read(stream: BinaryIO, size: int) -> bytes:
    """Read up to ``size`` bytes; I/O failures become ``StreamIOError``."""
    try:
        data = stream.read(size)
    except OSError as e:
        raise StreamIOError(f"Read failed: {e}", errno=e.errno) from e
    return data or b""


def read_at(stream: BinaryIO, offset: int, size: int) -> bytes:
    seek(stream, offset)
    return read(stream, size)


def read_exact(stream: BinaryIO, offset: int, size: int) -> bytes:
    """Read exactly ``size`` bytes at ``offset`` or raise ``StreamIOError``."""
    data = read_at(stream, offset, size)
    if len(data) < size:
        raise StreamIOError(
            f"Could not read data at offset {offset}: got {len(data)} of {size} bytes",
            offset=offset,
        )
    return data


def stream_size(stream: BinaryIO) -> int:
    return seek(stream, 0, os.SEEK_END)


class TrackStream:
    """View of ``base`` whose position 0 is ``start`` in the underlying image.

    Used to feed the data track located by a cue sheet back into the image
    detectors. Closing the view closes the underlying stream only when
    ``owns_base`` is set.
    """

    def __init__(self, base: BinaryIO, start: int, owns_base: bool = False):
        if start < 0:
            raise ValueError(f"negative track offset: {start}")
        self._base = base
        self._start = start
        self._owns_base = owns_base
        self._base.seek(start)

    @property
    def start(self) -> int:
        return self._start

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        if whence == os.SEEK_SET:
            target = self._start + offset
        elif whence == os.SEEK_CUR:
            target = self._base.tell() + offset
        elif whence == os.SEEK_END:
            target = self._base.seek(0, os.SEEK_END) + offset
        else:
            raise ValueError(f"invalid whence ({whence})")
        if target < self._start:
            raise OSError(22, "Seek before start of track")
        return self._base.seek(target) - self._start

    def tell(self) -> int:
        return self._base.tell() - self._start

    def read(self, size: int = -1) -> bytes:
        return self._base.read(size)

    def close(self) -> None:
        if self._owns_base:
            self._base.close()

    def __enter__(self) -> "TrackStream":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def open_track(path: Path | str, offset: int = 0) -> TrackStream:
    """Open an image file positioned at a data track offset."""
    base = open_stream(path)
    try:
        return TrackStream(base, offset, owns_base=True)
    except (OSError, ValueError) as e:
        base.close()
        raise StreamIOError(f"Could not open track at {offset}: {e}", path=str(path), offset=offset) from e
