"""Builders for small synthetic disc images used across the tests."""

import io
import struct
from pathlib import Path
from typing import Optional

SYNC = b"\x00" + b"\xff" * 10 + b"\x00"
PS1_MAGIC = SYNC + b"\x00\x02\x00\x02\x00"
SCD_MAGIC = SYNC + b"\x00\x02\x00\x01\x53"
PCECD_MAGIC = b"\x82\xb1\x82\xcc\x83\x76\x83\x8d\x83\x4f\x83\x89\x83\x80\x82\xcc\x92"
PCECD_OFFSET = 0x838840

# Large enough for every rule of the magic number table to be read
SIGNATURE_SAFE_SIZE = PCECD_OFFSET + 32

ROOT_SECTOR = 22
CNF_SECTOR = 24
TOTAL_SECTORS = 26

DEFAULT_CNF = (
    b"BOOT = cdrom:\\SLES_123.45;1\r\n"
    b"TCB = 4\r\n"
    b"EVENT = 10\r\n"
    b"STACK = 801FFFF0\r\n"
)


def dir_record(extent: int, name: bytes) -> bytes:
    """ISO9660 directory record (both-endian extent, padded to even length)."""
    length = 33 + len(name)
    if length % 2:
        length += 1
    rec = bytearray(length)
    rec[0] = length
    rec[2:10] = struct.pack("<I", extent) + struct.pack(">I", extent)
    rec[32] = len(name)
    rec[33:33 + len(name)] = name
    return bytes(rec)


def build_ps1_image(
    sector_size: int = 2048,
    system_cnf: bytes = DEFAULT_CNF,
    cnf_name: Optional[bytes] = b"SYSTEM.CNF;1",
    with_signature: bool = False,
    size: Optional[int] = None,
) -> bytes:
    """Minimal PS1 disc: PVD root record, root directory and SYSTEM.CNF.

    sector_size 2048 gives cooked Mode 1 sectors; 2352 and 2448 give raw
    sectors with a 24 byte header in front of the user data.
    """
    skip = 0 if sector_size == 2048 else 24
    img = bytearray(sector_size * TOTAL_SECTORS)

    def put(sector: int, offset: int, data: bytes) -> None:
        base = sector * sector_size + skip + offset
        img[base:base + len(data)] = data

    if skip:
        for n in range(TOTAL_SECTORS):
            img[n * sector_size:n * sector_size + len(SYNC)] = SYNC
    if with_signature:
        img[:len(PS1_MAGIC)] = PS1_MAGIC

    put(16, 156, dir_record(ROOT_SECTOR, b"\x00"))

    records = dir_record(ROOT_SECTOR, b"\x00") + dir_record(ROOT_SECTOR, b"\x01")
    if cnf_name is not None:
        records += dir_record(CNF_SECTOR, cnf_name)
    records += dir_record(CNF_SECTOR + 1, b"SLES_123.45;1")
    put(ROOT_SECTOR, 0, records)
    put(CNF_SECTOR, 0, system_cnf)

    if size is not None and size > len(img):
        img += bytes(size - len(img))
    return bytes(img)


def image_with(size: int, **chunks: bytes) -> bytes:
    """Zero-filled image with ``chunks`` placed at offsets (``at_<offset>=data``)."""
    img = bytearray(size)
    for key, data in chunks.items():
        offset = int(key.split("_", 1)[1], 0)
        img[offset:offset + len(data)] = data
    return bytes(img)


def write_sparse(path: Path, size: int, chunks: dict[int, bytes]) -> Path:
    """Write a sparse file of ``size`` bytes holding ``chunks`` at their offsets."""
    with open(path, "wb") as f:
        for offset, data in sorted(chunks.items()):
            f.seek(offset)
            f.write(data)
        f.truncate(size)
    return path


class RecordingStream(io.BytesIO):
    """BytesIO that remembers every absolute offset it was seeked to."""

    def __init__(self, data: bytes):
        super().__init__(data)
        self.seeks: list[int] = []

    def seek(self, offset, whence=0):
        pos = super().seek(offset, whence)
        self.seeks.append(pos)
        return pos


class FlakyStream(io.BytesIO):
    """BytesIO whose first ``failures`` reads raise ``exc``."""

    def __init__(self, data: bytes, exc: BaseException, failures: int = 1):
        super().__init__(data)
        self.exc = exc
        self.failures = failures

    def read(self, size=-1):
        if self.failures:
            self.failures -= 1
            raise self.exc
        return super().read(size)
