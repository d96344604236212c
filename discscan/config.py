"""Configuration and constants for the discscan package."""
from __future__ import annotations

from typing import Dict, FrozenSet

# Tokens longer than this are truncated by the cue tokenizer
MAX_TOKEN_LEN = 255

# Signature patterns are all this long
MAGIC_LEN = 17

# Brute-force serial scan windows (number of start offsets tried)
PSP_SCAN_LIMIT = 100000
ASCII_SCAN_LIMIT = 10000

# CD sector geometry
SECTOR_MODE1 = 2048
SECTOR_RAW = 2352
SECTOR_RAW_SUBCHANNEL = 2448
MODE2_DATA_SKIP = 24

# First four bytes of a raw sector sync pattern; anything else at offset 0
# of a 2048-aligned image means cooked Mode 1 sectors.
MODE_TEST_BYTES = b"\x00\xff\xff\xff"

# ISO9660 layout
PVD_SECTOR = 16
PVD_ROOT_RECORD_OFFSET = 156
ROOT_RECORD_READ_LEN = 6
DIRECTORY_WINDOW_LEN = SECTOR_MODE1 * 2
DIRECTORY_NAME_OFFSET = 33
SYSTEM_CNF_NAME = b"SYSTEM.CNF;1"
SYSTEM_CNF_READ_LEN = 256

# PSP UMD images carry this marker in the primary volume descriptor
PSP_MARKER_OFFSET = 0x8008
PSP_MARKER = b"PSP GAME"

# Extensions on which the generic ASCII serial scanner runs when no
# signature matches (GameCube/Wii family)
ASCII_SERIAL_EXTENSIONS: FrozenSet[str] = frozenset(
    {".iso", ".gcm", ".wbfs", ".ciso", ".rvz"}
)

# Transparent container suffixes handled by open_stream
GZIP_SUFFIXES: FrozenSet[str] = frozenset({".gz"})

CUE_SUFFIX = ".cue"

# Human readable names for system literals reported by the matcher
SYSTEM_DISPLAY_NAMES: Dict[str, str] = {
    "ps1": "PlayStation",
    "pcecd": "PC Engine CD",
    "scd": "Sega CD",
    "psp": "PlayStation Portable",
    "wii": "GameCube / Wii",
}
