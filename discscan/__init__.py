"""discscan package root.

Disc image identification: magic number classification, PS1 ISO9660 boot
record resolution, PSP and GameCube/Wii serial scans, and cue sheet data
track location. Keep this file small so `import discscan` stays cheap.
"""

from . import config

__version__ = "1.0.0"

__all__ = [
    "config",
    "__version__",
]
