"""
Manager module

Glue between the detectors: cue sheet -> data track -> magic number ->
system provider -> identifier. One image never aborts a batch; every
outcome, including errors, comes back as an ``IdentificationResult``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, Optional

from . import config
from .common.exceptions import (
    DetectionNotFound,
    DiscScanError,
    MalformedInputError,
    StreamIOError,
    SystemNotFoundError,
    format_exception_chain,
)
from .common.registry import SystemRegistry
from .common.streams import open_stream, open_track
from .common.types import IdentificationResult
from .core.config_manager import ConfigManager
from .cue.locator import find_first_data_track
from .detection.signatures import detect_system
from .logging_cfg import log_call, set_correlation_id

logger = logging.getLogger(__name__)

ERROR_KINDS = {
    StreamIOError: "io",
    MalformedInputError: "malformed",
    DetectionNotFound: "not_found",
}


def _error_kind(exc: DiscScanError) -> str:
    for cls, kind in ERROR_KINDS.items():
        if isinstance(exc, cls):
            return kind
    return "error"


def get_registry(settings: Optional[ConfigManager] = None) -> SystemRegistry:
    if settings is None:
        return SystemRegistry()
    return SystemRegistry(
        psp_scan_limit=settings.get("psp_scan_limit"),
        ascii_scan_limit=settings.get("ascii_scan_limit"),
        ascii_serial_extensions=frozenset(settings.get("ascii_serial_extensions")),
    )


def identify_stream(
    stream: BinaryIO,
    path: Optional[Path] = None,
    registry: Optional[SystemRegistry] = None,
) -> IdentificationResult:
    """Classify ``stream`` and extract its identifier.

    ``path`` is only used to pick the ASCII serial fallback by extension.
    Detection errors propagate; ``identify_path`` is the per-image boundary.
    """
    registry = registry or SystemRegistry()
    result = IdentificationResult(path=path or Path("<stream>"))

    try:
        result.system = detect_system(stream)
        provider = registry.get_provider(result.system)
    except SystemNotFoundError:
        provider = registry.fallback_provider_for(path)
        if provider is None:
            raise
        result.system = provider.system_id

    if provider is None:
        raise DetectionNotFound(
            f"No identifier extractor for system '{result.system}'",
            {"system": result.system},
        )

    try:
        result.serial = provider.identify(stream)
    except (DetectionNotFound, MalformedInputError) as e:
        e.details.setdefault("system", result.system)
        raise
    return result


@log_call()
def identify_path(
    path: Path | str,
    settings: Optional[ConfigManager] = None,
    registry: Optional[SystemRegistry] = None,
) -> IdentificationResult:
    """Identify one image or cue sheet; never raises ``DiscScanError``."""
    path = Path(path)
    set_correlation_id()
    settings = settings or ConfigManager()
    registry = registry or get_registry(settings)
    result = IdentificationResult(path=path)

    try:
        if path.suffix.lower() == config.CUE_SUFFIX:
            result.track = find_first_data_track(path, settings.get("standard_msf"))
            with open_track(result.track.path, result.track.offset) as stream:
                found = identify_stream(stream, result.track.path, registry)
        else:
            with open_stream(path) as stream:
                found = identify_stream(stream, path, registry)
        result.system = found.system
        result.serial = found.serial
        logger.info("%s: %s %s", path.name, result.system, result.serial)
    except DiscScanError as e:
        result.error = format_exception_chain(e)
        result.details["kind"] = _error_kind(e)
        # The system may already be known when only the serial is missing
        if "system" in e.details:
            result.system = e.details["system"]
        level = logging.WARNING if result.details["kind"] == "io" else logging.INFO
        logger.log(level, "%s: %s", path.name, e)

    return result


def identify_many(
    paths: Iterable[Path | str],
    settings: Optional[ConfigManager] = None,
) -> Iterator[IdentificationResult]:
    settings = settings or ConfigManager()
    registry = get_registry(settings)
    for p in paths:
        yield identify_path(p, settings, registry)
