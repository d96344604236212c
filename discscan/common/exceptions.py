"""Hierarquia de exceções do discscan.

Três famílias cobrem todos os caminhos de deteção:

- ``StreamIOError``: leitura curta, falha de seek ou de abertura.
- ``DetectionNotFound``: nenhuma assinatura/padrão/token encontrado. É um
  resultado legítimo ("desconhecido"), não uma falha.
- ``MalformedInputError``: registo de diretório truncado, timestamp
  inválido, delimitador em falta.
"""

from __future__ import annotations

from typing import Any, Optional


# ============================================================================
# BASE EXCEPTIONS
# ============================================================================

class DiscScanError(Exception):
    """Exceção base para todos os erros do discscan."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ConfigurationError(DiscScanError):
    """Erro relacionado à configuração."""
    pass


# ============================================================================
# STREAM ERRORS
# ============================================================================

class StreamIOError(DiscScanError):
    """Leitura curta, seek falhado ou ficheiro impossível de abrir."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        errno: Optional[int] = None,
        offset: Optional[int] = None,
    ):
        details: dict[str, Any] = {}
        if path is not None:
            details["path"] = path
        if offset is not None:
            details["offset"] = offset
        if errno is not None:
            details["errno"] = errno
        super().__init__(message, details)
        self.path = path
        self.errno = errno
        self.offset = offset


# ============================================================================
# DETECTION OUTCOMES
# ============================================================================

class DetectionNotFound(DiscScanError):
    """Nada reconhecido. Os chamadores tratam isto como "saltar imagem"."""
    pass


class SystemNotFoundError(DetectionNotFound):
    def __init__(self, message: str = "Could not find compatible system"):
        super().__init__(message)


class SerialNotFoundError(DetectionNotFound):
    def __init__(self, scanner: str, limit: int):
        super().__init__(
            f"No serial found by {scanner} scanner",
            {"scanner": scanner, "limit": limit},
        )
        self.scanner = scanner
        self.limit = limit


class BootRecordNotFoundError(DetectionNotFound):
    def __init__(self, reason: str, sub_channel_mixed: Optional[bool] = None):
        details: dict[str, Any] = {"reason": reason}
        if sub_channel_mixed is not None:
            details["sub_channel_mixed"] = sub_channel_mixed
        super().__init__("Boot record not found", details)
        self.reason = reason


class TokenNotFoundError(DetectionNotFound):
    def __init__(self, token: bytes):
        super().__init__(
            "Stream exhausted before token",
            {"token": token.decode("latin-1")},
        )
        self.token = token


class DataTrackNotFoundError(DetectionNotFound):
    def __init__(self, cue_path: str):
        super().__init__("No data track in cue sheet", {"path": cue_path})
        self.cue_path = cue_path


# ============================================================================
# MALFORMED INPUT
# ============================================================================

class MalformedInputError(DiscScanError):
    """Conteúdo estruturalmente inválido (registo, timestamp, delimitador)."""

    def __init__(self, reason: str, offset: Optional[int] = None, path: Optional[str] = None):
        details: dict[str, Any] = {}
        if offset is not None:
            details["offset"] = offset
        if path is not None:
            details["path"] = path
        super().__init__(f"Malformed input: {reason}", details)
        self.reason = reason
        self.offset = offset
        self.path = path


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def format_exception_chain(exc: Exception, include_traceback: bool = False) -> str:
    """Formata uma exceção com toda a cadeia de causas.

    Args:
        exc: Exceção a formatar
        include_traceback: Se deve incluir o traceback completo

    Returns:
        String formatada com a exceção e suas causas
    """
    import traceback

    if include_traceback:
        return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    messages = []
    current: Optional[BaseException] = exc
    while current is not None:
        if isinstance(current, DiscScanError):
            messages.append(str(current))
        else:
            messages.append(f"{type(current).__name__}: {current}")
        current = getattr(current, "__cause__", None)

    return " → ".join(messages)
