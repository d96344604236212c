from __future__ import annotations

from typing import BinaryIO, Protocol, runtime_checkable


@runtime_checkable
class SystemProvider(Protocol):
    """Contrato obrigatório para qualquer sistema (ps1, psp, ...)."""

    @property
    def system_id(self) -> str:
        """Literal devolvido pelo detect_system (ex: 'ps1', 'psp')."""
        ...

    @property
    def display_name(self) -> str:
        """Nome legível (ex: 'PlayStation')."""
        ...

    def get_supported_extensions(self) -> set[str]:
        """Extensões tentadas quando nenhum magic number corresponde (ex: {".gcm"})."""
        ...

    def identify(self, stream: BinaryIO) -> str:
        """Extrai o identificador do jogo.

        Raises:
            DetectionNotFound: quando não há identificador reconhecível
        """
        ...
