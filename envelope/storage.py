# --------------------------------------------------------------
# File: storage.py
# Description: Lectura completa y escritura atómica de ficheros para los adaptadores.
# --------------------------------------------------------------
"""Funciones auxiliares de entrada/salida sobre el sistema de ficheros local."""

from __future__ import annotations

import contextlib
import os
import tempfile
from typing import Optional, Union

from envelope.errors import EnvelopeIOError

__all__ = ["read_bytes", "write_bytes_atomic"]

PathLike = Union[str, "os.PathLike[str]"]

# tempfile crea con 0o600; es el modo de los ficheros no sensibles.
DEFAULT_MODE = 0o644


def _ensure_parent_dir(path: str) -> None:
    """Garantiza que exista el directorio padre del archivo de destino."""

    parent = os.path.dirname(path) or "."
    os.makedirs(parent, exist_ok=True)


def read_bytes(path: PathLike) -> bytes:
    """Lee un fichero completo.

    Args:
        path (PathLike): Ruta del fichero de origen.

    Returns:
        bytes: Contenido íntegro del fichero.

    Raises:
        EnvelopeIOError: Si el fichero no existe o no se puede leer.

    """

    try:
        with open(path, "rb") as handler:
            return handler.read()
    except OSError as exc:
        raise EnvelopeIOError(exc.errno, f"No se puede leer {os.fspath(path)}: {exc.strerror}") from exc


def write_bytes_atomic(path: PathLike, data: bytes, mode: Optional[int] = None) -> None:
    """Escribe un fichero completo aplicando escritura atómica.

    El contenido se vuelca a un temporal de nombre único en el mismo
    directorio y después se renombra; si algo falla el destino queda intacto
    y el temporal se elimina.

    Args:
        path (PathLike): Ruta de destino.
        data (bytes): Contenido completo.
        mode (Optional[int]): Permisos a aplicar antes del renombrado;
            ``DEFAULT_MODE`` si se omite.

    Raises:
        EnvelopeIOError: Si no se puede escribir o renombrar.

    """

    path = os.fspath(path)
    tmp_path: Optional[str] = None
    try:
        _ensure_parent_dir(path)
        with tempfile.NamedTemporaryFile(
            dir=os.path.dirname(path) or ".",
            prefix=f".{os.path.basename(path)}.",
            suffix=".tmp",
            delete=False,
        ) as handler:
            tmp_path = handler.name
            handler.write(data)
        os.chmod(tmp_path, DEFAULT_MODE if mode is None else mode)
        os.replace(tmp_path, path)
    except OSError as exc:
        if tmp_path is not None:
            with contextlib.suppress(OSError):
                os.remove(tmp_path)
        raise EnvelopeIOError(exc.errno, f"No se puede escribir {path}: {exc.strerror}") from exc
