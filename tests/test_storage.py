# --------------------------------------------------------------
# File: test_storage.py
# Description: Pruebas sobre la lectura completa y la escritura atómica de envelope.storage.
# --------------------------------------------------------------

import os

import pytest

from envelope.errors import EnvelopeIOError
from envelope.storage import read_bytes, write_bytes_atomic


def test_write_and_read(tmp_path):
    """Verifica que write_bytes_atomic persista y read_bytes recupere el contenido.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.

    Returns:
        None: Las aserciones comparan lo escrito con lo leído.
    """
    path = tmp_path / "sub" / "data.bin"
    write_bytes_atomic(path, b"\x00\x01contenido")
    assert read_bytes(path) == b"\x00\x01contenido"


def test_write_is_atomic(tmp_path):
    """Garantiza que no queden ficheros temporales tras escribir.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.

    Returns:
        None: Las aserciones comprueban la presencia y ausencia de archivos esperada.
    """
    path = tmp_path / "data.bin"
    write_bytes_atomic(path, b"v1")
    write_bytes_atomic(path, b"v2")
    assert path.read_bytes() == b"v2"
    assert sorted(os.listdir(tmp_path)) == ["data.bin"]


def test_write_applies_mode(tmp_path):
    """Los permisos indicados se aplican al fichero final.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.

    Returns:
        None: La aserción compara los bits de permiso.
    """
    if os.name != "posix":
        pytest.skip("Permisos POSIX no disponibles")
    path = tmp_path / "secret.pem"
    write_bytes_atomic(path, b"x", mode=0o600)
    assert (path.stat().st_mode & 0o777) == 0o600


def test_failed_write_keeps_destination(tmp_path):
    """Si el renombrado falla, el destino previo queda intacto y sin temporal.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.

    Returns:
        None: Se espera EnvelopeIOError y el directorio destino sin cambios.
    """
    target = tmp_path / "dir_as_target"
    target.mkdir()
    (target / "keep").write_bytes(b"k")
    with pytest.raises(EnvelopeIOError):
        write_bytes_atomic(target, b"nuevo")
    assert (target / "keep").read_bytes() == b"k"
    assert sorted(os.listdir(tmp_path)) == ["dir_as_target"]


def test_write_leaves_sibling_tmp_untouched(tmp_path):
    """Un fichero ajeno llamado como el destino más `.tmp` no se sobrescribe.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.

    Returns:
        None: Las aserciones comparan ambos ficheros.
    """
    sibling = tmp_path / "data.bin.tmp"
    sibling.write_bytes(b"ajeno")
    write_bytes_atomic(tmp_path / "data.bin", b"nuevo")
    assert sibling.read_bytes() == b"ajeno"
    assert (tmp_path / "data.bin").read_bytes() == b"nuevo"


def test_failed_cleanup_still_raises_io_error(tmp_path, monkeypatch):
    """Si tampoco se puede borrar el temporal, el error sigue siendo EnvelopeIOError.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.
        monkeypatch (MonkeyPatch): Hace fallar el renombrado y el borrado.

    Returns:
        None: Se espera EnvelopeIOError y el destino sin crear.
    """

    def _fail(*args, **kwargs):
        raise PermissionError(13, "denegado")

    monkeypatch.setattr(os, "replace", _fail)
    monkeypatch.setattr(os, "remove", _fail)
    with pytest.raises(EnvelopeIOError):
        write_bytes_atomic(tmp_path / "data.bin", b"x")
    assert not (tmp_path / "data.bin").exists()

def test_read_missing_file(tmp_path):
    """Leer un fichero inexistente produce un error de E/S tipado.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.

    Returns:
        None: Se espera EnvelopeIOError, que también es OSError.
    """
    with pytest.raises(EnvelopeIOError) as info:
        read_bytes(tmp_path / "missing.bin")
    assert isinstance(info.value, OSError)
