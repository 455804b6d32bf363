# --------------------------------------------------------------
# File: test_files.py
# Description: Pruebas de los adaptadores de ficheros y la persistencia de pares de claves.
# --------------------------------------------------------------

import os

import pytest

from envelope.codec import from_text
from envelope.errors import (
    DecryptionFailedError,
    EnvelopeIOError,
    FormatError,
    KeyRecoveryError,
    PayloadDecryptionError,
)
from envelope.models import HybridResult, SymmetricResult
from envelope_api.files import (
    PRIVATE_KEY_FILE,
    decrypt_file,
    encrypt_file,
    hybrid_decrypt_file,
    hybrid_encrypt_file,
    load_keypair,
    save_keypair,
    sign_file,
    verify_file,
)


def test_encrypt_file_roundtrip_without_key_on_disk(tmp_path):
    """Cifra un fichero, comprueba que la clave no se escribe y lo descifra.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.

    Returns:
        None: Las aserciones revisan el sobre en disco y el claro recuperado.
    """
    src = tmp_path / "plano.bin"
    src.write_bytes(os.urandom(5000))

    result = encrypt_file(src, tmp_path / "cifrado.json")
    assert result.key is not None

    stored = from_text((tmp_path / "cifrado.json").read_text(encoding="ascii"))
    assert isinstance(stored, SymmetricResult)
    assert stored.key is None
    assert stored.ciphertext == result.ciphertext

    plaintext = decrypt_file(tmp_path / "cifrado.json", tmp_path / "salida.bin", result.key)
    assert plaintext == src.read_bytes()
    assert (tmp_path / "salida.bin").read_bytes() == src.read_bytes()


def test_hybrid_file_roundtrip(tmp_path, keypair):
    """Cifra un fichero de 1 MB con el sobre híbrido y lo recupera.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.
        keypair (KeyPair): Par RSA de sesión.

    Returns:
        None: Las aserciones comparan contenido y resultado devuelto.
    """
    src = tmp_path / "grande.bin"
    src.write_bytes(os.urandom(1024 * 1024))

    envelope = hybrid_encrypt_file(src, tmp_path / "sobre.json", keypair.public_key)
    assert isinstance(envelope, HybridResult)
    assert from_text((tmp_path / "sobre.json").read_text(encoding="ascii")) == envelope

    hybrid_decrypt_file(tmp_path / "sobre.json", tmp_path / "grande.out", keypair.private_key)
    assert (tmp_path / "grande.out").read_bytes() == src.read_bytes()


def test_hybrid_file_wrong_key_leaves_no_output(tmp_path, keypair, other_keypair):
    """Un fallo de descifrado no crea el fichero destino.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.

    Returns:
        None: Se espera un error híbrido y ausencia del destino.
    """
    src = tmp_path / "plano.txt"
    src.write_text("confidencial", encoding="utf-8")
    hybrid_encrypt_file(src, tmp_path / "sobre.json", keypair.public_key)
    with pytest.raises((KeyRecoveryError, PayloadDecryptionError)):
        hybrid_decrypt_file(tmp_path / "sobre.json", tmp_path / "salida.txt", other_keypair.private_key)
    assert not (tmp_path / "salida.txt").exists()


def test_decrypt_file_rejects_wrong_result_type(tmp_path, keypair):
    """Un sobre híbrido no puede abrirse como sobre simétrico.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.

    Returns:
        None: Se espera FormatError.
    """
    src = tmp_path / "plano.txt"
    src.write_bytes(b"abc")
    hybrid_encrypt_file(src, tmp_path / "sobre.json", keypair.public_key)
    with pytest.raises(FormatError):
        decrypt_file(tmp_path / "sobre.json", tmp_path / "out", os.urandom(32))


def test_decrypt_file_rejects_binary_garbage(tmp_path):
    """Un fichero binario arbitrario no es un sobre.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.

    Returns:
        None: Se espera FormatError.
    """
    (tmp_path / "basura.bin").write_bytes(b"\xff\x00\xfe")
    with pytest.raises(FormatError):
        decrypt_file(tmp_path / "basura.bin", tmp_path / "out", os.urandom(32))


def test_missing_source_is_io_error(tmp_path):
    """Un origen inexistente produce EnvelopeIOError.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.

    Returns:
        None: Se espera EnvelopeIOError.
    """
    with pytest.raises(EnvelopeIOError):
        encrypt_file(tmp_path / "no_existe", tmp_path / "out")


def test_sign_and_verify_file(tmp_path, keypair, other_keypair):
    """Firma un fichero y verifica contenido, clave y firma alterada.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.

    Returns:
        None: Las aserciones revisan los casos válido e inválidos.
    """
    doc = tmp_path / "contrato.txt"
    doc.write_text("transfer:100", encoding="utf-8")
    sig = tmp_path / "contrato.sig"

    sign_file(doc, sig, keypair.private_key)
    assert verify_file(doc, sig, keypair.public_key) is True
    assert verify_file(doc, sig, other_keypair.public_key) is False

    doc.write_text("transfer:900", encoding="utf-8")
    assert verify_file(doc, sig, keypair.public_key) is False

    sig.write_text("{corrupto", encoding="ascii")
    assert verify_file(doc, sig, keypair.public_key) is False


def test_save_and_load_plain_keypair(tmp_path, keypair):
    """Guarda y recarga un par sin passphrase.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.

    Returns:
        None: La aserción compara los pares.
    """
    public_path, private_path = save_keypair(keypair, tmp_path / "keys")
    assert os.path.exists(public_path) and os.path.exists(private_path)
    if os.name == "posix":
        assert (os.stat(private_path).st_mode & 0o777) == 0o600
    assert load_keypair(tmp_path / "keys") == keypair


def test_save_and_load_protected_keypair(tmp_path, keypair):
    """Guarda el par con passphrase y exige la passphrase para recargarlo.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.

    Returns:
        None: Las aserciones revisan el contenido protegido y los errores.
    """
    save_keypair(keypair, tmp_path, passphrase="Str0ng_P@ssword123!")
    on_disk = (tmp_path / PRIVATE_KEY_FILE).read_bytes()
    assert b"BEGIN PRIVATE KEY" not in on_disk

    assert load_keypair(tmp_path, passphrase="Str0ng_P@ssword123!") == keypair
    with pytest.raises(DecryptionFailedError):
        load_keypair(tmp_path, passphrase="otra")
    with pytest.raises(FormatError):
        load_keypair(tmp_path)
