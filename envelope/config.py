# --------------------------------------------------------------
# File: config.py
# Description: Parámetros de la librería leídos del entorno o de un fichero .env.
# --------------------------------------------------------------
import os
from dotenv import load_dotenv
load_dotenv()

RSA_DEFAULT_BITS = int(os.getenv("ENVELOPE_RSA_BITS", "2048"))
RSA_ALLOWED_BITS = tuple(
    int(bits) for bits in os.getenv("ENVELOPE_RSA_ALLOWED_BITS", "2048,3072,4096").split(",") if bits.strip()
)
TEXT_ENCODING = os.getenv("ENVELOPE_TEXT_ENCODING", "utf-8")
LOG_LEVEL = os.getenv("ENVELOPE_LOG_LEVEL", "WARNING").upper()

# Coste Argon2id para la KEK que protege claves privadas en disco.
KDF_PARAMS = {
    "t": int(os.getenv("ENVELOPE_KDF_T", "3")),
    "m": int(os.getenv("ENVELOPE_KDF_M", str(64 * 1024))),
    "p": int(os.getenv("ENVELOPE_KDF_P", "1")),
    "outlen": 32,
}
