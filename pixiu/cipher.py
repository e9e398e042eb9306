"""AES-128-CBC encryption of kubeconfig payloads, base64 encoded."""

from __future__ import annotations

import base64
import binascii

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

BLOCK_SIZE = 16

# Fixed values shared with data already stored by the server.
AES_KEY = b"KHGSI69YBWGS0TWX"
AES_IV = b"3010201735544643"


def _pad(data: bytes, block_size: int = BLOCK_SIZE) -> bytes:
    padding = block_size - len(data) % block_size
    return data + bytes([padding]) * padding


def _unpad(data: bytes) -> bytes:
    if not data:
        raise ValueError("cannot remove padding from empty data")
    padding = data[-1]
    if padding > len(data):
        raise ValueError("invalid padding")
    return data[: len(data) - padding]


def encrypt(data: bytes) -> str:
    """Encrypt ``data`` and return the base64 text of the ciphertext."""
    encryptor = Cipher(algorithms.AES(AES_KEY), modes.CBC(AES_IV)).encryptor()
    crypted = encryptor.update(_pad(bytes(data))) + encryptor.finalize()
    return base64.b64encode(crypted).decode("ascii")


def decrypt(text: str) -> bytes:
    """Decode base64 ``text`` and decrypt it back to the original bytes."""
    try:
        raw = base64.b64decode(text, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"invalid base64 data: {exc}") from exc
    if not raw or len(raw) % BLOCK_SIZE:
        raise ValueError("ciphertext is not a whole number of blocks")
    decryptor = Cipher(algorithms.AES(AES_KEY), modes.CBC(AES_IV)).decryptor()
    plain = decryptor.update(raw) + decryptor.finalize()
    return _unpad(plain)