"""
storage/crypto.py

Fernet helpers for encrypting the local demo store at rest.

Key lifecycle
-------------
The Fernet key is read from the environment variable APP_DATA_KEY, a
URL-safe base64-encoded 32-byte key as produced by ``Fernet.generate_key()``.
Encryption is only switched on when the variable is set (see
pipelines/config.py), so a missing key here is a configuration error.

Public API
----------
encrypt_json(data: dict) -> str
decrypt_json(token: str) -> dict
"""

import json
import logging
import os
from functools import lru_cache

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)

_ENV_KEY_NAME = "APP_DATA_KEY"


@lru_cache(maxsize=1)
def _get_fernet() -> Fernet:
    """Return a cached Fernet instance built from APP_DATA_KEY."""
    raw_key = os.environ.get(_ENV_KEY_NAME)
    if not raw_key:
        raise RuntimeError(
            f"{_ENV_KEY_NAME} is not set; cannot encrypt the local record store."
        )
    logger.debug("Fernet key loaded from environment variable '%s'.", _ENV_KEY_NAME)
    return Fernet(raw_key.encode())


def encrypt_json(data: dict) -> str:
    """
    Serialize *data* to JSON, encrypt with Fernet, and return the token
    as a string suitable for writing to a text file.
    """
    plaintext = json.dumps(data, ensure_ascii=False, default=str).encode("utf-8")
    return _get_fernet().encrypt(plaintext).decode("utf-8")


def decrypt_json(token: str) -> dict:
    """
    Decrypt a token produced by :func:`encrypt_json`.

    Raises:
        cryptography.fernet.InvalidToken: wrong key or corrupted file.
    """
    try:
        plaintext = _get_fernet().decrypt(token.strip().encode("utf-8"))
    except InvalidToken:
        logger.error("Fernet decryption failed: wrong key or corrupted store file.")
        raise
    return json.loads(plaintext.decode("utf-8"))
