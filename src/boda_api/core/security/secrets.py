"""Helpers for encrypting and decrypting secrets at rest."""

from __future__ import annotations

import base64
import hashlib

from cryptography.fernet import Fernet, InvalidToken

from boda_api.settings import Settings


def _derive_key(raw: str) -> bytes:
    digest = hashlib.sha256(raw.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest)


def encrypt_secret(value: str, settings: Settings) -> str:
    fernet = Fernet(_derive_key(settings.encryption_key_value))
    return fernet.encrypt(value.encode("utf-8")).decode("ascii")


def decrypt_secret(value: str, settings: Settings) -> str:
    fernet = Fernet(_derive_key(settings.encryption_key_value))
    try:
        return fernet.decrypt(value.encode("ascii")).decode("utf-8")
    except (InvalidToken, ValueError) as exc:
        raise ValueError("Unable to decrypt secret") from exc


def mask_secret(value: str | None, *, visible: int = 4) -> str | None:
    """Return ``value`` with everything but the trailing characters hidden."""

    if not value:
        return None
    tail = value[-visible:]
    return f"****{tail}"


__all__ = ["decrypt_secret", "encrypt_secret", "mask_secret"]
