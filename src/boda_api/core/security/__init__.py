"""Security primitives."""

from .hashing import hash_password, verify_password
from .secrets import decrypt_secret, encrypt_secret, mask_secret
from .tokens import create_access_token, decode_token

__all__ = [
    "create_access_token",
    "decode_token",
    "decrypt_secret",
    "encrypt_secret",
    "hash_password",
    "mask_secret",
    "verify_password",
]
