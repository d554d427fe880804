# /signer/digest.py

"""
Module: digest.py
Purpose: Map an email address to the fixed-size digest that gets signed.
Provides:
- digest(data) → 32-byte SHA-256 digest
Behavior:
- Hashes the exact UTF-8 bytes; no trimming, case folding or normalization
"""

import hashlib

DIGEST_SIZE = 32


def digest(data: str | bytes) -> bytes:
    """
    Return the SHA-256 digest of ``data``.
    Args:
        data (str | bytes): Text is encoded as UTF-8 first
    Returns:
        bytes: 32-byte digest
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).digest()
