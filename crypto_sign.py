# /signer/crypto_sign.py

"""
Module: crypto_sign.py
Purpose: Sign email digests with the service's Ed25519 private key.
Consumes:
- SigningKey from key_store.py
- 32-byte digest from digest.py
Provides:
- sign_digest(key, digest) → raw 64-byte signature
Behavior:
- Deterministic: the same key and digest always give the same signature
"""

import nacl.signing

from digest import DIGEST_SIZE


def sign_digest(key: nacl.signing.SigningKey, digest: bytes) -> bytes:
    """
    Signs the digest using the private key.
    Args:
        key (SigningKey): Loaded Ed25519 key
        digest (bytes): Output of digest.digest()
    Returns:
        bytes: Raw Ed25519 signature
    """
    if len(digest) != DIGEST_SIZE:
        raise ValueError(f"Digest must be {DIGEST_SIZE} bytes, got {len(digest)}")
    signed = key.sign(digest)
    return signed.signature
