# /signer/key_store.py

"""
Module: key_store.py
Purpose: Load the Ed25519 signing key from a PKCS#8 file.
Consumes:
- Path to the private key file (DER or PEM armored)
Provides:
- parse_private_key(data, strict) → 32-byte seed
- load_signing_key(path, strict) → nacl.signing.SigningKey
- KeyStore: per-request loader with an optional cache
Behavior:
- Re-reads the file on every load unless caching is enabled, so a key
  replaced on disk is picked up without a restart
- Relaxed parsing accepts PKCS#8 v2 keys without checking the embedded
  public key; strict parsing rejects a mismatch
"""

import base64
import binascii
import threading
from pathlib import Path

import nacl.encoding
import nacl.signing
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from errors import KeyFileMalformed, KeyFileUnreadable
from logger import get_logger

SEED_SIZE = 32

# PKCS#8 v2 (OneAsymmetricKey) layouts for Ed25519, keyed by header.
# Value is the tag introducing the trailing public key.
_V2_LAYOUTS = {
    # [1] EXPLICIT BIT STRING
    bytes.fromhex("3053020101300506032b657004220420"): bytes.fromhex("a123032100"),
    # [1] IMPLICIT BIT STRING (RFC 8410 example)
    bytes.fromhex("3051020101300506032b657004220420"): bytes.fromhex("812100"),
}


def _pem_to_der(data: bytes) -> bytes:
    """Strip PEM armor and return the base64-decoded DER body."""
    lines = data.strip().splitlines()
    if len(lines) < 2 or not lines[-1].startswith(b"-----END"):
        raise KeyFileMalformed("Unterminated PEM block")
    body = b"".join(line.strip() for line in lines[1:-1])
    try:
        return base64.b64decode(body, validate=True)
    except binascii.Error as exc:
        raise KeyFileMalformed("Invalid PEM body") from exc


def _parse_v2(der: bytes, strict: bool) -> bytes | None:
    for header, tag in _V2_LAYOUTS.items():
        if len(der) != len(header) + SEED_SIZE + len(tag) + SEED_SIZE:
            continue
        if not der.startswith(header):
            continue
        seed = der[len(header):len(header) + SEED_SIZE]
        if der[len(header) + SEED_SIZE:-SEED_SIZE] != tag:
            continue
        if strict:
            derived = nacl.signing.SigningKey(seed).verify_key.encode()
            if derived != der[-SEED_SIZE:]:
                raise KeyFileMalformed("Embedded public key does not match private key")
        return seed
    return None


def parse_private_key(data: bytes, strict: bool = False) -> bytes:
    """
    Parse PKCS#8 Ed25519 key material.
    Args:
        data (bytes): DER bytes, or the same wrapped in PEM armor
        strict (bool): Verify the public key embedded in v2 keys
    Returns:
        bytes: The 32-byte private seed
    Raises:
        KeyFileMalformed: If the bytes are not a single Ed25519 key
    """
    der = _pem_to_der(data) if data.lstrip().startswith(b"-----BEGIN") else data
    # v2 keys carry the public key; match them by layout so strict mode
    # can check it.
    seed = _parse_v2(der, strict)
    if seed is not None:
        return seed

    try:
        key = serialization.load_der_private_key(der, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise KeyFileMalformed("Not a PKCS#8 Ed25519 private key") from exc
    if not isinstance(key, Ed25519PrivateKey):
        raise KeyFileMalformed("Private key is not an Ed25519 key")
    return key.private_bytes(
        serialization.Encoding.Raw,
        serialization.PrivateFormat.Raw,
        serialization.NoEncryption(),
    )


def load_signing_key(path: str | Path, strict: bool = False) -> nacl.signing.SigningKey:
    """
    Read and parse the key file at ``path``.
    Raises:
        KeyFileUnreadable: If the file cannot be read
        KeyFileMalformed: If the content is not an Ed25519 PKCS#8 key
    """
    key_path = Path(path)
    try:
        data = key_path.read_bytes()
    except OSError as exc:
        raise KeyFileUnreadable(f"Cannot read private key at {key_path}: {exc}") from exc
    seed = parse_private_key(data, strict=strict)
    return nacl.signing.SigningKey(seed, encoder=nacl.encoding.RawEncoder)


class KeyStore:
    """Owns the key file path and hands out signing keys."""

    def __init__(self, path: str | Path, strict: bool = False, cache: bool = False) -> None:
        self._path = Path(path)
        self.strict = strict
        self.cache = cache
        self._cached: nacl.signing.SigningKey | None = None
        self._lock = threading.Lock()
        self.logger = get_logger(__name__)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        """Return True if the key file is present."""
        return self._path.is_file()

    def load(self) -> nacl.signing.SigningKey:
        """Return the signing key, re-reading the file unless cached."""
        if not self.cache:
            return load_signing_key(self._path, strict=self.strict)
        with self._lock:
            if self._cached is None:
                self._cached = load_signing_key(self._path, strict=self.strict)
                self.logger.info("Private key loaded into cache")
            return self._cached

    def invalidate(self) -> None:
        """Drop the cached key so the next load reads the file again."""
        with self._lock:
            if self._cached is not None:
                self.logger.info("Private key cache invalidated")
            self._cached = None
