# /signer/crypto_verify.py

"""
Module: crypto_verify.py
Purpose: Check a signature returned by the signing service.
Consumes:
- Raw 32-byte Ed25519 public key of the service
Provides:
- verify_signature(email, signature_text, pubkey_bytes) → bool
Behavior:
- Expects the case-preserving base-58 form (SIGNATURE_CASE=preserve);
  uppercased signatures cannot be decoded
"""

import sys

import nacl.encoding
import nacl.exceptions
import nacl.signing

from digest import digest
from encoder import decode


def verify_signature(email: str, signature_text: str, pubkey_bytes: bytes) -> bool:
    """
    Verifies a signature over the digest of ``email``.
    Args:
        email (str): The email that was submitted for signing
        signature_text (str): Base-58 signature from the service
        pubkey_bytes (bytes): Public key in raw format
    Returns:
        bool: True if valid, False otherwise
    """
    try:
        verify_key = nacl.signing.VerifyKey(pubkey_bytes, encoder=nacl.encoding.RawEncoder)
        verify_key.verify(digest(email), decode(signature_text))
        return True
    except (nacl.exceptions.BadSignatureError, ValueError):
        return False


def main() -> None:
    if len(sys.argv) != 4:
        print('usage: crypto_verify.py <public-key-hex> <email> <signature>', file=sys.stderr)
        sys.exit(2)
    try:
        pubkey = bytes.fromhex(sys.argv[1])
    except ValueError:
        print('Public key must be hex encoded', file=sys.stderr)
        sys.exit(2)
    if verify_signature(sys.argv[2], sys.argv[3], pubkey):
        print('Valid signature ✅')
        sys.exit(0)
    print('Invalid signature')
    sys.exit(1)


if __name__ == '__main__':
    main()
