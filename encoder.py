"""Base-58 transport encoding for signatures."""

import base58


def encode(raw: bytes, uppercase: bool = True) -> str:
    """Return ``raw`` as Bitcoin-alphabet base-58, uppercased by default."""
    text = base58.b58encode(raw).decode("ascii")
    return text.upper() if uppercase else text


def decode(text: str) -> bytes:
    """Decode base-58 ``text`` produced by ``encode(raw, uppercase=False)``."""
    return base58.b58decode(text)
