"""Request pipeline: digest, load key, sign, encode."""

from dataclasses import dataclass
from typing import Any, Dict

from crypto_sign import sign_digest
from digest import digest
from encoder import encode
from errors import MalformedRequest
from key_store import KeyStore


@dataclass(frozen=True)
class SignRequest:
    email: str

    @classmethod
    def from_json(cls, payload: Any) -> "SignRequest":
        """Build a request from a decoded JSON body."""
        if not isinstance(payload, dict):
            raise MalformedRequest("Body must be a JSON object")
        email = payload.get("email")
        if not isinstance(email, str):
            raise MalformedRequest("Field 'email' must be a string")
        try:
            email.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise MalformedRequest("Field 'email' is not valid UTF-8 text") from exc
        return cls(email=email)


@dataclass(frozen=True)
class SignResponse:
    signature: str

    def to_json(self) -> Dict[str, str]:
        return {"signature": self.signature}


class SigningService:
    """Sign email digests with the key held by a KeyStore."""

    def __init__(self, key_store: KeyStore, uppercase: bool = True) -> None:
        self.key_store = key_store
        self.uppercase = uppercase

    def handle(self, request: SignRequest) -> SignResponse:
        """Sign one request.

        Key errors propagate unchanged and are never retried here.
        """
        email_digest = digest(request.email)
        key = self.key_store.load()
        signature = sign_digest(key, email_digest)
        return SignResponse(signature=encode(signature, uppercase=self.uppercase))
