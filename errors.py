"""Error types raised by the signing service."""


class SigningError(Exception):
    """Base class for all signing service errors."""


class ConfigurationError(SigningError):
    """Startup arguments or environment are missing or invalid."""


class KeyFileUnreadable(SigningError):
    """The private key file is missing or could not be read."""


class KeyFileMalformed(SigningError):
    """The private key file is not a usable Ed25519 PKCS#8 key."""


class MalformedRequest(SigningError):
    """The request body is not a JSON object with a string ``email``."""
