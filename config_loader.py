# /signer/config_loader.py

"""
Module: config_loader.py
Purpose: Build the service configuration from arguments and environment.
Consumes:
- argv[1]: path to the private key file (required)
- BIND_TO, PORT, LOG_LEVEL, ORIGIN, KEY_PARSING, KEY_CACHE,
  SIGNATURE_CASE, LOG_FILE
Provides: An immutable ServiceConfig, read once at startup.
Failure Mode: Raises ConfigurationError; main.py turns it into a non-zero exit.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence, Tuple

from errors import ConfigurationError

DEFAULT_BIND_TO = "0.0.0.0"
DEFAULT_PORT = 8888
DEFAULT_LOG_LEVEL = "info"
ANY_ORIGIN = "*"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"", "0", "false", "no", "off"}


@dataclass(frozen=True)
class ServiceConfig:
    private_key_file: Path
    bind_to: str = DEFAULT_BIND_TO
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL
    allowed_origins: Tuple[str, ...] = (ANY_ORIGIN,)
    strict_key_parsing: bool = False
    key_cache: bool = False
    uppercase_signatures: bool = True
    log_file: Optional[Path] = None

    @property
    def any_origin(self) -> bool:
        return self.allowed_origins == (ANY_ORIGIN,)


class MissingKeyArgument(ConfigurationError):
    """No private key path was given on the command line."""


def parse_origins(value: str) -> Tuple[str, ...]:
    """Split a comma-separated origin list, trimming blanks."""
    origins = tuple(part.strip() for part in value.split(",") if part.strip())
    if not origins:
        raise ConfigurationError("ORIGIN must name at least one origin")
    return origins


def _get_port(env: Mapping[str, str]) -> int:
    raw = env.get("PORT", str(DEFAULT_PORT))
    try:
        port = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"PORT must be an integer, got {raw!r}") from exc
    if not 0 < port < 65536:
        raise ConfigurationError(f"PORT out of range: {port}")
    return port


def _get_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigurationError(f"{key} must be a boolean, got {raw!r}")


def _get_choice(env: Mapping[str, str], key: str, choices: Sequence[str], default: str) -> str:
    value = env.get(key, default).strip().lower()
    if value not in choices:
        raise ConfigurationError(f"{key} must be one of {', '.join(choices)}, got {value!r}")
    return value


def load_config(argv: Sequence[str], environ: Optional[Mapping[str, str]] = None) -> ServiceConfig:
    """
    Build the configuration and check that the key file exists.
    Args:
        argv: Process arguments, program name first
        environ: Environment mapping, defaults to os.environ
    """
    env = os.environ if environ is None else environ
    if len(argv) < 2 or not argv[1]:
        raise MissingKeyArgument("Private key file argument is required")
    key_path = Path(argv[1]).expanduser()
    if not key_path.is_file():
        raise ConfigurationError(f"Private key not found at {key_path}")

    log_file = env.get("LOG_FILE")
    return ServiceConfig(
        private_key_file=key_path,
        bind_to=env.get("BIND_TO", DEFAULT_BIND_TO),
        port=_get_port(env),
        log_level=env.get("LOG_LEVEL", DEFAULT_LOG_LEVEL),
        allowed_origins=parse_origins(env.get("ORIGIN", ANY_ORIGIN)),
        strict_key_parsing=_get_choice(env, "KEY_PARSING", ("relaxed", "strict"), "relaxed") == "strict",
        key_cache=_get_bool(env, "KEY_CACHE", False),
        uppercase_signatures=_get_choice(env, "SIGNATURE_CASE", ("upper", "preserve"), "upper") == "upper",
        log_file=Path(log_file) if log_file else None,
    )
