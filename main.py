"""Signing service entry point."""
import signal
import sys
import time

import logger
from config_loader import MissingKeyArgument, ServiceConfig, load_config
from errors import ConfigurationError
from key_store import KeyStore
from server import SigningServer
from signing_service import SigningService

USAGE = "usage: main.py <private-key-file>"


def build_server(config: ServiceConfig) -> SigningServer:
    """Wire the key store, service and transport for ``config``."""
    key_store = KeyStore(
        config.private_key_file,
        strict=config.strict_key_parsing,
        cache=config.key_cache,
    )
    service = SigningService(key_store, uppercase=config.uppercase_signatures)
    return SigningServer(service, config)


def main(argv=None, environ=None) -> int:
    argv = sys.argv if argv is None else argv
    try:
        config = load_config(argv, environ)
    except MissingKeyArgument as exc:
        print(f"Error: {exc}", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return 2
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    logger.configure(config.log_level, config.log_file)
    log = logger.get_logger(__name__)
    log.info("Private key found: %s", config.private_key_file)

    server = build_server(config)
    running = True

    def handle_stop(sig, frame):
        nonlocal running
        running = False

    def handle_reload(sig, frame):
        server.service.key_store.invalidate()

    signal.signal(signal.SIGINT, handle_stop)
    signal.signal(signal.SIGTERM, handle_stop)
    signal.signal(signal.SIGHUP, handle_reload)

    server.start()
    while running and server.is_alive():
        time.sleep(1)

    if running:
        log.error("Server thread exited unexpectedly")
        return 1
    log.info('Shutting down')
    return 0


if __name__ == '__main__':
    sys.exit(main())
