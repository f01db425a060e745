# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Command-line entry point for the file browser service."""

import argparse
import logging
import signal
import sys
import threading
from pathlib import Path

from bucketbrowser.config import AppConfig
from bucketbrowser.logging import configure_logging
from bucketbrowser.storage import FileManager, ObjectStoreClient
from bucketbrowser.web import WebServer


logger = logging.getLogger(__name__)


class BrowserService:
    """Wires configuration, storage client, file manager and web server."""

    def __init__(
        self,
        config: AppConfig,
        *,
        host: str | None = None,
        port: int | None = None,
    ) -> None:
        storage = config.storage
        self.config = config
        self.client = ObjectStoreClient(
            storage.bucket,
            storage.region,
            storage.credential,
            endpoint_url=storage.endpoint_url,
            force_path_style=storage.force_path_style,
        )
        self.manager = FileManager(
            self.client,
            max_collision_attempts=config.max_collision_attempts,
            download_expiry=config.download_expiry,
        )
        self.server = WebServer(
            self.manager,
            host or config.server.host,
            port or config.server.port,
            folders=config.folders,
            max_upload_bytes=config.server.max_upload_bytes,
            download_expiry=config.download_expiry,
        )
        self._stop_event = threading.Event()

    def start(self) -> None:
        """Start serving and block until ``stop()`` is called."""
        self.server.start()
        self._stop_event.wait()

    def stop(self) -> None:
        """Stop the server and release the HTTP client.  Idempotent."""
        if self._stop_event.is_set():
            return
        self._stop_event.set()
        self.server.stop()
        self.client.close()


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Args:
        argv: Command-line arguments. If None, uses sys.argv[1:].

    Returns:
        Exit code (0=success, 1=config error, 2=startup, 3=runtime error).
    """
    parser = argparse.ArgumentParser(
        description="Bucket Browser",
        epilog="Serves a web UI for managing files in an S3 bucket.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        metavar="PATH",
        help=(
            "Path to bucketbrowser.yaml config file"
            " (default: ~/.config/bucketbrowser/bucketbrowser.yaml,"
            " falling back to AWS_* environment variables)"
        ),
    )
    parser.add_argument("--host", default=None, help="Override bind address")
    parser.add_argument(
        "--port", type=int, default=None, help="Override listen port"
    )
    args = parser.parse_args(argv)

    configure_logging(
        level=logging.DEBUG if args.debug else logging.INFO,
        add_secret_filter=True,
    )

    logger.info("Bucket browser starting...")

    try:
        config = AppConfig.load(config_path=args.config)
    except Exception as e:
        logger.critical("Configuration error: %s", e)
        return 1

    try:
        service = BrowserService(config, host=args.host, port=args.port)
    except Exception as e:
        logger.exception("Failed to initialize service: %s", e)
        return 2

    def shutdown_handler(signum: int, frame: object) -> None:
        """Handle shutdown signals."""
        logger.info("Received signal %d, shutting down...", signum)
        service.stop()

    signal.signal(signal.SIGINT, shutdown_handler)
    signal.signal(signal.SIGTERM, shutdown_handler)

    try:
        service.start()
        return 0
    except OSError as e:
        logger.error("Failed to start server: %s", e)
        return 2
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0
    except Exception as e:
        logger.exception("Fatal runtime error: %s", e)
        return 3
    finally:
        service.stop()


if __name__ == "__main__":
    sys.exit(main())
