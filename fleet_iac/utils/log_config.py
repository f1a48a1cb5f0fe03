"""
Logger configuration for the Pulumi program.

Routes stdlib logging from config loading and validation to stderr, which
the Pulumi engine shows alongside its own diagnostics.

Dependencies: logging (stdlib)
System role: Centralized logging configuration
"""

import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    """Configure Python logging with timestamp and structured format."""
    # Remove any existing handlers to avoid duplicates
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger.setLevel(level.upper())
    root_logger.addHandler(handler)

    # Reduce noise from the engine's RPC layer
    logging.getLogger("grpc").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
