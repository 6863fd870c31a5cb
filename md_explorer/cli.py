#!/usr/bin/env python3
import argparse
import logging
import os
import sys
from pathlib import Path

from .app import create_app
from .resolver import ServerRoot

log = logging.getLogger("md_explorer")

DEFAULT_ROOT = "content"
DEFAULT_ADDR = "0.0.0.0:3000"
LOG_ENV = "MD_EXPLORER_LOG"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def bind_address(value: str):
    """Parse HOST:PORT into a (host, port) pair for argparse."""
    host, sep, port = value.rpartition(":")
    if not sep or not host:
        raise argparse.ArgumentTypeError(f"expected HOST:PORT, got {value!r}")
    try:
        port_num = int(port)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port in {value!r}")
    if not 0 <= port_num <= 65535:
        raise argparse.ArgumentTypeError(f"port out of range in {value!r}")
    return host.strip("[]"), port_num


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="md-explorer",
        description="Markdown File Explorer Web Server",
    )
    parser.add_argument(
        "-r", "--root", type=Path, default=Path(DEFAULT_ROOT),
        help=f"Root directory to serve (default: ./{DEFAULT_ROOT})",
    )
    parser.add_argument(
        "-a", "--addr", type=bind_address, default=DEFAULT_ADDR,
        help=f"Address to bind (default: {DEFAULT_ADDR})",
    )
    parser.add_argument(
        "--log-level", default=None,
        help=f"Log level (default: ${LOG_ENV} or INFO)",
    )
    return parser


def setup_logging(level=None):
    level = (level or os.environ.get(LOG_ENV) or "INFO").upper()
    if not isinstance(logging.getLevelName(level), int):
        level = "INFO"
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)


def prepare_root(root: Path) -> ServerRoot:
    """Create the root if missing and canonicalize it. Exits on failure."""
    try:
        root.mkdir(parents=True, exist_ok=True)
        return ServerRoot.from_path(root)
    except OSError as e:
        log.error("Cannot use root directory '%s': %s", root, e)
        sys.exit(1)


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    server_root = prepare_root(args.root)
    host, port = args.addr

    log.info("Serving root: %s", server_root.canonical)
    log.info("Open: http://%s:%d/", host, port)

    app = create_app(server_root)
    app.run(host=host, port=port, threaded=True)


if __name__ == "__main__":
    main()
