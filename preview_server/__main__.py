from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

import uvicorn

from .app import DEFAULT_HOST, DEFAULT_PORT, ServerConfig, create_app

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Post preview FastAPI server")
    parser.add_argument("--host", default=DEFAULT_HOST, help="Host interface to bind to")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Port to listen on")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML settings file (environment variables take precedence)",
    )
    parser.add_argument("--log-file", type=Path, default=None, help="Path to the server log file")
    parser.add_argument("--log-level", default="info", help="Log level for the server and uvicorn")
    return parser.parse_args(argv)


def configure_logging(level: str, log_path: Optional[Path] = None) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, handlers=handlers, force=True)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    config = ServerConfig(
        host=args.host,
        port=args.port,
        config_path=args.config,
        log_path=args.log_file,
        log_level=args.log_level,
    )
    configure_logging(config.log_level, config.log_path)
    app = create_app(config)
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":  # pragma: no cover
    main()
