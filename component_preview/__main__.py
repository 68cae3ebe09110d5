from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

import uvicorn

from . import settings
from .app import DEFAULT_HOST, DEFAULT_PORT, ServerConfig, create_app, load_preview_config
from .config import ConfigError
from .previews import Preview, PreviewError

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Component preview server")
    parser.add_argument("--host", default=DEFAULT_HOST, help="Host interface to bind to")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Port to listen on")
    parser.add_argument("--config", type=Path, default=None, help="Path to the YAML preview configuration")
    parser.add_argument(
        "--preview-path",
        dest="preview_paths",
        type=Path,
        action="append",
        default=[],
        help="Directory searched for previews (repeatable, overrides the configuration)",
    )
    parser.add_argument("--static-dir", type=Path, default=None, help="Directory served under /static")
    parser.add_argument("--watch-config", action="store_true", help="Reload the configuration when it changes")
    parser.add_argument("--list", action="store_true", help="Print discovered previews and exit")
    parser.add_argument("--log-file", type=Path, default=None, help="Path to the server log file")
    parser.add_argument("--log-level", default="info", help="Log level")
    return parser.parse_args(argv)


def configure_logging(level: str, log_file: Path | None = None) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, handlers=handlers)


def list_previews(config: ServerConfig) -> int:
    _, preview_config = load_preview_config(config)
    settings.configure(preview_config)
    try:
        previews = sorted(Preview.all(), key=lambda item: item.preview_name())
    except PreviewError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    if not previews:
        paths = ", ".join(str(path) for path in preview_config.preview_paths)
        print(f"No previews found in {paths}")
        return 0
    for preview in previews:
        print(preview.preview_name())
        for example in preview.examples():
            print(f"  {example}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level, args.log_file)
    config = ServerConfig(
        host=args.host,
        port=args.port,
        config_path=args.config,
        preview_paths=args.preview_paths,
        static_dir=args.static_dir,
        watch_config=args.watch_config,
        log_path=args.log_file,
    )
    try:
        if args.list:
            return list_previews(config)
        app = create_app(config)
    except ConfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2
    uvicorn.run(app, host=config.host, port=config.port, log_level=args.log_level.lower())
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
