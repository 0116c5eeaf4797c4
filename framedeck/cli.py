# framedeck/cli.py

"""
Command-line entry point.

Usage:
    framedeck serve [--host HOST] [--port PORT] [--database-url URL] [--debug]
    framedeck seed [--file demos.json] [--reset] [--database-url URL]
    framedeck edit [--api-url URL]
"""

import argparse
import logging
import sys
from typing import List, Optional

from .exceptions import FramedeckError
from .core.app_factory import bootstrap_storage, serve
from .core.seed import load_seed_file, seed_demos
from .core.settings import load_settings
from .core.storage import FrameStore

logger = logging.getLogger("framedeck")


def setup_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(levelname)s:     %(name)s - %(message)s'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="framedeck",
        description="Browse, preview and edit HTML demo frames.",
    )
    parser.add_argument("--env-file", help="Path to a .env file (default: search for .env)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API and browser viewer")
    serve_parser.add_argument("--host", help="Interface to bind (default: HOST or 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, help="Port to listen on (default: PORT or 3001)")
    serve_parser.add_argument("--database-url", help="SQLAlchemy database URL")
    serve_parser.add_argument("--debug", action="store_true", default=None, help="Verbose logging, including SQL")

    seed_parser = subparsers.add_parser("seed", help="Create demos and frames")
    seed_parser.add_argument("--file", help="JSON seed document (default: built-in sample demos)")
    seed_parser.add_argument("--reset", action="store_true", help="Delete existing demos first")
    seed_parser.add_argument("--database-url", help="SQLAlchemy database URL")

    edit_parser = subparsers.add_parser("edit", help="Open the terminal editor")
    edit_parser.add_argument("--api-url", help="API base URL (default: FRAMEDECK_API_URL)")

    return parser


def _run_seed(args: argparse.Namespace) -> None:
    settings = load_settings(env_file=args.env_file, database_url=args.database_url)
    store = FrameStore.from_config(settings.database)
    try:
        bootstrap_storage(store)
        demos = load_seed_file(args.file) if args.file else None
        created = seed_demos(store, demos, reset=args.reset)
        for demo in created:
            print(f"{demo.id}  {demo.name}  ({len(demo.frames)} frames)")
    finally:
        store.dispose()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        if args.command == "serve":
            settings = load_settings(
                env_file=args.env_file,
                host=args.host,
                port=args.port,
                database_url=args.database_url,
                debug=args.debug,
            )
            setup_logging(settings.debug)
            serve(settings)
        elif args.command == "seed":
            setup_logging()
            _run_seed(args)
        elif args.command == "edit":
            settings = load_settings(env_file=args.env_file, api_url=args.api_url)
            # The curses screen owns the terminal; notices replace log output
            logging.basicConfig(level=logging.ERROR)
            from .tui import run_editor
            run_editor(settings.api_url)
    except FramedeckError as e:
        logger.error(f"Failed to start the application: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
