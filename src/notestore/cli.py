"""Command line entry point: run the server or talk to one."""

import argparse
import json
import logging
import platform
import sys
from dataclasses import asdict
from pathlib import Path

from . import __version__
from .client import DEFAULT_URL, NotesClient, NotesClientError
from .config import NotesConfig, load_config
from .core.model import Note

logger = logging.getLogger(__name__)


def parse_address(address: str) -> tuple[str, int]:
    """
    Split a listen address into host and port.

    "host:port" and "[v6addr]:port" are accepted; ":port" binds every
    interface.
    """
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"Invalid listen address '{address}', expected host:port")
    host = host.strip("[]") or "0.0.0.0"
    port_num = int(port)
    if not 0 < port_num < 65536:
        raise ValueError(f"Port out of range in '{address}'")
    return host, port_num


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def version_string() -> str:
    return "\n".join([
        f"notestore {__version__}",
        f"python {platform.python_version()}",
        f"platform {platform.platform()}",
    ])


def _print_note(note: Note, as_json: bool) -> None:
    if as_json:
        print(json.dumps(asdict(note)))
    else:
        print(f"{note.id}\t{note.title}\t{note.content}")


def cmd_serve(args: argparse.Namespace, config: NotesConfig) -> int:
    """Start the notes server and block until it is stopped."""
    import uvicorn

    from .api.app import create_app
    from .runtime import build_runtime

    host, port = parse_address(args.address)

    rt = build_runtime(config, dsn=args.dsn)
    app = create_app(rt)

    logger.info("Starting server on %s:%s", host, port)
    # uvicorn stops accepting on SIGINT/SIGTERM and drains in-flight requests
    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=config.logging.level.lower(),
        timeout_graceful_shutdown=config.server.graceful_timeout,
    )
    logger.info("Server stopped")
    return 0


def cmd_create(args: argparse.Namespace, client: NotesClient) -> int:
    note_id = client.create_note(args.title, args.content)
    print(note_id)
    return 0


def cmd_get(args: argparse.Namespace, client: NotesClient) -> int:
    _print_note(client.get_note(args.id), args.json)
    return 0


def cmd_update(args: argparse.Namespace, client: NotesClient) -> int:
    client.update_note(args.id, args.title, args.content)
    return 0


def cmd_delete(args: argparse.Namespace, client: NotesClient) -> int:
    client.delete_note(args.id)
    return 0


def cmd_search(args: argparse.Namespace, client: NotesClient) -> int:
    for note in client.search_notes(args.pattern):
        _print_note(note, args.json)
    return 0


CLIENT_COMMANDS = {
    "create": cmd_create,
    "get": cmd_get,
    "update": cmd_update,
    "delete": cmd_delete,
    "search": cmd_search,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="notestore", description="notestore server and client")
    parser.add_argument(
        "--version", action="store_true", help="Print version information and exit"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: cwd/notestore.toml)",
    )
    parser.add_argument(
        "--log-level", default=None, help="Logging level (overrides config)"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )

    subparsers = parser.add_subparsers(dest="cmd")

    # serve command
    parser_serve = subparsers.add_parser("serve", help="Run the notes server")
    parser_serve.add_argument("address", help="Listen address host:port")
    parser_serve.add_argument(
        "dsn", nargs="?", default=None,
        help="Database connection string (omit for the in-memory store)",
    )

    # client commands
    client_parent = argparse.ArgumentParser(add_help=False)
    client_parent.add_argument(
        "--url", default=DEFAULT_URL, help=f"Server URL (default: {DEFAULT_URL})"
    )

    parser_create = subparsers.add_parser("create", parents=[client_parent], help="Create a note")
    parser_create.add_argument("title")
    parser_create.add_argument("content")

    parser_get = subparsers.add_parser("get", parents=[client_parent], help="Print a note")
    parser_get.add_argument("id", type=int)

    parser_update = subparsers.add_parser("update", parents=[client_parent], help="Update a note")
    parser_update.add_argument("id", type=int)
    parser_update.add_argument("title")
    parser_update.add_argument("content")

    parser_delete = subparsers.add_parser("delete", parents=[client_parent], help="Delete a note")
    parser_delete.add_argument("id", type=int)

    parser_search = subparsers.add_parser("search", parents=[client_parent], help="Search notes")
    parser_search.add_argument("pattern")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(version_string())
        sys.exit(0)
    if not args.cmd:
        parser.print_usage(sys.stderr)
        sys.exit(2)

    config = load_config(config_path=args.config)
    if args.log_level:
        config.logging.level = args.log_level.upper()
    configure_logging(config.logging.level)

    try:
        if args.cmd == "serve":
            exit_code = cmd_serve(args, config)
        else:
            handler = CLIENT_COMMANDS[args.cmd]
            with NotesClient(base_url=args.url) as client:
                exit_code = handler(args, client)
    except NotesClientError as e:
        print(f"Error: {e.message} ({e.code})", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
