"""Delve CLI entry point.

Provides subcommands for running the dungeon generation web server, printing
a generated dungeon to the terminal and dumping the default settings.
Accepts configuration via flags and environment variables, with optional
.env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()
# Disable colors if output is not a real terminal (e.g., during pytest capture)
_COLOR_ENABLED = sys.stdout.isatty()

_HERE = os.path.dirname(os.path.abspath(__file__))


def _load_version() -> str:
    try:
        with open(os.path.join(_HERE, "VERSION"), "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()

TILE_COLORS = {
    "R": Fore.GREEN,
    "T": Fore.CYAN,
    "W": Fore.WHITE + Style.DIM,
    "D": Fore.YELLOW + Style.BRIGHT,
    "<": Fore.MAGENTA + Style.BRIGHT,
    ">": Fore.RED + Style.BRIGHT,
}


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Delve Dungeon Generator

    Run the JSON generation API, print a spine-seed dungeon to the terminal or
    dump the default generation settings. Configuration can be provided via
    CLI flags or environment variables. If both are present, CLI flags take
    precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                  Bind address for the web server (default: 0.0.0.0)
          PORT                  Port for the web server (default: 5000)
          DUNGEON_DISABLE_CACHE Set to 1 to regenerate on every request
          DELVE_LOG_LEVEL       debug | info | warn | error (default: info)

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Print a dungeon for a fixed seed
          python run.py generate --seed 42

          # Generate from exported settings and emit JSON
          python run.py generate --settings my-settings.json --json

          # Write the default settings to a file for editing
          python run.py settings --output my-settings.json
        """
    )

    parser = argparse.ArgumentParser(
        prog="Delve",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Delve Dungeon Generator {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    server_parser = subparsers.add_parser(
        "server",
        help="Run the generation web server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask JSON API server",
    )
    server_parser.add_argument(
        "--host",
        default=None,
        help="Host interface to bind (default: env HOST or 0.0.0.0)",
    )
    server_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: env PORT or 5000)",
    )
    server_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode (reloader and debugger)",
    )

    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate a dungeon and print it",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate one dungeon and print an ASCII preview (or JSON)",
    )
    gen_parser.add_argument(
        "--seed",
        default=None,
        help="Integer seed or any text (hashed); random when omitted",
    )
    gen_parser.add_argument(
        "--settings",
        dest="settings_path",
        default=None,
        help="Path to a settings file produced by `settings` or the export API",
    )
    gen_parser.add_argument(
        "--json",
        dest="as_json",
        action="store_true",
        help="Print the dungeon and analysis as JSON instead of a map",
    )

    settings_parser = subparsers.add_parser(
        "settings",
        help="Print the default generation settings",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Export the default settings as plain text",
    )
    settings_parser.add_argument(
        "--output",
        default=None,
        help="Write to this file instead of stdout",
    )

    if not argv:
        argv = ["server"]

    args = parser.parse_args(argv)
    return args


def _paint(ch: str) -> str:
    color = TILE_COLORS.get(ch)
    if not _COLOR_ENABLED or color is None:
        return ch
    return f"{color}{ch}{Style.RESET_ALL}"


def render_map(data) -> list[str]:
    """Rows of the dungeon with stairs marked: '<' entrance, '>' exit."""
    rows = [list(row) for row in data.rows()]
    ex, ey = data.entrance
    rows[ey][ex] = "<"
    if data.exit is not None:
        xx, xy = data.exit
        rows[xy][xx] = ">"
    return ["".join(_paint(ch) for ch in row) for row in rows]


def _load_settings(path):
    from delve.dungeon import DungeonSettings, import_settings

    if not path:
        return DungeonSettings()
    with open(path, "r", encoding="utf-8") as f:
        return import_settings(f.read())


def _cmd_generate(args) -> int:
    from delve.dungeon import DelveError, SettingsError, analyze, generate
    from delve.dungeon.generator import resolve_seed
    from delve.routes.seed_api import _coerce_seed

    try:
        settings = _load_settings(args.settings_path)
    except OSError as exc:
        print(f"[ERROR] Cannot read settings: {exc}", file=sys.stderr)
        return 1
    except SettingsError as exc:
        for err in exc.errors:
            print("ERROR:", err, file=sys.stderr)
        return 1

    seed = _coerce_seed(args.seed) if args.seed is not None else resolve_seed(settings, None)
    try:
        data = generate(settings, seed)
        analysis = analyze(data)
    except DelveError as exc:
        print(f"[ERROR] Generation failed (seed={seed}): {exc}", file=sys.stderr)
        return 1

    if args.as_json:
        print(json.dumps({"seed": seed, "dungeon": data.to_dict(), "analysis": analysis.to_dict()}))
        return 0

    for line in render_map(data):
        print(line)
    furthest = analysis.furthest_room_id or "-"
    print(f"seed={seed} rooms={len(data.rooms)} furthest={furthest} unreachable={len(analysis.unreachable_rooms)}")
    return 0


def _cmd_settings(args) -> int:
    from delve.dungeon import DungeonSettings, export_settings

    text = export_settings(DungeonSettings())
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        print(f"Wrote default settings to {args.output}")
    else:
        print(text)
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if args and getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()
    if mode == "generate":
        return _cmd_generate(args)
    if mode == "settings":
        return _cmd_settings(args)

    host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))
    debug = bool(getattr(args, "debug", False))

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoint only after environment is ready
    from delve.server import start_server

    title = (
        f"{Fore.CYAN}{Style.BRIGHT}Delve Dungeon Server{Style.RESET_ALL}"
        if _COLOR_ENABLED
        else "Delve Dungeon Server"
    )

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val: str | int) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    cache = "disabled" if os.getenv("DUNGEON_DISABLE_CACHE") == "1" else "enabled"
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Version:'):12} {value(__version__)}",
        f"  {label('Host:'):12} {value(host)}",
        f"  {label('Port:'):12} {value(port)}",
        f"  {label('Debug:'):12} {value('YES' if debug else 'NO')}",
        f"  {label('Cache:'):12} {value(cache)}",
        divider,
        "",
    ]
    print("\n".join(lines))

    from delve.logging_utils import log

    log.info(event="startup", mode=mode, host=host, port=port, debug=debug)
    start_server(host=host, port=port, debug=debug)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
