"""Delve CLI entry point.

Provides subcommands for generating a single dungeon level (ASCII map plus a
summary, or JSON) and for running the invariant checks over a batch of seeds.
Accepts configuration via flags and DELVE_* environment variables, with
optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

from delve import __version__
from delve import logging_utils
from delve.dungeon import Dungeon, DungeonConfig, DungeonConfigError, analyze
from delve.dungeon.debug_checks import issue_counts
from delve.dungeon.render import render_rows

_color_init()

# Glyph -> colour for the map; anything missing prints plain
GLYPH_COLORS = {
    "@": Fore.CYAN + Style.BRIGHT,
    ">": Fore.MAGENTA + Style.BRIGHT,
    "c": Fore.RED,
    "k": Fore.YELLOW + Style.BRIGHT,
    "$": Fore.YELLOW,
    "&": Fore.YELLOW,
    "+": Fore.GREEN,
    "L": Fore.RED + Style.BRIGHT,
    "^": Fore.MAGENTA,
}

DEFAULT_CHECK_SEEDS = [12345, 292372, 730727]


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Delve dungeon generator

    Generate a seeded dungeon level and print it as an ASCII map, or check
    invariants over a batch of seeds. Configuration can be provided via CLI
    flags or environment variables. If both are present, CLI flags take
    precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          DELVE_WIDTH       Grid width (default: 50)
          DELVE_HEIGHT      Grid height (default: 50)
          DELVE_SEED        Seed used when none is given on the command line
          DELVE_MAX_ROOMS   Upper bound on rooms (default: 15)
          DELVE_VERBOSE     Log per-stage diagnostics at info
          DELVE_LOG_LEVEL   debug | info | warn | error (default: info)
          DELVE_LOG_JSON    Emit log lines as JSON

        Examples:
          # Generate with a fixed seed
          python run.py generate --seed 12345

          # A larger map as JSON
          python run.py generate --seed 7 --width 80 --height 60 --json

          # Check invariants over a few seeds
          python run.py check 1 2 3
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
        "--log-level",
        dest="log_level",
        choices=sorted(logging_utils.LEVELS),
        default=None,
        help="Override DELVE_LOG_LEVEL",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Delve {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate one level and print it",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    gen_parser.add_argument("--seed", type=int, default=None, help="Seed (default: env DELVE_SEED or random)")
    gen_parser.add_argument("--width", type=int, default=None, help="Grid width")
    gen_parser.add_argument("--height", type=int, default=None, help="Grid height")
    gen_parser.add_argument("--json", action="store_true", help="Print the level summary as JSON")
    gen_parser.add_argument("--verbose", action="store_true", default=None, help="Log per-stage diagnostics")
    gen_parser.add_argument("--no-color", dest="no_color", action="store_true", help="Plain ASCII output")
    gen_parser.set_defaults(command="generate")

    check_parser = subparsers.add_parser(
        "check",
        help="Run invariant analysis over seeds",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    check_parser.add_argument("seeds", nargs="*", type=int, help="Seeds to check (default: a fixed list)")
    check_parser.add_argument("--width", type=int, default=None, help="Grid width")
    check_parser.add_argument("--height", type=int, default=None, help="Grid height")
    check_parser.set_defaults(command="check")

    if len(argv) == 0:
        argv = ["generate"]
    return parser.parse_args(argv)


def _colorize(rows: list[str]) -> list[str]:
    out = []
    for row in rows:
        out.append("".join(f"{GLYPH_COLORS[ch]}{ch}{Style.RESET_ALL}" if ch in GLYPH_COLORS else ch for ch in row))
    return out


def _summary_lines(dungeon: Dungeon, color: bool) -> list[str]:
    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if color else text

    def value(val) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if color else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if color else "=" * 40
    m = dungeon.metrics
    lines = [
        divider,
        f"  {label('Seed:'):12} {value(dungeon.seed)}",
        f"  {label('Size:'):12} {value(f'{dungeon.width}x{dungeon.height}')}",
        f"  {label('Rooms:'):12} {value(len(dungeon.rooms))}",
        f"  {label('Corridors:'):12} {value(len(dungeon.corridors))} ({m['corridors_loop']} loop)",
        f"  {label('Doors:'):12} {value(len(dungeon.doors))} ({m['doors_locked']} locked, {m['doors_trapped']} trapped)",
        f"  {label('Chests:'):12} {value(len(dungeon.chests))}",
        f"  {label('Creatures:'):12} {value(len(dungeon.creatures))}",
        f"  {label('Keys:'):12} {value(len(dungeon.keys))}",
        f"  {label('Runtime:'):12} {value(str(m['runtime_ms']) + ' ms')}",
    ]
    if dungeon.report.unplaced_keys:
        warn = f"{Fore.RED}[WARN]{Style.RESET_ALL}" if color else "[WARN]"
        ids = ", ".join(k.key_id for k in dungeon.report.unplaced_keys)
        lines.append(f"  {warn} unplaced keys: {ids}")
    lines.append(divider)
    return lines


def _build_config(args: argparse.Namespace) -> DungeonConfig:
    return DungeonConfig.from_env(
        width=getattr(args, "width", None),
        height=getattr(args, "height", None),
        verbose=getattr(args, "verbose", None),
    )


def cmd_generate(args: argparse.Namespace) -> int:
    dungeon = Dungeon(_build_config(args))
    dungeon.generate(args.seed)
    if args.json:
        print(json.dumps(dungeon.to_dict(), indent=2, default=str))
        return 0
    color = not args.no_color and sys.stdout.isatty()
    rows = render_rows(dungeon)
    if color:
        rows = _colorize(rows)
    print("\n".join(rows))
    print("\n".join(_summary_lines(dungeon, color)))
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    seeds = args.seeds or DEFAULT_CHECK_SEEDS
    dungeon = Dungeon(_build_config(args))
    failed = 0
    for seed in seeds:
        dungeon.generate(seed)
        counts = issue_counts(analyze(dungeon))
        bad = {k: v for k, v in counts.items() if v}
        status = "FAIL" if bad else "ok"
        detail = " ".join(f"{k}={v}" for k, v in bad.items())
        print(f"seed={seed} rooms={len(dungeon.rooms)} {status} {detail}".rstrip())
        failed += bool(bad)
    return 1 if failed else 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if args.command is None:
        args = parse_args(list(argv) + ["generate"])
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file, override=True)
    if args.log_level:
        logging_utils.set_level(args.log_level)
    try:
        if args.command == "check":
            return cmd_check(args)
        return cmd_generate(args)
    except DungeonConfigError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
