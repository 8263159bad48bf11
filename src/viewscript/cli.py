"""Command-line interface for viewscript."""

from __future__ import annotations

import argparse
import sys
import time
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from viewscript.builtins import RuntimeNames
from viewscript.errors import ParseError

CONFIG_NAME = "viewscript.toml"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    runtime: RuntimeNames
    watch: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="viewscript",
        description="Compile JavaScript with embedded view tags",
    )
    p.add_argument("input", help="Input source file")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument(
        "--components",
        metavar="EXPR",
        help="Namespace holding the element constructors",
    )
    p.add_argument(
        "--normalize-children",
        metavar="EXPR",
        help="Function that normalizes interpolated children",
    )
    p.add_argument("--merge", metavar="EXPR", help="Function that merges props objects")
    p.add_argument("--watch", action="store_true", help="Watch for changes and recompile")
    p.add_argument("--debug", action="store_true", help="Dump the parse tree to stderr")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_runtime(config: dict[str, Any], args: argparse.Namespace) -> RuntimeNames:
    """Merge the [runtime] config table and CLI flags over the defaults.

    Precedence: defaults < config file < CLI flags.
    """
    names: dict[str, str] = {}
    known = {f.name for f in fields(RuntimeNames)}

    cfg_runtime = config.get("runtime")
    if cfg_runtime is not None and not isinstance(cfg_runtime, dict):
        raise argparse.ArgumentTypeError("[runtime] must be a table")
    for key, value in (cfg_runtime or {}).items():
        if key not in known:
            raise argparse.ArgumentTypeError(f"unknown runtime name in config: {key}")
        if not isinstance(value, str) or not value:
            raise argparse.ArgumentTypeError(f"runtime.{key} must be a non-empty string")
        names[key] = value

    for key in known:
        flag = getattr(args, key, None)
        if flag:
            names[key] = flag

    return RuntimeNames(**names)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions."""
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        runtime=resolve_runtime(config, args),
        watch=args.watch,
        debug=args.debug,
    )


def compile_file(options: CliOptions) -> str:
    """Read, parse and generate a source file."""
    from viewscript import generate_tree, parse_tree
    from viewscript.debug import dump_tree

    source = options.input_file.read_text(encoding="utf-8")
    tree = parse_tree(source)

    if options.debug:
        dump_tree(tree)

    return generate_tree(tree, source, options.runtime)


def _write(options: CliOptions, output: str) -> None:
    if options.output_file:
        options.output_file.write_text(output, encoding="utf-8")
    else:
        sys.stdout.write(output)
        sys.stdout.flush()


def watch_loop(options: CliOptions) -> None:
    """Poll input file for changes, recompile on each modification."""
    last_mtime = 0.0
    print(f"Watching {options.input_file} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtime = options.input_file.stat().st_mtime
            except OSError:
                time.sleep(0.5)
                continue
            if mtime != last_mtime:
                last_mtime = mtime
                try:
                    _write(options, compile_file(options))
                    print(f"Compiled {options.input_file}", file=sys.stderr)
                except ParseError as exc:
                    print(exc.format(str(options.input_file)), file=sys.stderr)
                except (OSError, UnicodeDecodeError) as exc:
                    print(f"error: {exc}", file=sys.stderr)
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except tomllib.TOMLDecodeError as exc:
        print(f"error: invalid config file: {exc}", file=sys.stderr)
        return 2
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: cannot read config file: {exc}", file=sys.stderr)
        return 2

    if options.watch:
        watch_loop(options)
        return 0

    try:
        _write(options, compile_file(options))
    except ParseError as exc:
        print(exc.format(str(options.input_file)), file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    return 0
