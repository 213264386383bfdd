"""CLI entrypoints for polyfills-loader commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import load_config
from .errors import ConfigError, PolyfillFileError
from .logging import configure_logging
from .resolver import resolve_polyfills
from .writer import build_manifest, write_polyfills


def _add_verbose_option(parser: argparse.ArgumentParser, *, on_subcommand: bool = False) -> None:
    # Subcommand parsers must not reset a -v given before the subcommand.
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if on_subcommand else False,
        help="Log each resolved polyfill and other debug details.",
    )


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    _add_verbose_option(parser, on_subcommand=True)
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Project directory or .polyfills.yml file (defaults to current directory).",
    )
    parser.add_argument(
        "--manifest",
        type=Path,
        default=None,
        help="Build manifest JSON describing modern and legacy outputs.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="polyfills-loader",
        description="Resolve browser polyfills with feature tests and content hashes.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Print the resolved polyfills as JSON.",
    )
    _add_common_options(resolve_parser)
    resolve_parser.add_argument(
        "--include-content",
        action="store_true",
        help="Include polyfill file contents in the JSON output.",
    )

    write_parser = subparsers.add_parser(
        "write",
        help="Write the resolved polyfill files and a polyfills.json manifest.",
    )
    _add_common_options(write_parser)
    write_parser.add_argument(
        "--out-dir",
        type=Path,
        required=True,
        help="Directory the polyfills directory is written into.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for polyfills-loader commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    try:
        cfg = load_config(Path(args.path), manifest_path=args.manifest)
        data = resolve_polyfills(cfg)
        if args.command == "write":
            written = write_polyfills(data, args.out_dir)
        else:
            written = []
    except ConfigError as exc:
        parser.exit(1, f"polyfills-loader: configuration error: {exc}\n")
    except PolyfillFileError as exc:
        parser.exit(1, f"polyfills-loader {args.command} failed: {exc}\n")

    if args.command == "resolve":
        payload = build_manifest(
            data, include_content=bool(getattr(args, "include_content", False))
        )
        print(json.dumps(payload, indent=2))
    elif args.command == "write":
        for path in written:
            print(_relativize(path))
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
