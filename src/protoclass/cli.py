"""
Command-line interface for protoclass.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import load_config
from .driver import convert_tree
from .errors import ProtoclassError
from .migration import convert_source
from .syntax import is_valid_source
from .version import __version__


def build_cli_parser() -> argparse.ArgumentParser:
    cli = argparse.ArgumentParser(prog="protoclass", description="Rewrite prototype-style JavaScript into classes")
    cli.add_argument(
        "--version",
        action="version",
        version=f"protoclass {__version__} (Python {sys.version.split()[0]})",
    )
    cli.add_argument("--verbose", "-v", action="store_true", help="Log pattern decisions to stderr")
    sub = cli.add_subparsers(dest="command", required=True)

    convert_cmd = sub.add_parser("convert", help="Convert every .js file under a source tree")
    convert_cmd.add_argument("source", type=Path, nargs="?", help="Source root (default: PROTOCLASS_SRC)")
    convert_cmd.add_argument("dest", type=Path, nargs="?", help="Destination root (default: PROTOCLASS_DEST)")
    convert_cmd.add_argument("--filter", dest="pattern", help="Only convert files matching this glob, e.g. 'math/*.js'")
    convert_cmd.add_argument("--overrides", type=Path, help="Directory of files copied verbatim over the output")
    convert_cmd.add_argument("--dry-run", action="store_true", help="Show what would change (default)")
    convert_cmd.add_argument("--write", action="store_true", help="Write converted files")
    convert_cmd.add_argument("--no-backup", action="store_true", help="Skip .bak backups when converting in place")

    preview_cmd = sub.add_parser("preview", help="Print the converted form of one file")
    preview_cmd.add_argument("file", type=Path)
    preview_cmd.add_argument("--example", action="store_true", help="Treat the file as example code")
    preview_cmd.add_argument("--summary", action="store_true", help="Print the change summary as JSON instead")

    check_cmd = sub.add_parser("check", help="Check that a file parses")
    check_cmd.add_argument("file", type=Path)

    serve_cmd = sub.add_parser("serve", help="Start the conversion API")
    serve_cmd.add_argument("--host", default="127.0.0.1")
    serve_cmd.add_argument("--port", type=int, default=8000)
    serve_cmd.add_argument("--dry-run", action="store_true", help="Build app but do not start server")
    return cli


def main(argv: list[str] | None = None) -> None:
    cli = build_cli_parser()
    args = cli.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s %(message)s")

    config = load_config()

    if args.command == "convert":
        source_root = args.source or config.source_root
        dest_root = args.dest or config.dest_root or source_root
        if source_root is None:
            raise SystemExit("No source root given (pass SOURCE or set PROTOCLASS_SRC).")
        if not source_root.is_dir():
            print(f"Path '{source_root}' does not exist.", file=sys.stderr)
            return
        report = convert_tree(
            source_root,
            dest_root,
            config=config,
            pattern=args.pattern,
            overrides_root=args.overrides or config.overrides_root,
            write=args.write,
            backup=not args.no_backup,
        )
        for file_report in report.files:
            if file_report.ok:
                print(f"✔ {file_report.path}")
            else:
                print(f"! {file_report.path}")
                print(f"  {file_report.error}")
        if args.write:
            print(f"Converted {len(report.converted)} file(s), {len(report.failed)} failed.")
            for name in report.overrides:
                print(f"Copied override {name}")
        else:
            print("Dry run. Re-run with --write to apply changes.")
        return

    if args.command == "preview":
        name = args.file.as_posix()
        try:
            result = convert_source(
                args.file.read_text(encoding="utf-8"),
                path=name,
                is_example=args.example or config.is_example(name),
                is_class_name=config.class_name_predicate(),
            )
        except ProtoclassError as exc:
            raise SystemExit(f"! {name}: {exc}") from exc
        if args.summary:
            print(json.dumps(result.summary(), indent=2))
        else:
            sys.stdout.write(result.source)
        return

    if args.command == "check":
        if is_valid_source(args.file.read_text(encoding="utf-8")):
            print(f"✔ {args.file}")
            return
        print(f"! {args.file}")
        raise SystemExit(1)

    if args.command == "serve":
        try:
            from .server import create_app
        except Exception as exc:  # pragma: no cover - load-time guard
            raise SystemExit(f"Failed to import server: {exc}") from exc
        app = create_app()
        if args.dry_run:
            print(
                json.dumps(
                    {"status": "ready", "host": args.host, "port": args.port},
                    indent=2,
                )
            )
            return
        try:
            import uvicorn
        except ImportError as exc:  # pragma: no cover - runtime check
            raise SystemExit("uvicorn is required to run the server") from exc
        uvicorn.run(app, host=args.host, port=args.port)
        return


if __name__ == "__main__":  # pragma: no cover
    main()
