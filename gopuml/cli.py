"""CLI entrypoint for gopuml."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from .config import (
    DEFAULT_OUTPUT,
    AnalysisConfig,
    ConfigError,
    load_config,
    resolve_hide_path,
    resolve_path,
)
from .logging import configure_logging, log_diagnostic_summary
from .orchestrator import Orchestrator
from .postproc.render import parse_command


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gopuml",
        description="Generate PlantUML class diagrams from a Go source tree.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=False,
        help="Only report warnings and errors.",
    )
    parser.add_argument("--log-file", help="Also write the log to this file.")
    parser.add_argument(
        "--config",
        help="Path to a .gopuml.yml file (defaults to the one in the code directory).",
    )
    parser.add_argument("-c", "--codedir", help="Code directory to scan.")
    parser.add_argument(
        "-g",
        "--gopath",
        help="GOPATH directory; package paths are taken relative to its src/ folder.",
    )
    parser.add_argument("--vendor", help="Vendor directory (defaults to <codedir>/vendor).")
    parser.add_argument(
        "-o",
        "--outputfile",
        dest="output",
        help=f"File that receives the diagram (defaults to {DEFAULT_OUTPUT}).",
    )
    parser.add_argument(
        "-i",
        "--ignoredir",
        dest="ignore_dirs",
        action="append",
        default=[],
        metavar="DIR",
        help="Directory to exclude from scanning; relative to the code directory.",
    )
    parser.add_argument(
        "--ii",
        dest="ignore_implements",
        action="append",
        default=[],
        metavar="NAME",
        help="Interface whose implementation edges are not drawn.",
    )
    parser.add_argument(
        "--include-file",
        action="append",
        default=[],
        metavar="NAME",
        help="Only analyse files whose name matches.",
    )
    parser.add_argument(
        "--ignore-file",
        action="append",
        default=[],
        metavar="NAME",
        help="Skip files whose name matches.",
    )
    parser.add_argument(
        "--include-type",
        action="append",
        default=[],
        metavar="NAME",
        help="Only render the named types.",
    )
    parser.add_argument(
        "--ignore-type",
        action="append",
        default=[],
        metavar="NAME",
        help="Do not render the named types.",
    )
    parser.add_argument(
        "--hide-path",
        action="append",
        default=[],
        metavar="PATH",
        help="Do not render entities declared under this path or in this file.",
    )
    parser.add_argument("--tag", help="Update only the tagged region of the output file.")
    parser.add_argument(
        "--render-cmd",
        help="Command run with the output file appended, e.g. 'plantuml -tsvg'.",
    )
    return parser


def build_config(args: argparse.Namespace, cwd: Path | None = None) -> AnalysisConfig:
    """Load the YAML configuration and layer command-line values over it."""
    cwd = cwd or Path.cwd()
    if args.config:
        config = load_config(resolve_path(args.config, cwd))
    else:
        config = load_config(resolve_path(args.codedir or ".", cwd))

    if args.codedir:
        config.source_root = resolve_path(args.codedir, cwd)
    if args.gopath:
        config.primary_root = resolve_path(args.gopath, cwd) / "src"
    elif config.primary_root is None:
        config.primary_root = _primary_from_environment(config.source_root)
    if args.vendor:
        config.vendor_root = resolve_path(args.vendor, cwd)
    if args.output:
        config.output = resolve_path(args.output, cwd)
    elif not config.output.is_absolute():
        config.output = resolve_path(config.output, cwd)

    config.exclude_dirs.extend(resolve_path(item, config.source_root) for item in args.ignore_dirs)
    config.exclude_implements.extend(args.ignore_implements)
    config.files.include.extend(args.include_file)
    config.files.exclude.extend(args.ignore_file)
    config.types.include.extend(args.include_type)
    config.types.exclude.extend(args.ignore_type)
    config.hide_paths.extend(resolve_hide_path(item, cwd) for item in args.hide_path)
    if args.tag is not None:
        config.tag = args.tag
    if args.render_cmd:
        config.render.command = parse_command(args.render_cmd)
    return config


def _primary_from_environment(source_root: Path) -> Path | None:
    gopath = os.environ.get("GOPATH")
    if not gopath:
        return None
    for entry in gopath.split(os.pathsep):
        if not entry:
            continue
        candidate = Path(entry).expanduser().resolve() / "src"
        if source_root.is_relative_to(candidate):
            return candidate
    return None


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for gopuml."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        quiet=bool(args.quiet),
        log_file=Path(args.log_file) if args.log_file else None,
    )

    try:
        config = build_config(args)
        result = Orchestrator().run(config)
    except ConfigError as exc:
        parser.exit(2, f"gopuml: {exc}\n")
    except OSError as exc:
        parser.exit(1, f"gopuml failed: {exc}\nRun with --verbose for more details.\n")

    log_diagnostic_summary(result.diagnostics)
    model = result.model
    edges = len(model.dependencies) + len(model.implementations)
    print(
        f"Diagram written to {_relativize(result.path)} "
        f"({result.document.mode}; {len(model.table)} entities, {edges} relations)"
    )
    if result.render is not None:
        print(" ".join(result.render.command))
        if result.render.output:
            print(result.render.output, end="")
        if not result.render.ok:
            print(result.render.error, end="", file=sys.stderr)
            parser.exit(1)


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
