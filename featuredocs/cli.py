"""CLI entrypoints for featuredocs commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from .analyzers.base import read_source
from .analyzers.component import ComponentAnalyzer
from .analyzers.ui_elements import UIElementDetector
from .config import ConfigError, load_config
from .feature_scanner import FeatureScanner, locate_features_root
from .logging import configure_logging


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_quiet_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Only log warnings and errors.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="featuredocs",
        description="Describe front-end features (components, hooks, UI elements) as JSON.",
    )
    _add_verbose_option(parser)
    _add_quiet_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser(
        "scan",
        help="Scan every feature directory under a project.",
    )
    _add_verbose_option(scan_parser, suppress_default=True)
    _add_quiet_option(scan_parser, suppress_default=True)
    scan_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    scan_parser.add_argument(
        "--features-dir",
        help="Features directory relative to the project root (overrides .featuredocs.yml).",
    )
    scan_parser.add_argument(
        "--changed",
        nargs="+",
        metavar="FILE",
        help="Only scan features touched by these changed files.",
    )
    scan_parser.add_argument(
        "-o",
        "--output",
        help="Write the JSON result to this file instead of stdout.",
    )

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze a single component file.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    _add_quiet_option(analyze_parser, suppress_default=True)
    analyze_parser.add_argument("file", help="Component source file to analyze.")
    analyze_parser.add_argument(
        "-o",
        "--output",
        help="Write the JSON result to this file instead of stdout.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for featuredocs commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet))

    if args.command == "scan":
        project_root = Path(args.path).expanduser()
        try:
            config = load_config(project_root)
        except ConfigError as exc:
            parser.exit(1, f"featuredocs scan failed: {exc}\n")
        if args.features_dir:
            config.features_dir = args.features_dir
        features_root = locate_features_root(project_root, config)
        features = FeatureScanner(config).scan_features(features_root, args.changed)
        _emit([feature.to_dict() for feature in features], args.output)
    elif args.command == "analyze":
        path = Path(args.file).expanduser()
        content = read_source(path)
        if content is None:
            parser.exit(1, f"Unable to read {path}\n")
        component = ComponentAnalyzer().analyze_source(content, path)
        if component is None:
            parser.exit(1, f"No component found in {path}\n")
        component.ui_elements = UIElementDetector().detect_in_source(content, component)
        _emit(component.to_dict(), args.output)


def _emit(payload: Any, output: str | None) -> None:
    text = json.dumps(payload, indent=2)
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
    else:
        sys.stdout.write(text + "\n")


if __name__ == "__main__":
    main(sys.argv[1:])
