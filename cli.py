#!/usr/bin/env python3
import argparse
import sys

from bundledupes.errors import BundleDupesError
from bundledupes.orchestrator import run_once


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Find packages bundled in more than one version")
    parser.add_argument("--config", help="Path to YAML config")
    parser.add_argument("--root", help="Project root holding node_modules (env: ROOT)")
    parser.add_argument("--report", dest="report_path", help="Bundle analyzer HTML report (env: REPORT_PATH)")
    parser.add_argument("--format", dest="report_format", help="Report format (default: webpack-bundle-analyzer)")
    parser.add_argument("--warn-bytes", dest="warn_bytes", type=int, help="Highlight sizes above this many bytes")
    parser.add_argument("--color", dest="color", action="store_true", help="Force colored output")
    parser.add_argument("--no-color", dest="color", action="store_false", help="Disable colored output")
    parser.add_argument("--json", dest="json_path", help="Also write the report as JSON to this path")
    parser.set_defaults(color=None)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    overrides = {
        "root": args.root,
        "report_path": args.report_path,
        "report_format": args.report_format,
        "warn_bytes": args.warn_bytes,
        "color": args.color,
        "json_path": args.json_path,
    }

    try:
        run_once(args.config, overrides=overrides)
    except BundleDupesError:
        # already logged by run_once
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
