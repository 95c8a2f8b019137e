"""Entry point: python -m stripegen

Reads the Stripe OpenAPI spec (spec3.sdk.json by default) and writes one Rust
file per component schema plus a mod.rs into the output directory.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .codegen import CodeGen
from .config import load_config
from .errors import GeneratorError
from .loader import DEFAULT_SPEC_PATH, load_spec

logger = logging.getLogger("stripegen")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stripegen",
        description="Generate Rust types and requests from the Stripe OpenAPI spec",
    )
    parser.add_argument("spec_path", nargs="?", default=str(DEFAULT_SPEC_PATH),
                        help="OpenAPI JSON file (default: %(default)s)")
    parser.add_argument("--out", dest="out_dir", help="output directory")
    parser.add_argument("--object", help="only generate this component and its dependencies")
    parser.add_argument("--graph", action="store_true", help="also write the dependency graph")
    parser.add_argument("--graph-out", default="graph.txt",
                        help="where --graph writes DOT output (default: %(default)s)")
    parser.add_argument("--config", help="JSON configuration file")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="debug output")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="warnings and errors only")
    return parser


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, args.quiet)

    try:
        config = load_config(args.config, out_dir=args.out_dir)
        spec = load_spec(args.spec_path)
        codegen = CodeGen(spec, config)
        if args.graph:
            Path(args.graph_out).write_text(codegen.graphviz(), encoding="utf-8")
            logger.info("Wrote dependency graph to %s", args.graph_out)
        report = codegen.write_files(single_object=args.object)
    except (GeneratorError, OSError, ValueError) as e:
        logger.error("%s", e)
        return 1

    print(f"Generated {len(report.written)} files in {config.out_dir} ({len(report.failed)} failed)")
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
