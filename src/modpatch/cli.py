"""Command-line interface for modpatch."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from modpatch.errors import ModPatchError
from modpatch.pipeline import CompilationPlan, run

logger = logging.getLogger(__name__)


def _write_plan(plan: CompilationPlan, fmt: str, output: Path | None) -> None:
    if fmt == "yaml":
        import yaml

        text = yaml.safe_dump(plan.to_dict(), sort_keys=False)
        if output is None:
            sys.stdout.write(text)
        else:
            output.write_text(text, encoding="utf-8")
    elif output is None:
        plan.options.write_to(sys.stdout)
    else:
        with open(output, "w", encoding="utf-8") as f:
            plan.options.write_to(f)
    if output is not None:
        logger.info("Generated %s", output)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="modpatch",
        description="Compute javac module options and the multi-release layout of a Java project.",
    )
    parser.add_argument(
        "project_dir",
        type=Path,
        help="Path to the Java project",
    )
    parser.add_argument(
        "--test",
        action="store_true",
        default=None,
        help="Plan the compilation of the test sources",
    )
    parser.add_argument(
        "--runtime",
        action="store_true",
        help="Compute options for running the tests instead of compiling them",
    )
    parser.add_argument(
        "--deps",
        type=Path,
        default=None,
        help="YAML listing of the resolved dependencies",
    )
    parser.add_argument(
        "--pom",
        type=Path,
        default=None,
        help="Resolve dependencies from this pom.xml with jgo",
    )
    parser.add_argument(
        "--format",
        choices=("args", "yaml"),
        default="args",
        help="Output javac arguments (default) or the whole plan as YAML",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output file (default: standard output)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) output",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(message)s")
    if args.verbose:
        logging.getLogger("modpatch").setLevel(logging.DEBUG)

    try:
        plan = run(
            args.project_dir,
            test=args.test,
            runtime=args.runtime,
            dependencies=args.deps,
            pom=args.pom,
        )
        _write_plan(plan, args.format, args.output)
    except (ModPatchError, OSError) as e:
        logger.error("%s", e)
        return 1
    return 0
