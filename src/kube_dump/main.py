"""CLI entrypoint for kube-dump."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from kube_dump import __version__
from kube_dump.config import get_settings
from kube_dump.dump.strip import available_strips
from kube_dump.errors import KubeDumpError
from kube_dump.pipeline import print_result, run_dump


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Dump every object of a Kubernetes cluster into a directory tree.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "out",
        type=Path,
        nargs="?",
        default=None,
        help="Path the dump should be written to (default: KUBE_DUMP_OUT)",
    )
    parser.add_argument(
        "--generic-strip",
        action="append",
        default=None,
        metavar="NAMES",
        help=(
            "Strip data from dumped object representations (comma-separated, repeatable). "
            f"Supported: {', '.join(available_strips())}"
        ),
    )
    parser.add_argument(
        "--escape-names",
        action="store_true",
        help="Escape '~', ':' and '%%' in object names used as directory names",
    )
    parser.add_argument(
        "--kubeconfig",
        type=Path,
        default=None,
        help="Path to kubeconfig (default: KUBECONFIG env or ~/.kube/config)",
    )
    parser.add_argument(
        "--context",
        default=None,
        help="Kubernetes context to use",
    )
    parser.add_argument(
        "--no-kubectl",
        action="store_true",
        help="Do not invoke kubectl (cluster-info.txt is not written)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for kube-dump CLI."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
    if not args.verbose:
        # urllib3/kubernetes are noisy at DEBUG and INFO
        logging.getLogger("urllib3").setLevel(logging.WARNING)
        logging.getLogger("kubernetes").setLevel(logging.WARNING)

    try:
        settings = get_settings(
            out=args.out,
            strip=args.generic_strip,
            escape_names=True if args.escape_names else None,
            kubeconfig=args.kubeconfig,
            context=args.context,
            kubectl_enabled=False if args.no_kubectl else None,
        )
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2
    if settings.out is None:
        print("Error: an output directory is required (OUT or KUBE_DUMP_OUT)", file=sys.stderr)
        return 2

    try:
        result = asyncio.run(run_dump(settings))
    except (KubeDumpError, OSError) as e:
        logging.exception("Dump failed")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print_result(result, Console())
    return 0


if __name__ == "__main__":
    sys.exit(main())
