"""Command-line entry point and logging set-up."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import NoReturn

import structlog

from kube_ns_dump import __version__
from kube_ns_dump.clients import load_k8s_api_client
from kube_ns_dump.config import DumpConfig, build_config, split_csv
from kube_ns_dump.dump import dump_cluster
from kube_ns_dump.errors import ClusterConnectionError, ConfigError
from kube_ns_dump.resources import DEFAULT_KINDS, merge_kinds

log = structlog.get_logger()

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_PARTIAL = 2

_TROUBLESHOOTING_HINT = (
    "This most likely means that the cluster is misconfigured (e.g., it has invalid apiserver "
    "certificates or service accounts configuration), or that no kubeconfig is available."
)


def configure_logging(level: str = "info") -> None:
    """Configure structlog for console output on a TTY and JSON otherwise, on stderr."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer() if sys.stderr.isatty() else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelNamesMapping()[level.upper()]),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser whose usage errors exit with EXIT_FATAL; EXIT_PARTIAL is reserved for failed namespaces."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(EXIT_FATAL, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="kube-ns-dump",
        description="Write one YAML snapshot file per Kubernetes namespace.",
    )
    parser.add_argument(
        "--apiserver-host",
        help=(
            "The address of the Kubernetes apiserver to connect to in the format of "
            "protocol://address:port, e.g., http://localhost:8080. If not specified, the kubeconfig "
            "is used, falling back to in-cluster discovery."
        ),
    )
    parser.add_argument(
        "--kubeconfig",
        help="Path to kubeconfig file with authorization and master location information.",
    )
    parser.add_argument("--context", help="Kubeconfig context to use.")
    parser.add_argument(
        "--skip-types",
        action="append",
        metavar="TYPES",
        help="Comma-separated resource types to skip in the dump. Repeatable. Default: serviceaccounts.",
    )
    parser.add_argument("--output", type=Path, help="Directory where the dump files should be created.")
    parser.add_argument("--namespace", help="Only dump the contents of a particular namespace.")
    parser.add_argument("--config", type=Path, help="YAML settings file.")
    parser.add_argument("--log-level", help="debug, info, warning, error or critical. Default: info.")
    parser.add_argument("--report", action="store_true", help="Print a JSON report of the run to stdout.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def config_from_args(args: argparse.Namespace) -> DumpConfig:
    skip_types: tuple[str, ...] | None = None
    if args.skip_types is not None:
        skip_types = tuple(t for value in args.skip_types for t in split_csv(value))
    return build_config(
        args.config,
        apiserver_host=args.apiserver_host,
        kubeconfig=args.kubeconfig,
        context=args.context,
        output=args.output,
        namespace=args.namespace,
        skip_types=skip_types,
        log_level=args.log_level,
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
    except ConfigError as e:
        configure_logging()
        log.error("invalid_configuration", error=str(e))
        return EXIT_FATAL

    configure_logging(config.log_level)

    try:
        api_client = load_k8s_api_client(config.apiserver_host, config.kubeconfig, config.context)
    except ClusterConnectionError as e:
        log.error(
            "apiserver_connection_failed",
            error=str(e),
            hint=_TROUBLESHOOTING_HINT,
        )
        return EXIT_FATAL

    kinds = merge_kinds(DEFAULT_KINDS, config.extra_kinds)
    try:
        report = asyncio.run(dump_cluster(api_client, config.output, config.namespace, config.skip_types, kinds))
    except Exception as e:
        log.error("dump_failed", error=str(e))
        return EXIT_FATAL
    finally:
        api_client.close()

    if args.report:
        print(report.model_dump_json(indent=2))
    return EXIT_PARTIAL if report.failed else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
