"""Argument parsing, configuration loading, and resource inspection commands."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict

from .api.pagination import ListOptions
from .api.resource_client import ResourceClient
from .client import FAMILIES, LinodeClient
from .config import load_config
from .exceptions import ConfigError, LinodeClientError
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linode-client",
        description="Inspect and remove Linode NodeBalancers and configs",
    )
    parser.add_argument(
        "-c", "--config",
        required=True,
        help="Path to the YAML configuration file",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate the configuration file and exit",
    )
    sub = parser.add_subparsers(dest="command")

    list_cmd = sub.add_parser("list", help="List every record of a family")
    list_cmd.add_argument("family", choices=FAMILIES)
    list_cmd.add_argument("--parent-id", type=int, help="Parent id for nested families")
    list_cmd.add_argument("--page", type=int, help="Fetch only this page")
    list_cmd.add_argument("--page-size", type=int, help="Records per page")

    for name, help_text in (("get", "Show one record"), ("delete", "Delete one record")):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("family", choices=FAMILIES)
        cmd.add_argument("id", type=int)
        cmd.add_argument("--parent-id", type=int, help="Parent id for nested families")

    return parser


def _emit(data) -> None:
    print(json.dumps(data, indent=2, default=str))


def _check_parent(parser: argparse.ArgumentParser, resources: ResourceClient, args: argparse.Namespace) -> None:
    """Reject a missing or stray --parent-id before any request is built."""
    if resources.endpoint.nested and args.parent_id is None:
        parser.error(f"{args.family} is nested; --parent-id is required")
    if not resources.endpoint.nested and args.parent_id is not None:
        parser.error(f"{args.family} is not nested; drop --parent-id")


def _run(resources: ResourceClient, args: argparse.Namespace) -> None:
    if args.command == "list":
        options = ListOptions(page=args.page, page_size=args.page_size)
        _emit([asdict(r) for r in resources.list(args.parent_id, options)])
    elif args.command == "get":
        _emit(asdict(resources.get(args.id, args.parent_id)))
    elif args.command == "delete":
        if resources.delete_if_exists(args.id, args.parent_id):
            _emit({"deleted": args.id})
        else:
            _emit({"deleted": args.id, "already_absent": True})


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    configure_logging(config.logging)

    if args.validate:
        logger.info("Configuration is valid")
        return 0

    if not args.command:
        parser.print_usage(sys.stderr)
        return 1

    try:
        with LinodeClient(config.api) as client:
            resources = client.family(args.family)
            _check_parent(parser, resources, args)
            _run(resources, args)
    except LinodeClientError as exc:
        logger.error("Request failed: %s", exc)
        return 1

    return 0


def main_entry() -> None:
    sys.exit(main())
