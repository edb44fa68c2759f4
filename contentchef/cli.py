"""
ContentChef CLI - command-line access to online and preview channels.

This layer provides the user-facing CLI commands, using the SDK layer
for all operations. It handles:
- Argument parsing
- TTY detection for human vs machine output
- Pretty formatting for human output
- JSON output for piping/automation
"""

import argparse
import json
import os
import sys
from dataclasses import asdict
from datetime import datetime
from typing import Any

from contentchef.core.context import Context
from contentchef.core.errors import ConfigurationError, ContentChefError
from contentchef.core.types import (
    ContentOptions,
    PropFilterItem,
    PropFilters,
    SearchOptions,
    Sorting,
    SortingField,
    parse_timestamp,
)
from contentchef.sdk import ContentChef, OnlineChannel, PreviewChannel

# =============================================================================
# Output Helpers
# =============================================================================


def is_tty() -> bool:
    """Check if stdout is a TTY (human) or pipe (machine)."""
    return sys.stdout.isatty()


def json_output(data: Any, pretty: bool = False) -> None:
    """Print JSON output."""
    indent = 2 if pretty or is_tty() else None
    print(json.dumps(data, indent=indent, default=str))


def error_output(error: ContentChefError) -> None:
    """Print error and exit."""
    json_output(error.to_dict())
    sys.exit(1)


def table_output(
    headers: list[str],
    rows: list[list[str]],
    widths: list[int],
) -> None:
    """Print a formatted table for human output."""
    header_line = "  ".join(h.ljust(w) for h, w in zip(headers, widths))
    print(header_line)
    print("-" * len(header_line))

    for row in rows:
        print("  ".join(str(v)[:w].ljust(w) for v, w in zip(row, widths)))


# =============================================================================
# Argument Parsing Helpers
# =============================================================================


def parse_sort(value: str) -> SortingField:
    """Parse FIELD, FIELD:asc or FIELD:desc."""
    name, _, direction = value.partition(":")
    direction = direction.lower() or "asc"
    if direction not in ("asc", "desc"):
        raise argparse.ArgumentTypeError(f"invalid sort direction {direction!r}, expected asc or desc")
    return SortingField(field_name=name, ascending=direction == "asc")


def parse_filter(value: str) -> PropFilters:
    """Parse a property filter given as JSON: {"condition": "AND", "items": [...]}."""
    try:
        data = json.loads(value)
    except json.JSONDecodeError as e:
        raise argparse.ArgumentTypeError(f"invalid filter JSON: {e}") from e
    if not isinstance(data, dict):
        raise argparse.ArgumentTypeError("filter must be a JSON object")
    items = [
        PropFilterItem(field=item.get("field", ""), operator=item.get("operator", ""), value=item.get("value"))
        for item in data.get("items") or []
        if isinstance(item, dict)
    ]
    return PropFilters(condition=data.get("condition", ""), items=items)


def parse_target_date(value: str) -> datetime:
    """Parse an ISO-8601 target date."""
    try:
        parsed = parse_timestamp(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid target date: {e}") from e
    if parsed is None:
        raise argparse.ArgumentTypeError("target date must not be empty")
    return parsed


def get_channel(chef: ContentChef, args: argparse.Namespace) -> OnlineChannel | PreviewChannel:
    """Build the channel selected by the command-line flags."""
    api_key = args.api_key or os.environ.get("CONTENTCHEF_API_KEY", "")
    if args.preview:
        return chef.preview_channel(args.channel, api_key, args.preview)
    return chef.online_channel(args.channel, api_key)


# =============================================================================
# CLI Commands
# =============================================================================


def cmd_content(chef: ContentChef, ctx: Context, args: argparse.Namespace) -> None:
    """Get a single content by publicId."""
    try:
        channel = get_channel(chef, args)
        content = channel.content(
            ctx,
            ContentOptions(public_id=args.public_id, legacy_metadata=args.legacy_metadata),
        )
        json_output(asdict(content))
    except ContentChefError as e:
        error_output(e)


def cmd_search(chef: ContentChef, ctx: Context, args: argparse.Namespace) -> None:
    """Search contents in a channel."""
    try:
        channel = get_channel(chef, args)
        options = SearchOptions(
            skip=args.skip,
            take=args.take,
            public_id=args.public_id or [],
            content_definition=args.definition or [],
            repositories=args.repository or [],
            legacy_metadata=args.legacy_metadata,
            tags=args.tag or [],
            prop_filters=args.filter or PropFilters(),
            sorting=Sorting(args.sort or []),
        )
        page = channel.search(ctx, options)

        if is_tty():
            if not page.items:
                print("No contents found.")
                return

            table_output(
                ["Public ID", "Definition", "Repository", "Online"],
                [
                    [c.public_id, c.definition, c.repository, c.online_date.isoformat() if c.online_date else ""]
                    for c in page.items
                ],
                [36, 24, 20, 25],
            )

            if page.has_more:
                print(f"\nShowing {len(page.items)} of {page.total} contents (skip {page.skip})")
        else:
            json_output(asdict(page))
    except ContentChefError as e:
        error_output(e)


# =============================================================================
# Main CLI
# =============================================================================


def _add_channel_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("channel", help="Publishing channel name")
    parser.add_argument("--api-key", "-k", help="Channel API key (overrides CONTENTCHEF_API_KEY)")
    parser.add_argument(
        "--preview",
        "-p",
        choices=["live", "staging"],
        help="Use the preview channel with the given state instead of the online channel",
    )
    parser.add_argument("--legacy-metadata", action="store_true", help="Request legacy metadata")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="contentchef",
        description="ContentChef CLI - Command-line interface for the ContentChef delivery API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Output Modes:
  TTY (human):  Pretty JSON and tables
  Pipe:         Compact JSON

Examples:
  contentchef content website home-page
  contentchef search website --definition article --sort onlineDate:desc --take 10
  contentchef search website --preview staging --target-date 2030-01-01T00:00:00Z
  contentchef search website --filter '{"condition":"AND","items":[{"field":"title","operator":"CONTAINS","value":"chef"}]}'
""",
    )
    parser.add_argument("--base-url", help="API base URL (overrides CONTENTCHEF_BASE_URL)")
    parser.add_argument("--space", "-s", help="Space ID (overrides CONTENTCHEF_SPACE_ID)")
    parser.add_argument(
        "--target-date",
        type=parse_target_date,
        help="ISO-8601 date preview channels look at (overrides CONTENTCHEF_TARGET_DATE)",
    )
    parser.add_argument("--timeout", "-t", type=float, default=60, help="Request timeout in seconds")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # ========== Content ==========
    content = subparsers.add_parser("content", help="Get a single content by publicId")
    _add_channel_arguments(content)
    content.add_argument("public_id", help="Public ID of the content")
    content.set_defaults(func=cmd_content)

    # ========== Search ==========
    search = subparsers.add_parser("search", help="Search contents")
    _add_channel_arguments(search)
    search.add_argument("--skip", type=int, default=0, help="Offset in the result set")
    search.add_argument("--take", type=int, default=10, help="Number of contents to return")
    search.add_argument("--public-id", action="append", help="Public ID (repeatable)")
    search.add_argument("--definition", "-d", action="append", help="Content definition (repeatable)")
    search.add_argument("--repository", "-r", action="append", help="Repository (repeatable)")
    search.add_argument("--tag", action="append", help="Tag (repeatable)")
    search.add_argument(
        "--sort",
        action="append",
        type=parse_sort,
        help="Sort field as FIELD[:asc|desc] (repeatable, applied in order)",
    )
    search.add_argument("--filter", "-f", type=parse_filter, help="Property filter as JSON")
    search.set_defaults(func=cmd_search)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    target_date = args.target_date
    if target_date is None and os.environ.get("CONTENTCHEF_TARGET_DATE"):
        try:
            target_date = parse_target_date(os.environ["CONTENTCHEF_TARGET_DATE"])
        except argparse.ArgumentTypeError as e:
            parser.error(f"CONTENTCHEF_TARGET_DATE: {e}")

    try:
        chef = ContentChef(
            base_url=args.base_url,
            space_id=args.space,
            target_date=target_date,
            timeout=args.timeout,
        )
    except ConfigurationError as e:
        error_output(e)

    args.func(chef, chef.background_context(), args)


if __name__ == "__main__":
    main()
