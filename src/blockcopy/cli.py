"""Command-line interface for blockcopy."""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError
from rich.console import Console

from . import __version__
from .core.copier import BlockCopier
from .dom.html import parse_html
from .dom.node import Document, ElementNode
from .dom.selectors import SelectorError
from .dom.snapshot import build_document
from .logging_config import setup_logging
from .models.config import BlockCopyConfig, Settings
from .models.page import PageInfo


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="blockcopy",
        description="Copy a content block from a web page as Markdown or plain text",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Copy the block around the first table cell of a saved page
  blockcopy page.html --select "td"

  # Copy what is under a point of a captured snapshot, as plain text
  blockcopy snapshot.json --point 640 300 --format plaintext

  # Render a live page with Playwright and attach its title and URL
  blockcopy https://docs.example.com --capture --select "pre" --attach-title --attach-url
        """,
    )

    parser.add_argument(
        "source",
        help="HTML file, snapshot JSON file, or URL (with --capture)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Target
    target_group = parser.add_argument_group("target")
    target = target_group.add_mutually_exclusive_group()
    target.add_argument(
        "--select",
        "-s",
        metavar="CSS",
        help="Interaction target: first element matching this selector (default: body)",
    )
    target.add_argument(
        "--point",
        nargs=2,
        type=float,
        metavar=("X", "Y"),
        help="Interaction target: element at this viewport point (needs layout)",
    )
    target_group.add_argument(
        "--promote",
        action="store_true",
        help="Widen the copied block to its nearest viable ancestor",
    )

    # Output
    output_group = parser.add_argument_group("output")
    output_group.add_argument(
        "--format",
        "-f",
        choices=["markdown", "plaintext"],
        default=None,
        help="Output format (default: markdown)",
    )
    output_group.add_argument(
        "--attach-title",
        action="store_true",
        help="Append the page title",
    )
    output_group.add_argument(
        "--attach-url",
        action="store_true",
        help="Append the page URL",
    )
    output_group.add_argument(
        "--language",
        choices=["system", "en", "zh"],
        default=None,
        help="Language of the source label (default: system)",
    )
    output_group.add_argument(
        "--title",
        type=str,
        default=None,
        help="Page title to attach (default: the document title)",
    )
    output_group.add_argument(
        "--url",
        type=str,
        default=None,
        help="Page URL for link resolution and attachment",
    )

    # Input
    input_group = parser.add_argument_group("input")
    input_group.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        metavar="FILE",
        help="YAML configuration file",
    )
    input_group.add_argument(
        "--capture",
        action="store_true",
        help="Render SOURCE in headless Chromium first (requires Playwright)",
    )

    # Logging
    log_group = parser.add_argument_group("logging")
    verbosity = log_group.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )
    verbosity.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress output",
    )

    return parser


def build_config(args: argparse.Namespace) -> BlockCopyConfig:
    """Load the config file (if any) and apply command-line overrides."""
    config = BlockCopyConfig.from_yaml_file(args.config) if args.config else BlockCopyConfig()

    overrides: dict[str, Any] = {}
    if args.format:
        overrides["output_format"] = args.format
    if args.attach_title:
        overrides["attach_title"] = True
    if args.attach_url:
        overrides["attach_url"] = True
    if args.language:
        overrides["language"] = args.language
    if overrides:
        settings = Settings.model_validate({**config.settings.model_dump(), **overrides})
        config = config.model_copy(update={"settings": settings})

    # Log level
    if args.verbose:
        config = config.model_copy(update={"log_level": "DEBUG"})
    elif args.quiet:
        config = config.model_copy(update={"log_level": "ERROR"})

    return config


async def _capture(url: str) -> Document:
    from .dom.capture import SnapshotCapture

    async with SnapshotCapture() as capture:
        snapshot = await capture.capture(url)
    return build_document(snapshot)


def load_document(source: str, url: Optional[str] = None, capture: bool = False) -> Document:
    """
    Load the document to copy from.

    Args:
        source: HTML file, snapshot JSON file, or URL when capturing
        url: Page URL to use for a static HTML file
        capture: Render source with Playwright

    Returns:
        Document tree
    """
    if capture:
        return asyncio.run(_capture(source))

    path = Path(source)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return build_document(json.loads(text))
    return parse_html(text, url=url or "")


def find_target(document: Document, args: argparse.Namespace) -> Optional[ElementNode]:
    if args.select:
        return document.query(args.select)
    if args.point:
        x, y = args.point
        return document.element_from_point(x, y)
    return document.body or document.root


def run_copy(args: argparse.Namespace) -> int:
    """Run one copy with given arguments."""
    console = Console(stderr=True)

    try:
        config = build_config(args)
    except (OSError, ValidationError, ValueError) as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 1

    setup_logging(config.log_level, str(config.log_file) if config.log_file else None)

    try:
        document = load_document(args.source, url=args.url, capture=args.capture)
        target = find_target(document, args)
    except SelectorError as e:
        console.print(f"[red]Invalid selector:[/red] {e}")
        return 1
    except ImportError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1
    except (OSError, ValidationError, ValueError) as e:
        console.print(f"[red]Could not load {args.source}:[/red] {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1

    if target is None:
        console.print("[yellow]No element at the requested target[/yellow]")
        return 1

    copier = BlockCopier(config)
    page_info = PageInfo.from_document(document, title=args.title, url=args.url)
    text = copier.copy(target, page_info=page_info, promote=args.promote)

    if text is None:
        if not args.quiet:
            console.print(f"[yellow]No copyable block found at[/yellow] {target!r}")
        return 1

    sys.stdout.write(text + "\n")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    return run_copy(args)


if __name__ == "__main__":
    sys.exit(main())
