"""
Command-line interface for Fieldstamp.

Argument parsing, dispatch, and the configuration subcommands.
Stamping logic lives in ``stamp``.
"""

from __future__ import annotations

import argparse
import logging
import sys

from ...config import CONFIG_FILE, get_layout_config, save_font_sources, save_layout_overrides
from ...constants import ENV_HANDWRITING_FONT, ENV_STANDARD_FONT, MAX_FONT_SIZE, __version__
from ...errors import ConfigError
from .stamp import cmd_stamp, cmd_text


def _cmd_layout(args: argparse.Namespace) -> None:
    """Show the effective layout, optionally saving overrides first."""
    overrides: dict[str, float] = {}
    for item in args.set or []:
        key, sep, value = item.partition("=")
        if not sep:
            print(f"Error: expected KEY=VALUE, got {item!r}", file=sys.stderr)
            sys.exit(1)
        try:
            overrides[key.strip()] = float(value)
        except ValueError:
            print(f"Error: {key.strip()} must be a number, got {value!r}", file=sys.stderr)
            sys.exit(1)

    if overrides:
        try:
            layout = save_layout_overrides(**overrides)
        except (ConfigError, OSError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"Saved to {CONFIG_FILE}")
    else:
        layout = get_layout_config()

    for key, value in layout.as_dict().items():
        print(f"  {key:<26} {value:g}")


def _cmd_fonts(args: argparse.Namespace) -> None:
    """Save default font locations."""
    if not args.handwriting and not args.standard:
        print("Error: give --handwriting and/or --standard", file=sys.stderr)
        sys.exit(1)
    try:
        save_font_sources(args.handwriting, args.standard)
    except (ConfigError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Saved to {CONFIG_FILE}")


def _font_size(value: str) -> float:
    """argparse type for --size: a number above 0 and at most MAX_FONT_SIZE."""
    try:
        size = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from None
    if not 0 < size <= MAX_FONT_SIZE:
        raise argparse.ArgumentTypeError(
            f"must be above 0 and at most {MAX_FONT_SIZE:.0f} pt, got {value}"
        )
    return size


def _add_font_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--handwriting-font",
        default=None,
        help=f"Handwriting font path or URL (default: ${ENV_HANDWRITING_FONT} or config)",
    )
    parser.add_argument(
        "--standard-font",
        default=None,
        help=f"Standard font path or URL (default: ${ENV_STANDARD_FONT} or config)",
    )


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="fieldstamp",
        description="Place filled-in form fields into PDF documents.",
        epilog=(
            "Environment variables:\n"
            f"  {ENV_HANDWRITING_FONT}  Handwriting font (signatures)\n"
            f"  {ENV_STANDARD_FONT}     Standard font (text fields, labels)\n"
            "\n"
            f"Config file: {CONFIG_FILE}\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-V", "--version", action="version", version=f"fieldstamp {__version__}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-vv for debug output)",
    )

    sub = parser.add_subparsers(dest="command", help="Available commands")

    # stamp
    p_stamp = sub.add_parser("stamp", help="Place fields from a JSON file into a PDF")
    p_stamp.add_argument("pdf", help="Source PDF file")
    p_stamp.add_argument("fields", help="JSON file with a list of field records")
    p_stamp.add_argument("-o", "--output", help="Output file path (default: <name>_stamped.pdf)")
    _add_font_options(p_stamp)

    # text
    p_text = sub.add_parser("text", help="Stamp one line of text into a PDF")
    p_text.add_argument("pdf", help="Source PDF file")
    p_text.add_argument("text", help="Text to stamp")
    p_text.add_argument("-x", type=float, required=True, help="Box left edge (points)")
    p_text.add_argument("-y", type=float, required=True, help="Box top edge (points from top)")
    p_text.add_argument("--page", type=int, default=1, help="1-based page number (default: 1)")
    p_text.add_argument(
        "--standard",
        action="store_true",
        default=False,
        help="Use the standard font instead of the handwriting font",
    )
    p_text.add_argument("--size", type=_font_size, default=None, help="Font size override")
    p_text.add_argument("-o", "--output", help="Output file path (default: <name>_stamped.pdf)")
    _add_font_options(p_text)

    # layout
    p_layout = sub.add_parser("layout", help="Show (or change) layout settings")
    p_layout.add_argument(
        "--set",
        action="append",
        metavar="KEY=VALUE",
        help="Save a layout override (repeatable)",
    )

    # fonts
    p_fonts = sub.add_parser("fonts", help="Save default font locations")
    p_fonts.add_argument("--handwriting", default=None, help="Handwriting font path or URL")
    p_fonts.add_argument("--standard", default=None, help="Standard font path or URL")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose > 1 else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
        )

    if args.command == "stamp":
        cmd_stamp(args)
    elif args.command == "text":
        cmd_text(args)
    elif args.command == "layout":
        _cmd_layout(args)
    elif args.command == "fonts":
        _cmd_fonts(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
