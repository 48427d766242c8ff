"""Stamping command handlers for Fieldstamp CLI."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from ...api import fetch_font_resources, insert_fields_in_pdf, insert_text_in_pdf
from ...config import get_layout_config
from ...core.fields import Field
from ...errors import FieldStampError
from ..helpers import atomic_write, default_output_path, format_size_kb, safe_read_file


def _load_fields(path: Path) -> list[Field] | None:
    """Parse a JSON list of field records, printing errors to stderr."""
    raw = safe_read_file(path, "fields file")
    if raw is None:
        return None

    try:
        records = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        print(f"Error: {path} is not valid JSON: {e}", file=sys.stderr)
        return None

    if isinstance(records, dict) and "fields" in records:
        records = records["fields"]
    if not isinstance(records, list):
        print(f"Error: {path} must contain a list of field records", file=sys.stderr)
        return None

    fields: list[Field] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            print(f"Error: field record #{index + 1} is not an object", file=sys.stderr)
            return None
        try:
            fields.append(Field.from_dict(record))
        except FieldStampError as e:
            print(f"Error: field record #{index + 1}: {e}", file=sys.stderr)
            return None
    return fields


def _write_output(output: Path, data: bytes) -> None:
    try:
        atomic_write(output, data)
    except OSError as e:
        print(f"Error: cannot write {output}: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"  Saved: {output} ({format_size_kb(len(data))})")


def cmd_stamp(args: argparse.Namespace) -> None:
    """Place the fields of a JSON file into a PDF."""
    pdf_path = Path(args.pdf)
    pdf_bytes = safe_read_file(pdf_path, "PDF")
    if pdf_bytes is None:
        sys.exit(1)

    fields = _load_fields(Path(args.fields))
    if fields is None:
        sys.exit(1)

    output = Path(args.output) if args.output else default_output_path(pdf_path)
    print(f"Stamping {len(fields)} field(s) into {pdf_path.name} ({format_size_kb(len(pdf_bytes))})...")

    try:
        fonts = fetch_font_resources(args.handwriting_font, args.standard_font)
        result = insert_fields_in_pdf(pdf_bytes, fields, fonts, get_layout_config())
    except FieldStampError as e:
        print(f"  FAILED: {e}", file=sys.stderr)
        sys.exit(1)

    _write_output(output, result)


def cmd_text(args: argparse.Namespace) -> None:
    """Stamp one line of text into a PDF."""
    pdf_path = Path(args.pdf)
    pdf_bytes = safe_read_file(pdf_path, "PDF")
    if pdf_bytes is None:
        sys.exit(1)

    output = Path(args.output) if args.output else default_output_path(pdf_path)

    try:
        fonts = fetch_font_resources(args.handwriting_font, args.standard_font)
        result = insert_text_in_pdf(
            pdf_bytes,
            args.text,
            args.x,
            args.y,
            args.page - 1,
            fonts=fonts,
            use_handwriting_font=not args.standard,
            custom_font_size=args.size,
        )
    except FieldStampError as e:
        print(f"  FAILED: {e}", file=sys.stderr)
        sys.exit(1)

    _write_output(output, result)
