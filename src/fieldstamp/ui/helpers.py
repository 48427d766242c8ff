"""
File helpers shared by the CLI commands.

Failures are reported on stderr in one format so every command reads
the same; the caller decides whether to exit.
"""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

__all__ = [
    "atomic_write",
    "default_output_path",
    "format_size_kb",
    "safe_read_file",
]

_BYTES_PER_KB = 1024

_OUTPUT_SUFFIX = "_stamped"


def format_size_kb(size_bytes: int) -> str:
    """'12.3 KB' style size for progress lines."""
    return f"{size_bytes / _BYTES_PER_KB:.1f} KB"


def default_output_path(pdf_path: Path) -> Path:
    """``<dir>/<stem>_stamped.pdf`` next to the input."""
    return pdf_path.with_name(pdf_path.stem + _OUTPUT_SUFFIX + ".pdf")


def safe_read_file(path: Path, kind: str = "file") -> bytes | None:
    """Read *path*, printing an error and returning None when it cannot be read.

    Args:
        path: File to read.
        kind: What the file is, for the message ("PDF", "fields file").
    """
    try:
        return path.read_bytes()
    except FileNotFoundError:
        print(f"Error: {kind} not found: {path}", file=sys.stderr)
    except OSError as e:
        print(f"Error reading {kind} {path}: {e}", file=sys.stderr)
    return None


def atomic_write(path: Path, data: bytes) -> None:
    """Write *data* to *path* so readers see either the old or the new file."""
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}-", suffix=".tmp")
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        tmp.replace(path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
