"""
Application-wide constants for Fieldstamp.

Size limits, timeouts, environment variable names and the other magic
numbers are centralized here.  Layout constants shared with the editor
and signing views live in ``config.layout``.
"""

from __future__ import annotations

import importlib.metadata

try:
    __version__ = importlib.metadata.version("fieldstamp")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = [
    "BYTES_PER_MB",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_RETRY_BACKOFF",
    "DEFAULT_RETRY_DELAY",
    "DEFAULT_TIMEOUT_FONT_FETCH",
    "EMPTY_VALUE_PREFIX",
    "ENV_HANDWRITING_FONT",
    "ENV_STANDARD_FONT",
    "MAX_FONT_SIZE",
    "MAX_IMAGE_BYTES",
    "MAX_IMAGE_PIXELS",
    "MAX_META_FONT_SIZE",
    "MAX_RESPONSE_SIZE",
    "MIN_META_FONT_SIZE",
    "PDF_MAGIC",
    "RECV_BUFFER_SIZE",
    "STAMP_BOX_HEIGHT",
    "STAMP_BOX_WIDTH",
    "STAMP_HANDWRITING_FONT_SIZE",
    "STAMP_STANDARD_FONT_SIZE",
    "__version__",
]

# ── Timeout values (seconds) ──────────────────────────────────────────

# Font download timeout
DEFAULT_TIMEOUT_FONT_FETCH = 30


# ── Size units ────────────────────────────────────────────────────────

BYTES_PER_MB = 1024 * 1024


# ── Size limits ───────────────────────────────────────────────────────

# Maximum font download size (25 MB). Full CJK fonts are ~20 MB.
MAX_RESPONSE_SIZE = 25 * 1024 * 1024

# Socket read chunk size
RECV_BUFFER_SIZE = 8192

# Maximum decoded signature image size (5 MB)
MAX_IMAGE_BYTES = 5 * 1024 * 1024

# Maximum signature image pixel count (decompression bomb guard)
MAX_IMAGE_PIXELS = 4000 * 4000

# Upper bound for any font size we draw with
MAX_FONT_SIZE = 512.0


# ── Retry configuration ───────────────────────────────────────────────

DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY = 1.0
DEFAULT_RETRY_BACKOFF = 2.0


# ── Field meta ────────────────────────────────────────────────────────

# Accepted range for a field meta fontSize override
MIN_META_FONT_SIZE = 8
MAX_META_FONT_SIZE = 96

# Prefix of the synthetic value given to options with an empty label
EMPTY_VALUE_PREFIX = "empty-value-"


# ── Free text stamping ────────────────────────────────────────────────

# Fixed box used by insert_text_in_pdf (PDF points)
STAMP_BOX_WIDTH = 250.0
STAMP_BOX_HEIGHT = 64.0
STAMP_HANDWRITING_FONT_SIZE = 50.0
STAMP_STANDARD_FONT_SIZE = 15.0


# ── Environment variable names ──────────────────────────────────────

ENV_HANDWRITING_FONT = "FIELDSTAMP_HANDWRITING_FONT"
ENV_STANDARD_FONT = "FIELDSTAMP_STANDARD_FONT"


# PDF file magic bytes
PDF_MAGIC = b"%PDF-"
