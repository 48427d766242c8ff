"""Resource retrieval (font programs)."""

from __future__ import annotations

from .fetch import fetch_bytes

__all__ = ["fetch_bytes"]
