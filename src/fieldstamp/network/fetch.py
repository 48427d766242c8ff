"""
Font byte retrieval.

Font programs are referenced by URI in the configuration: a local path,
a ``file:`` URI, or an ``http(s)://`` URL served by the web app.  Each
font is fetched once per export, before any field is rendered.

Downloads are capped at ``MAX_RESPONSE_SIZE`` and retried with
exponential backoff while the failure looks transient (connection
errors, timeouts, 5xx).  Everything surfaces as ``FontError``.
"""

from __future__ import annotations

__all__ = ["fetch_bytes"]

import logging
import time
import urllib.error
import urllib.request
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import unquote, urlparse

from ..constants import (
    BYTES_PER_MB,
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_BACKOFF,
    DEFAULT_RETRY_DELAY,
    DEFAULT_TIMEOUT_FONT_FETCH,
    MAX_RESPONSE_SIZE,
    RECV_BUFFER_SIZE,
)
from ..errors import FontError

if TYPE_CHECKING:
    import http.client
    from typing import BinaryIO

_logger = logging.getLogger(__name__)


def _too_large(source: object) -> FontError:
    return FontError(f"Font {source} exceeds {MAX_RESPONSE_SIZE // BYTES_PER_MB} MB limit")


# ── HTTP(S) ──────────────────────────────────────────────────────────


class _SafeRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Follows redirects except a downgrade from HTTPS to plain HTTP."""

    def redirect_request(  # type: ignore[override]  # urllib stubs use incompatible signature
        self,
        req: urllib.request.Request,
        fp: http.client.HTTPResponse,
        code: int,
        msg: str,
        headers: http.client.HTTPMessage,
        newurl: str,
    ) -> urllib.request.Request | None:
        if urlparse(req.full_url).scheme == "https" and urlparse(newurl).scheme == "http":
            raise FontError(f"Refused redirect from HTTPS to HTTP: {newurl}")
        return super().redirect_request(req, fp, code, msg, headers, newurl)


_opener = urllib.request.build_opener(_SafeRedirectHandler)


def _safe_urlopen(url: str, *, timeout: int) -> http.client.HTTPResponse:
    """Single seam for opening URLs, patched out in tests."""
    return _opener.open(url, timeout=timeout)


def _read_body(response: BinaryIO, url: str) -> bytes:
    body = bytearray()
    while chunk := response.read(RECV_BUFFER_SIZE):
        body += chunk
        if len(body) > MAX_RESPONSE_SIZE:
            raise _too_large(url)
    return bytes(body)


def _download(url: str, timeout: int) -> bytes:
    """One GET attempt; the raised FontError says whether a retry may help."""
    try:
        with _safe_urlopen(url, timeout=timeout) as response:
            return _read_body(response, url)
    except urllib.error.HTTPError as exc:
        # 5xx may be a deploy in progress; 4xx will not get better
        raise FontError(f"Font download failed: {url}: {exc}", retryable=exc.code >= 500) from exc
    except urllib.error.URLError as exc:
        raise FontError(f"Font download failed: {url}: {exc}", retryable=True) from exc
    except TimeoutError as exc:
        raise FontError(
            f"Font download timed out after {timeout}s: {url}", retryable=True
        ) from exc


def _download_with_retry(url: str, timeout: int, max_retries: int) -> bytes:
    attempts = max_retries + 1
    delay = DEFAULT_RETRY_DELAY
    attempt = 1
    while True:
        _logger.debug("GET %s (attempt %d/%d, timeout=%ds)", url, attempt, attempts, timeout)
        try:
            data = _download(url, timeout)
        except FontError as exc:
            if not exc.retryable or attempt >= attempts:
                raise
            _logger.warning(
                "Font download failed (attempt %d/%d): %s. Retrying in %.1fs...",
                attempt,
                attempts,
                exc,
                delay,
            )
            time.sleep(delay)
            delay *= DEFAULT_RETRY_BACKOFF
            attempt += 1
        else:
            _logger.debug("GET %s -> %d bytes", url, len(data))
            return data


# ── Local files ──────────────────────────────────────────────────────


def _read_file(path: Path) -> bytes:
    try:
        if path.stat().st_size > MAX_RESPONSE_SIZE:
            raise _too_large(path)
        return path.read_bytes()
    except FileNotFoundError as exc:
        raise FontError(f"Font file not found: {path}") from exc
    except OSError as exc:
        raise FontError(f"Cannot read font file {path}: {exc}") from exc


# ── Public API ───────────────────────────────────────────────────────


def fetch_bytes(
    uri: str,
    *,
    timeout: int = DEFAULT_TIMEOUT_FONT_FETCH,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> bytes:
    """
    Fetch a font program from a path, ``file:`` URI, or HTTP(S) URL.

    Args:
        uri: Where the font lives.
        timeout: HTTP timeout in seconds.
        max_retries: Extra attempts after a transient network failure.

    Returns:
        Raw font bytes.

    Raises:
        FontError: If the resource cannot be read.
    """
    parsed = urlparse(uri)
    scheme = parsed.scheme.lower()

    if scheme in ("http", "https"):
        return _download_with_retry(uri, timeout, max(max_retries, 0))
    if scheme == "file":
        return _read_file(Path(unquote(parsed.path)))
    # Windows drive letters parse as a one-letter scheme
    if len(scheme) > 1:
        raise FontError(f"Unsupported font URI scheme {scheme!r}: {uri}")
    return _read_file(Path(uri).expanduser())
