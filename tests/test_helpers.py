"""Tests for fieldstamp.ui.helpers -- file I/O helpers shared by CLI commands."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from fieldstamp.ui.helpers import atomic_write, default_output_path, format_size_kb, safe_read_file

# ── safe_read_file ────────────────────────────────────────────────


def test_safe_read_file_success(tmp_path: Path):
    f = tmp_path / "fields.json"
    f.write_bytes(b"[]")
    assert safe_read_file(f, "fields file") == b"[]"


def test_safe_read_file_not_found(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    result = safe_read_file(tmp_path / "missing.pdf", "PDF")
    assert result is None
    assert "PDF not found" in capsys.readouterr().err


def test_safe_read_file_read_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    f = tmp_path / "contract.pdf"
    f.write_bytes(b"data")
    with patch.object(Path, "read_bytes", side_effect=OSError("permission denied")):
        result = safe_read_file(f, "PDF")
    assert result is None
    assert "permission denied" in capsys.readouterr().err


# ── default_output_path ───────────────────────────────────────────


def test_default_output_path():
    assert default_output_path(Path("/tmp/contract.pdf")) == Path("/tmp/contract_stamped.pdf")


def test_default_output_path_preserves_directory():
    p = Path("/home/user/documents/lease.v2.pdf")
    assert default_output_path(p) == Path("/home/user/documents/lease.v2_stamped.pdf")


# ── format_size_kb ────────────────────────────────────────────────


def test_format_size_kb():
    assert format_size_kb(1024) == "1.0 KB"
    assert format_size_kb(0) == "0.0 KB"
    assert format_size_kb(2560) == "2.5 KB"


# ── atomic_write ──────────────────────────────────────────────────


def test_atomic_write_replaces_existing(tmp_path: Path):
    target = tmp_path / "out.pdf"
    target.write_bytes(b"old")
    atomic_write(target, b"stamped PDF content")
    assert target.read_bytes() == b"stamped PDF content"
    assert list(tmp_path.iterdir()) == [target]


def test_atomic_write_no_partial_on_error(tmp_path: Path):
    target = tmp_path / "out.pdf"
    with (
        patch("os.fsync", side_effect=OSError("disk full")),
        pytest.raises(OSError, match="disk full"),
    ):
        atomic_write(target, b"data")
    assert not target.exists()
    assert list(tmp_path.iterdir()) == []
