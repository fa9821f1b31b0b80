# Shared fixtures
"""Fixtures for building synthetic ARW containers."""

import struct
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from arwextract.config import LENGTH_POSITION, OFFSET_POSITION, reset_config


# Clear of both header fields and inside a 200000-byte file
PREVIEW_OFFSET = 0x30000


def build_container(
    size: int = 200000,
    offset: int = PREVIEW_OFFSET,
    length: int = 102,
    payload: bytes = None,
) -> bytes:
    """
    Build a synthetic container of `size` bytes.

    The preview fields point at (offset, length). When `payload` is given it
    is written at `offset`; by default an SOI marker followed by filler bytes.
    """
    buf = bytearray(size)
    if payload is None:
        payload = b'\xff\xd8' + bytes(i % 256 for i in range(length - 2))
    if payload and offset + len(payload) <= size:
        buf[offset:offset + len(payload)] = payload
    # The header fields are written last so they win over an overlapping payload
    struct.pack_into('<I', buf, OFFSET_POSITION, offset)
    struct.pack_into('<I', buf, LENGTH_POSITION, length)
    return bytes(buf)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Run each test from an empty directory with a fresh config."""
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def container():
    """Expose build_container to tests."""
    return build_container


@pytest.fixture
def make_raw(tmp_path):
    """Write a synthetic container into tmp_path/raw and return its path."""
    raw_dir = tmp_path / 'raw'
    raw_dir.mkdir(exist_ok=True)

    def _make(name: str = 'DSC00001.ARW', **kwargs) -> Path:
        path = raw_dir / name
        path.write_bytes(build_container(**kwargs))
        return path

    return _make
