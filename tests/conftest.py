"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from bincodec import CodecConfig


@pytest.fixture
def lenient_config() -> CodecConfig:
    """Config that ignores trailing bytes after a whole-value decode."""
    return CodecConfig(allow_trailing_bytes=True)


@pytest.fixture
def trailing_garbage() -> bytes:
    """Bytes appended after a valid encoding in leftover-policy tests."""
    return b"\xde\xad"
