"""Shared helpers for integration tests against an installed WASI SDK."""

from __future__ import annotations

from pathlib import Path

import pytest

from wasisdk.toolchain import clang_path, lucetc_path

FIXTURES = Path(__file__).parent / "fixtures"


def fixture_file(name: str) -> Path:
    path = FIXTURES / name
    assert path.exists(), f"missing fixture {name}"
    return path


requires_wasi_sdk = pytest.mark.skipif(
    not clang_path().exists(),
    reason="WASI SDK clang not installed (set WASI_SDK or CLANG).",
)

requires_lucetc = pytest.mark.skipif(
    not lucetc_path().exists(),
    reason="lucetc not installed (set LUCETC or add it to PATH).",
)
