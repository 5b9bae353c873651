"""Toolchain location from environment overrides.

Nothing here checks that a path exists. Stages check at invocation time so a
misconfigured SDK is reported together with the command that needed it.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

WASI_TARGET = "wasm32-unknown-wasi"
DEFAULT_WASI_SDK = "/opt/wasi-sdk"


def wasi_sdk() -> Path:
    """Return the SDK root from ``WASI_SDK`` or the fixed default."""
    return Path(os.environ.get("WASI_SDK", DEFAULT_WASI_SDK))


def sysroot() -> Path:
    override = os.environ.get("WASI_SYSROOT")
    if override is not None:
        return Path(override)
    return wasi_sdk() / "share" / "sysroot"


def clang_path() -> Path:
    override = os.environ.get("CLANG")
    if override is not None:
        return Path(override)
    return wasi_sdk() / "bin" / "clang"


def lucetc_path() -> Path:
    """Return the native code generator from ``LUCETC`` or ``PATH``."""
    override = os.environ.get("LUCETC")
    if override is not None:
        return Path(override)
    return Path(shutil.which("lucetc") or "lucetc")


def wasi_bindings() -> Path | None:
    override = os.environ.get("LUCET_WASI_BINDINGS")
    return Path(override) if override else None
