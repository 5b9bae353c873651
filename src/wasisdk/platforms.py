"""Host platform detection for linker flag selection."""

from __future__ import annotations

import sys
from enum import StrEnum


class HostPlatform(StrEnum):
    """Object format family of the host running the build."""

    MACHO = "macho"
    ELF = "elf"


def detect_host(platform: str | None = None) -> HostPlatform:
    """Map a ``sys.platform`` value to its linker dialect.

    Everything that is not macOS uses the ELF dialect.
    """
    name = sys.platform if platform is None else platform
    if name == "darwin":
        return HostPlatform.MACHO
    return HostPlatform.ELF


__all__ = ["HostPlatform", "detect_host"]
