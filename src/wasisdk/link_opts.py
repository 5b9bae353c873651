"""Host-portable linker intents and their per-platform flag tables."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from wasisdk.platforms import HostPlatform, detect_host


class LinkOptKind(StrEnum):
    ALLOW_UNDEFINED = "allow_undefined"
    """Allow one undefined symbol, resolved later by the dynamic linker."""
    ALLOW_UNDEFINED_ALL = "allow_undefined_all"
    """Allow any undefined symbol, resolved later by the dynamic linker."""
    DEFAULT_OPTS = "default_opts"
    """Default options, possibly enabling workarounds for toolchain bugs."""
    EXPORT = "export"
    """Export one symbol from the linked module."""
    EXPORT_ALL = "export_all"
    """Preserve every symbol, even unused ones."""
    NO_DEFAULT_ENTRY_POINT = "no_default_entry_point"
    """Link without requiring a `_start` entry point."""
    SHARED = "shared"
    """Produce a shared library rather than an executable."""
    STRIP_DEBUG = "strip_debug"
    """Drop debug information."""
    STRIP_UNUSED = "strip_unused"
    """Remove code and data unreachable from the entry point or exports."""


SYMBOL_KINDS = frozenset({LinkOptKind.ALLOW_UNDEFINED, LinkOptKind.EXPORT})

# ``{symbol}`` is substituted for symbol-carrying intents. Flags are bare;
# the Link stage adds the ``-Wl,`` prefix.
LDFLAG_TABLES: dict[HostPlatform, dict[LinkOptKind, tuple[str, ...]]] = {
    HostPlatform.MACHO: {
        LinkOptKind.ALLOW_UNDEFINED: (),
        LinkOptKind.ALLOW_UNDEFINED_ALL: ("-undefined,dynamic_lookup",),
        LinkOptKind.DEFAULT_OPTS: (),
        LinkOptKind.EXPORT: ("-exported_symbol,{symbol}",),
        LinkOptKind.EXPORT_ALL: ("-export_dynamic",),
        LinkOptKind.NO_DEFAULT_ENTRY_POINT: (),
        LinkOptKind.SHARED: ("-dylib",),
        LinkOptKind.STRIP_DEBUG: ("-S",),
        LinkOptKind.STRIP_UNUSED: ("-dead_strip",),
    },
    HostPlatform.ELF: {
        LinkOptKind.ALLOW_UNDEFINED: ("-U,_{symbol}",),
        LinkOptKind.ALLOW_UNDEFINED_ALL: ("--allow-undefined",),
        LinkOptKind.DEFAULT_OPTS: ("--no-threads",),
        LinkOptKind.EXPORT: ("--export={symbol}",),
        LinkOptKind.EXPORT_ALL: ("--export-all",),
        LinkOptKind.NO_DEFAULT_ENTRY_POINT: ("--no-entry",),
        LinkOptKind.SHARED: ("--shared",),
        LinkOptKind.STRIP_DEBUG: ("-S",),
        LinkOptKind.STRIP_UNUSED: ("--strip-discarded",),
    },
}


@dataclass(frozen=True, slots=True)
class LinkOpt:
    kind: LinkOptKind
    symbol: str | None = None

    def __post_init__(self) -> None:
        if self.kind in SYMBOL_KINDS and not self.symbol:
            raise ValueError(f"Link option `{self.kind}` requires a symbol.")
        if self.kind not in SYMBOL_KINDS and self.symbol is not None:
            raise ValueError(f"Link option `{self.kind}` does not take a symbol.")

    @classmethod
    def allow_undefined(cls, symbol: str) -> LinkOpt:
        return cls(LinkOptKind.ALLOW_UNDEFINED, symbol)

    @classmethod
    def export(cls, symbol: str) -> LinkOpt:
        return cls(LinkOptKind.EXPORT, symbol)

    def as_ldflags(self, platform: HostPlatform | None = None) -> tuple[str, ...]:
        return as_ldflags(self, platform)


ALLOW_UNDEFINED_ALL = LinkOpt(LinkOptKind.ALLOW_UNDEFINED_ALL)
DEFAULT_OPTS = LinkOpt(LinkOptKind.DEFAULT_OPTS)
EXPORT_ALL = LinkOpt(LinkOptKind.EXPORT_ALL)
NO_DEFAULT_ENTRY_POINT = LinkOpt(LinkOptKind.NO_DEFAULT_ENTRY_POINT)
SHARED = LinkOpt(LinkOptKind.SHARED)
STRIP_DEBUG = LinkOpt(LinkOptKind.STRIP_DEBUG)
STRIP_UNUSED = LinkOpt(LinkOptKind.STRIP_UNUSED)


def as_ldflags(opt: LinkOpt, platform: HostPlatform | None = None) -> tuple[str, ...]:
    """Translate one intent into linker flags for ``platform`` (default: host)."""
    host = detect_host() if platform is None else platform
    templates = LDFLAG_TABLES[host][opt.kind]
    return tuple(template.format(symbol=opt.symbol) for template in templates)


__all__ = [
    "ALLOW_UNDEFINED_ALL",
    "DEFAULT_OPTS",
    "EXPORT_ALL",
    "LDFLAG_TABLES",
    "LinkOpt",
    "LinkOptKind",
    "NO_DEFAULT_ENTRY_POINT",
    "SHARED",
    "STRIP_DEBUG",
    "STRIP_UNUSED",
    "as_ldflags",
]
