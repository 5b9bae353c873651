"""Link stage: objects or C sources to one wasm module."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Self

from wasisdk.compile import CompileOpts
from wasisdk.link_opts import DEFAULT_OPTS, LinkOpt
from wasisdk.observability import BuildLog
from wasisdk.platforms import HostPlatform, detect_host
from wasisdk.process import require_file, run_tool
from wasisdk.toolchain import clang_path


class LinkOpts:
    """Link-intent accumulator; intents are translated for ``platform`` on append."""

    __slots__ = ()

    ldflags: list[str]
    platform: HostPlatform

    def link_opt(self, link_opt: LinkOpt) -> Self:
        self.ldflags.extend(link_opt.as_ldflags(self.platform))
        return self

    def export(self, symbol: str) -> Self:
        return self.link_opt(LinkOpt.export(symbol))


@dataclass(slots=True)
class Link(CompileOpts, LinkOpts):
    """A clang link invocation.

    Construction appends the ``DEFAULT_OPTS`` translation to ``ldflags`` so
    host workarounds apply without caller action.
    """

    inputs: list[Path]
    cflags: list[str] = field(default_factory=list)
    print_output: bool = False
    platform: HostPlatform = field(default_factory=detect_host)
    logger: BuildLog = field(default_factory=BuildLog)
    ldflags: list[str] = field(init=False, default_factory=list)

    def __post_init__(self) -> None:
        self.inputs = _as_paths(self.inputs)
        if not self.inputs:
            raise ValueError("Link requires at least one input.")
        self.cflags = list(self.cflags)
        self.link_opt(DEFAULT_OPTS)

    def command(self, output: str | Path) -> tuple[str, ...]:
        return (
            str(clang_path()),
            *(str(path) for path in self.inputs),
            "-o",
            str(output),
            *self.cflags,
            *(f"-Wl,{ldflag}" for ldflag in self.ldflags),
        )

    def link(self, output: str | Path) -> Path:
        """Link ``inputs`` into the wasm module ``output``."""
        require_file(clang_path(), stage="link")
        for path in self.inputs:
            require_file(path, stage="link")
        run_tool(
            self.command(output),
            stage="link",
            print_output=self.print_output,
            logger=self.logger,
        )
        return Path(output)


def _as_paths(inputs: Sequence[str | Path] | str | Path) -> list[Path]:
    if isinstance(inputs, (str, Path)):
        return [Path(inputs)]
    return [Path(path) for path in inputs]


__all__ = ["Link", "LinkOpts"]
