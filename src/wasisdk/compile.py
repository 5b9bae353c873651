"""Compile stage: one C source to one wasm object file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Self

from wasisdk.observability import BuildLog
from wasisdk.process import require_file, run_tool
from wasisdk.toolchain import WASI_TARGET, clang_path, sysroot


class CompileOpts:
    """Compile-flag accumulator for jobs that carry a ``cflags`` list.

    Flags keep insertion order and are never deduplicated, since later flags
    may override earlier ones in clang.
    """

    __slots__ = ()

    cflags: list[str]
    print_output: bool

    def cflag(self, cflag: str) -> Self:
        self.cflags.append(cflag)
        return self

    def include(self, include: str | Path) -> Self:
        self.cflags.append(f"-I{include}")
        return self

    def set_print_output(self, print_output: bool) -> Self:
        self.print_output = print_output
        return self


@dataclass(slots=True)
class Compile(CompileOpts):
    input: Path
    cflags: list[str] = field(default_factory=list)
    print_output: bool = False
    logger: BuildLog = field(default_factory=BuildLog)

    def __post_init__(self) -> None:
        self.input = Path(self.input)
        self.cflags = list(self.cflags)

    def command(self, output: str | Path) -> tuple[str, ...]:
        return (
            str(clang_path()),
            f"--target={WASI_TARGET}",
            f"--sysroot={sysroot()}",
            "-c",
            str(self.input),
            "-o",
            str(output),
            *self.cflags,
        )

    def compile(self, output: str | Path) -> Path:
        """Compile ``input`` into the object file ``output``."""
        require_file(clang_path(), stage="compile")
        require_file(self.input, stage="compile")
        run_tool(
            self.command(output),
            stage="compile",
            print_output=self.print_output,
            logger=self.logger,
        )
        return Path(output)


__all__ = ["Compile", "CompileOpts"]
