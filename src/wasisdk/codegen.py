"""Native code generation from a wasm module to a shared object."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, Self

from wasisdk.observability import BuildLog
from wasisdk.process import require_file, run_tool
from wasisdk.toolchain import lucetc_path


class CodeGenerator(Protocol):
    def shared_object_file(self, wasm: Path, output: Path) -> None:
        """Compile ``wasm`` into a shared object at ``output``."""


@dataclass(slots=True)
class LucetcCodeGenerator:
    """Runs the ``lucetc`` executable."""

    bindings: list[Path] = field(default_factory=list)
    opt_level: str | None = None
    print_output: bool = False
    logger: BuildLog = field(default_factory=BuildLog)

    def with_bindings(self, path: str | Path) -> Self:
        self.bindings.append(Path(path))
        return self

    def command(self, wasm: Path, output: Path) -> tuple[str, ...]:
        command = [str(lucetc_path()), str(wasm), "-o", str(output), "--emit", "so"]
        for binding in self.bindings:
            command.extend(["--bindings", str(binding)])
        if self.opt_level is not None:
            command.extend(["--opt-level", self.opt_level])
        return tuple(command)

    def shared_object_file(self, wasm: Path, output: Path) -> None:
        require_file(lucetc_path(), stage="codegen")
        require_file(wasm, stage="codegen")
        for binding in self.bindings:
            require_file(binding, stage="codegen")
        run_tool(
            self.command(wasm, output),
            stage="codegen",
            print_output=self.print_output,
            logger=self.logger,
        )


__all__ = ["CodeGenerator", "LucetcCodeGenerator"]
