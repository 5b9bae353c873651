"""C guest application builder driven by a package description."""

from __future__ import annotations

import shutil
import tempfile
import textwrap
from dataclasses import dataclass, field
from pathlib import Path
from types import TracebackType
from typing import Any, Protocol, Self

from wasisdk.codegen import CodeGenerator, LucetcCodeGenerator
from wasisdk.errors import CodegenError, WasiSdkIOError
from wasisdk.observability import BuildLog
from wasisdk.process import require_file, run_tool
from wasisdk.toolchain import clang_path, wasi_bindings

MAIN_C = textwrap.dedent("""\
    #include <stdio.h>
    #include "idl.h"

    int main(int argc, char* argv[]) {
        printf("hello, world from c guest");
    }
""")


class HeaderGenerator(Protocol):
    def generate(self, package: Any, output: Path) -> None:
        """Write the C guest header for ``package`` to ``output``."""


class Workspace:
    """Scratch directory with ``src/`` and ``out/`` subdirectories."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.source_dir.mkdir(parents=True, exist_ok=True)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def create(cls) -> Workspace:
        try:
            return cls(Path(tempfile.mkdtemp(prefix="wasisdk-guest-")))
        except OSError as exc:
            raise WasiSdkIOError(
                "Unable to create a guest workspace.",
                context={"stage": "workspace", "error": str(exc)},
            ) from exc

    @property
    def source_dir(self) -> Path:
        return self.root / "src"

    @property
    def output_dir(self) -> Path:
        return self.root / "out"

    def source_path(self, name: str) -> Path:
        return self.source_dir / name

    def output_path(self, name: str) -> Path:
        return self.output_dir / name

    def close(self) -> None:
        if self.root.exists():
            shutil.rmtree(self.root)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def _default_codegen(logger: BuildLog) -> CodeGenerator:
    codegen = LucetcCodeGenerator(logger=logger)
    bindings = wasi_bindings()
    if bindings is not None:
        codegen.with_bindings(bindings)
    return codegen


@dataclass(slots=True)
class CGuestApp:
    """Builds a hello-world C guest against a generated ``idl.h``.

    clang is invoked directly here rather than through the Link stage, with
    the workspace source directory on the include path.

    Use as a context manager to remove the workspace once the shared object
    has been copied out, whether or not the build succeeded.
    """

    header_generator: HeaderGenerator
    codegen: CodeGenerator | None = None
    workspace: Workspace = field(default_factory=Workspace.create)
    print_output: bool = False
    logger: BuildLog = field(default_factory=BuildLog)

    def __post_init__(self) -> None:
        if self.codegen is None:
            self.codegen = _default_codegen(self.logger)

    def close(self) -> None:
        self.workspace.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def build(self, package: Any) -> Path:
        """Build ``package``'s guest and return the shared object path."""
        self._generate_idl_h(package)
        self._generate_main_c()
        wasm_file = self._wasi_clang()
        so_file = self.workspace.output_path("out.so")
        try:
            self.codegen.shared_object_file(wasm_file, so_file)
        except Exception as exc:
            raise CodegenError(
                hint="Inspect the chained cause for code generator output.",
                context={"stage": "codegen", "output": str(so_file), "cause": str(exc)},
            ) from exc
        return so_file

    def _generate_idl_h(self, package: Any) -> None:
        header = self.workspace.source_path("idl.h")
        try:
            self.header_generator.generate(package, header)
        except Exception as exc:
            raise CodegenError(
                "C guest header generation failed.",
                context={"stage": "header", "output": str(header), "cause": str(exc)},
            ) from exc

    def _generate_main_c(self) -> None:
        main_c = self.workspace.source_path("main.c")
        try:
            main_c.write_text(MAIN_C, encoding="utf-8")
        except OSError as exc:
            raise WasiSdkIOError(
                "Unable to write guest main.c.",
                context={"stage": "guest", "path": str(main_c), "error": str(exc)},
            ) from exc

    def _wasi_clang(self) -> Path:
        clang = clang_path()
        require_file(clang, stage="guest")
        wasm_file = self.workspace.output_path("out.wasm")
        run_tool(
            (
                clang,
                "--std=c99",
                self.workspace.source_path("main.c"),
                "-I",
                self.workspace.source_dir,
                "-o",
                wasm_file,
            ),
            stage="guest",
            print_output=self.print_output,
            logger=self.logger,
        )
        return wasm_file


__all__ = ["CGuestApp", "HeaderGenerator", "MAIN_C", "Workspace"]
