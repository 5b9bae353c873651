"""Link-then-codegen pipeline producing a shared object from C inputs or objects."""

from __future__ import annotations

import shutil
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Self

from wasisdk.codegen import CodeGenerator, LucetcCodeGenerator
from wasisdk.errors import CodegenError, WasiSdkIOError
from wasisdk.link import Link
from wasisdk.link_opts import LinkOpt
from wasisdk.observability import BuildLog
from wasisdk.platforms import HostPlatform

INTERMEDIATE_WASM = "out.wasm"


class Pipeline:
    """Links ``inputs`` to wasm in a scratch directory, then runs the code generator.

    Flag and intent accumulators forward to the embedded :class:`Link`.
    """

    def __init__(
        self,
        inputs: Sequence[str | Path] | str | Path,
        *,
        codegen: CodeGenerator | None = None,
        platform: HostPlatform | None = None,
        logger: BuildLog | None = None,
    ) -> None:
        self.logger = logger if logger is not None else BuildLog()
        if platform is None:
            self.link = Link(inputs, logger=self.logger)
        else:
            self.link = Link(inputs, platform=platform, logger=self.logger)
        self.codegen: CodeGenerator = (
            codegen if codegen is not None else LucetcCodeGenerator(logger=self.logger)
        )

    @property
    def print_output(self) -> bool:
        return self.link.print_output

    @print_output.setter
    def print_output(self, value: bool) -> None:
        self.link.print_output = value

    def set_print_output(self, print_output: bool) -> Self:
        self.link.set_print_output(print_output)
        return self

    def cflag(self, cflag: str) -> Self:
        self.link.cflag(cflag)
        return self

    def include(self, include: str | Path) -> Self:
        self.link.include(include)
        return self

    def link_opt(self, link_opt: LinkOpt) -> Self:
        self.link.link_opt(link_opt)
        return self

    def export(self, symbol: str) -> Self:
        self.link.export(symbol)
        return self

    def build(self, output: str | Path) -> Path:
        """Produce the shared object ``output``.

        The scratch directory is removed before returning on every path. A
        cleanup failure is raised only when linking and code generation
        succeeded; otherwise the earlier error propagates.
        """
        output_path = Path(output)
        try:
            workdir = Path(tempfile.mkdtemp(prefix="wasisdk-"))
        except OSError as exc:
            raise WasiSdkIOError(
                "Unable to create a temporary build directory.",
                context={"stage": "pipeline", "error": str(exc)},
            ) from exc

        try:
            wasm_file = workdir / INTERMEDIATE_WASM
            self.link.link(wasm_file)
            self._generate(wasm_file, output_path)
        except BaseException:
            self._discard(workdir)
            raise
        self._release(workdir)
        return output_path

    def _generate(self, wasm_file: Path, output: Path) -> None:
        self.logger.note("codegen", "start", f"{wasm_file} -> {output}")
        try:
            self.codegen.shared_object_file(wasm_file, output)
        except Exception as exc:
            raise CodegenError(
                hint="Inspect the chained cause for code generator output.",
                context={
                    "stage": "codegen",
                    "output": str(output),
                    "cause": str(exc),
                },
            ) from exc

    def _release(self, workdir: Path) -> None:
        try:
            shutil.rmtree(workdir)
        except OSError as exc:
            raise WasiSdkIOError(
                "Unable to remove the temporary build directory.",
                context={"stage": "cleanup", "path": str(workdir), "error": str(exc)},
            ) from exc
        self.logger.note("cleanup", "cleanup", f"removed {workdir}")

    def _discard(self, workdir: Path) -> None:
        try:
            shutil.rmtree(workdir)
        except OSError as exc:
            self.logger.note(
                "cleanup",
                "cleanup",
                f"failed to remove {workdir}: {exc}",
                level="warning",
            )


__all__ = ["INTERMEDIATE_WASM", "Pipeline"]
