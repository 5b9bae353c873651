"""Shared subprocess execution for toolchain stages."""

from __future__ import annotations

import subprocess
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from wasisdk.errors import ExecutionError, MissingFileError, WasiSdkIOError
from wasisdk.observability import BuildLog, tool_name


@dataclass(frozen=True, slots=True)
class ToolOutput:
    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


def require_file(path: Path, *, stage: str) -> None:
    if not path.exists():
        raise MissingFileError(
            path,
            hint="Check the path, or set WASI_SDK / CLANG / LUCETC for toolchain binaries.",
            context={"stage": stage},
        )


def run_tool(
    command: Sequence[str | Path],
    *,
    stage: str,
    print_output: bool = False,
    logger: BuildLog | None = None,
) -> ToolOutput:
    """Run a toolchain command, capture its streams, and check its status.

    Streams are always captured. With ``print_output`` they are also written
    to this process's stdout/stderr before the status is inspected.
    """
    argv = tuple(str(part) for part in command)
    tool = tool_name(argv)
    if logger is not None:
        logger.invoked(stage, argv)

    try:
        completed = subprocess.run(argv, capture_output=True, check=False)
    except OSError as exc:
        raise WasiSdkIOError(
            f"Unable to start {tool}.",
            hint="Ensure the tool is executable.",
            context={"stage": stage, "command": " ".join(argv), "error": str(exc)},
        ) from exc

    output = ToolOutput(
        command=argv,
        returncode=completed.returncode,
        stdout=_decode(completed.stdout),
        stderr=_decode(completed.stderr),
    )
    if print_output:
        sys.stdout.write(output.stdout)
        sys.stdout.flush()
        sys.stderr.write(output.stderr)
        sys.stderr.flush()

    if logger is not None:
        logger.finished(stage, argv, output.returncode)

    if output.returncode != 0:
        raise ExecutionError(
            f"{tool} reported an error.",
            stdout=output.stdout,
            stderr=output.stderr,
            returncode=output.returncode,
            command=argv,
            hint=f"Check {tool} output and the {stage} flags.",
            context={"stage": stage},
        )
    return output


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, str):
        return data
    return data.decode("utf-8", errors="replace")
