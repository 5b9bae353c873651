"""Typed build error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import StrEnum
from pathlib import Path

# Captured streams are kept whole on the error; only this many trailing
# characters of each are rendered.
STREAM_TAIL = 2000


class ErrorCode(StrEnum):
    """Stable error identifiers shared by every build stage."""

    FILE_NOT_FOUND = "E_FILE_NOT_FOUND"
    EXECUTION = "E_EXECUTION"
    CODEGEN = "E_CODEGEN"
    IO = "E_IO"


class WasiSdkError(Exception):
    """Base error class that carries code, optional hint, and context."""

    code: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        for key, value in self.context.items():
            if not value:
                continue
            # Multi-line values (captured tool output) continue on indented lines.
            lines = value.rstrip("\n").splitlines() or [""]
            parts.append(f"  {key}: {lines[0]}")
            parts.extend(f"    {line}" for line in lines[1:])
        return "\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": str(self),
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class MissingFileError(WasiSdkError):
    """An input or tool path did not exist when a stage was invoked."""

    def __init__(
        self,
        path: str | Path,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        self.path = str(path)
        super().__init__(
            f"File not found: {self.path}",
            code=ErrorCode.FILE_NOT_FOUND,
            hint=hint,
            context=context,
        )


class ExecutionError(WasiSdkError):
    """A toolchain subprocess exited with a non-zero status.

    The full captured ``stdout`` and ``stderr`` are kept on the error. The
    rendered message shows the tail of each, so printing the error is enough
    to see what the tool said.
    """

    def __init__(
        self,
        message: str,
        *,
        stdout: str,
        stderr: str,
        returncode: int,
        command: Sequence[str] = (),
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode
        self.command = tuple(command)
        merged = {
            "command": " ".join(self.command),
            "returncode": str(returncode),
            "stdout": stdout[-STREAM_TAIL:],
            "stderr": stderr[-STREAM_TAIL:],
            **(context or {}),
        }
        super().__init__(message, code=ErrorCode.EXECUTION, hint=hint, context=merged)

    def to_dict(self) -> dict[str, object]:
        payload = super().to_dict()
        payload["stdout"] = self.stdout
        payload["stderr"] = self.stderr
        return payload


class CodegenError(WasiSdkError):
    """The native code generator failed; the cause is chained, not exposed."""

    def __init__(
        self,
        message: str = "Native code generation failed.",
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.CODEGEN, hint=hint, context=context)


class WasiSdkIOError(WasiSdkError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.IO, hint=hint, context=context)


__all__ = [
    "STREAM_TAIL",
    "CodegenError",
    "ErrorCode",
    "ExecutionError",
    "MissingFileError",
    "WasiSdkError",
    "WasiSdkIOError",
]
