"""Shared test fixtures."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest


class FakeRunResult:
    def __init__(self, returncode: int = 0, stdout: bytes = b"", stderr: bytes = b"") -> None:
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


@dataclass(slots=True)
class FakeToolchain:
    """Stand-in for the WASI SDK: fake binaries on disk and a recording ``subprocess.run``."""

    root: Path
    clang: Path
    sysroot: Path
    lucetc: Path
    commands: list[list[str]] = field(default_factory=list)
    returncode: int = 0
    stdout: bytes = b""
    stderr: bytes = b""

    def run(self, command: list[str], **_: object) -> FakeRunResult:
        argv = list(command)
        self.commands.append(argv)
        if self.returncode == 0 and "-o" in argv:
            output = Path(argv[argv.index("-o") + 1])
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_bytes(b"\0asm")
        return FakeRunResult(self.returncode, self.stdout, self.stderr)

    def fail_with(self, returncode: int, *, stdout: bytes = b"", stderr: bytes = b"") -> None:
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


@pytest.fixture
def toolchain(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> FakeToolchain:
    root = tmp_path / "wasi-sdk"
    clang = root / "bin" / "clang"
    lucetc = root / "bin" / "lucetc"
    sysroot = root / "share" / "sysroot"
    for tool in (clang, lucetc):
        tool.parent.mkdir(parents=True, exist_ok=True)
        tool.write_text("#!/bin/sh\n", encoding="utf-8")
    sysroot.mkdir(parents=True)

    fake = FakeToolchain(root=root, clang=clang, sysroot=sysroot, lucetc=lucetc)
    monkeypatch.setenv("WASI_SDK", str(root))
    monkeypatch.delenv("WASI_SYSROOT", raising=False)
    monkeypatch.delenv("CLANG", raising=False)
    monkeypatch.setenv("LUCETC", str(lucetc))
    monkeypatch.delenv("LUCET_WASI_BINDINGS", raising=False)
    monkeypatch.setattr("wasisdk.process.subprocess.run", fake.run)
    return fake


@pytest.fixture
def sources(tmp_path: Path) -> dict[str, Path]:
    src = tmp_path / "src"
    src.mkdir()
    files = {
        "a.c": "int a(void) { return 1; }\n",
        "b.c": "extern int c(void);\nint b(void) { return c(); }\n",
        "a.o": "",
        "b.o": "",
    }
    paths: dict[str, Path] = {}
    for name, content in files.items():
        path = src / name
        path.write_text(content, encoding="utf-8")
        paths[name] = path
    return paths
