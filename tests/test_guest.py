from pathlib import Path
from typing import Any

import pytest

from wasisdk import (
    CGuestApp,
    CodegenError,
    ExecutionError,
    LucetcCodeGenerator,
    MissingFileError,
    Workspace,
)
from wasisdk.guest import MAIN_C

from .conftest import FakeToolchain


class FakeHeaderGenerator:
    def __init__(self) -> None:
        self.packages: list[Any] = []

    def generate(self, package: Any, output: Path) -> None:
        self.packages.append(package)
        output.write_text(f"/* {package} */\n", encoding="utf-8")


class FakeCodegen:
    def __init__(self) -> None:
        self.calls: list[tuple[Path, Path]] = []

    def shared_object_file(self, wasm: Path, output: Path) -> None:
        self.calls.append((wasm, output))
        output.write_bytes(b"\x7fELF")


def test_workspace_paths_and_close(tmp_path: Path) -> None:
    with Workspace(tmp_path / "work") as work:
        assert work.source_path("idl.h") == tmp_path / "work" / "src" / "idl.h"
        assert work.output_path("out.so") == tmp_path / "work" / "out" / "out.so"
        assert work.source_dir.is_dir()
        assert work.output_dir.is_dir()

    assert not (tmp_path / "work").exists()


def test_workspace_create_uses_fresh_temporary_root() -> None:
    first = Workspace.create()
    second = Workspace.create()
    try:
        assert first.root != second.root
        assert first.source_dir.is_dir()
    finally:
        first.close()
        second.close()

    assert not first.root.exists()


def test_guest_build_generates_sources_and_shared_object(
    tmp_path: Path,
    toolchain: FakeToolchain,
) -> None:
    header_generator = FakeHeaderGenerator()
    codegen = FakeCodegen()
    work = Workspace(tmp_path / "work")
    app = CGuestApp(header_generator, codegen=codegen, workspace=work)

    so_file = app.build("demo-package")

    assert so_file == work.output_path("out.so")
    assert so_file.exists()
    assert header_generator.packages == ["demo-package"]
    assert work.source_path("idl.h").read_text(encoding="utf-8") == "/* demo-package */\n"
    main_c = work.source_path("main.c").read_text(encoding="utf-8")
    assert main_c == MAIN_C
    assert '#include "idl.h"' in main_c
    assert toolchain.commands == [
        [
            str(toolchain.clang),
            "--std=c99",
            str(work.source_path("main.c")),
            "-I",
            str(work.source_dir),
            "-o",
            str(work.output_path("out.wasm")),
        ],
    ]
    assert codegen.calls == [(work.output_path("out.wasm"), so_file)]


def test_guest_clang_failure_stops_before_codegen(
    tmp_path: Path,
    toolchain: FakeToolchain,
) -> None:
    toolchain.fail_with(1, stderr=b"main.c:2: fatal error: 'idl.h' file not found")
    codegen = FakeCodegen()
    app = CGuestApp(FakeHeaderGenerator(), codegen=codegen, workspace=Workspace(tmp_path / "w"))

    with pytest.raises(ExecutionError) as excinfo:
        app.build("pkg")

    assert "idl.h" in excinfo.value.stderr
    assert codegen.calls == []


def test_guest_requires_clang(tmp_path: Path, toolchain: FakeToolchain) -> None:
    toolchain.clang.unlink()
    app = CGuestApp(FakeHeaderGenerator(), codegen=FakeCodegen(), workspace=Workspace(tmp_path))

    with pytest.raises(MissingFileError):
        app.build("pkg")


def test_header_generator_failure_is_a_codegen_error(tmp_path: Path) -> None:
    class BrokenHeaderGenerator:
        def generate(self, package: Any, output: Path) -> None:
            raise KeyError(package)

    app = CGuestApp(BrokenHeaderGenerator(), codegen=FakeCodegen(), workspace=Workspace(tmp_path))

    with pytest.raises(CodegenError) as excinfo:
        app.build("pkg")

    assert excinfo.value.context["stage"] == "header"
    assert isinstance(excinfo.value.__cause__, KeyError)


def test_default_codegen_carries_wasi_bindings(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("LUCET_WASI_BINDINGS", str(tmp_path / "bindings.json"))
    app = CGuestApp(FakeHeaderGenerator(), workspace=Workspace(tmp_path / "w"))
    try:
        assert isinstance(app.codegen, LucetcCodeGenerator)
        assert app.codegen.bindings == [tmp_path / "bindings.json"]
    finally:
        app.close()

    assert not (tmp_path / "w").exists()


def test_workspace_is_removed_when_build_fails_inside_with_block() -> None:
    class BrokenHeaderGenerator:
        def generate(self, package: Any, output: Path) -> None:
            raise ValueError(f"no such package: {package}")

    with pytest.raises(CodegenError):
        with CGuestApp(BrokenHeaderGenerator(), codegen=FakeCodegen()) as app:
            root = app.workspace.root
            assert root.is_dir()
            app.build("pkg")

    assert not root.exists()


def test_default_codegen_logs_into_guest_log(tmp_path: Path, toolchain: FakeToolchain) -> None:
    with CGuestApp(FakeHeaderGenerator(), workspace=Workspace(tmp_path / "w")) as app:
        so_file = app.build("pkg")
        assert so_file.exists()

    assert [event.tool for event in app.logger.events if event.action == "invoke"] == [
        "clang",
        "lucetc",
    ]
    assert [command[0] for command in app.logger.commands("codegen")] == [str(toolchain.lucetc)]
