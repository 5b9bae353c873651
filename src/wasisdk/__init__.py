"""Public package entrypoint for the WASI C build driver."""

from .codegen import CodeGenerator, LucetcCodeGenerator
from .compile import Compile, CompileOpts
from .errors import (
    CodegenError,
    ErrorCode,
    ExecutionError,
    MissingFileError,
    WasiSdkError,
    WasiSdkIOError,
)
from .guest import CGuestApp, HeaderGenerator, Workspace
from .link import Link, LinkOpts
from .link_opts import (
    ALLOW_UNDEFINED_ALL,
    DEFAULT_OPTS,
    EXPORT_ALL,
    NO_DEFAULT_ENTRY_POINT,
    SHARED,
    STRIP_DEBUG,
    STRIP_UNUSED,
    LinkOpt,
    LinkOptKind,
    as_ldflags,
)
from .observability import BuildEvent, BuildLog
from .pipeline import Pipeline
from .platforms import HostPlatform, detect_host
from .toolchain import clang_path, sysroot, wasi_sdk

__all__ = [
    "ALLOW_UNDEFINED_ALL",
    "BuildEvent",
    "BuildLog",
    "CGuestApp",
    "CodeGenerator",
    "CodegenError",
    "Compile",
    "CompileOpts",
    "DEFAULT_OPTS",
    "EXPORT_ALL",
    "ErrorCode",
    "ExecutionError",
    "HeaderGenerator",
    "HostPlatform",
    "Link",
    "LinkOpt",
    "LinkOptKind",
    "LinkOpts",
    "LucetcCodeGenerator",
    "MissingFileError",
    "NO_DEFAULT_ENTRY_POINT",
    "Pipeline",
    "SHARED",
    "STRIP_DEBUG",
    "STRIP_UNUSED",
    "WasiSdkError",
    "WasiSdkIOError",
    "Workspace",
    "as_ldflags",
    "clang_path",
    "detect_host",
    "sysroot",
    "wasi_sdk",
]
