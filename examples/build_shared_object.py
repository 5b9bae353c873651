"""Compile two C files to objects, then link and run lucetc into a shared object.

Usage: python examples/build_shared_object.py a.c b.c out.so
"""

from __future__ import annotations

import sys
from pathlib import Path

from wasisdk import NO_DEFAULT_ENTRY_POINT, Compile, Pipeline, WasiSdkError


def main(argv: list[str]) -> int:
    *sources, output = (Path(arg) for arg in argv)
    objects = [
        Compile(source).cflag("-O2").compile(source.with_suffix(".o"))
        for source in sources
    ]

    pipeline = Pipeline(objects).set_print_output(True)
    pipeline.cflag("-nostartfiles").link_opt(NO_DEFAULT_ENTRY_POINT)
    try:
        so_file = pipeline.build(output)
    except WasiSdkError as exc:
        print(f"[{exc.code}] {exc}", file=sys.stderr)
        for event in pipeline.logger.failures():
            command = " ".join(event.command)
            print(f"  {event.stage}: {command} (status {event.returncode})", file=sys.stderr)
        return 1
    finally:
        pipeline.logger.to_json_lines(output.with_suffix(".build.jsonl"))

    print(f"built {so_file}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
