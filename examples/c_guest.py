"""Build the hello-world C guest against a trivial generated header."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Any

from wasisdk import CGuestApp


class StaticHeader:
    def generate(self, package: Any, output: Path) -> None:
        output.write_text(
            f"#pragma once\n/* bindings for {package} */\n",
            encoding="utf-8",
        )


def main() -> None:
    with CGuestApp(StaticHeader(), print_output=True) as app:
        so_file = app.build("example")
        shutil.copy2(so_file, "guest.so")
    print("guest shared object: guest.so")


if __name__ == "__main__":
    main()
