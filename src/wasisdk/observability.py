"""Build event log shared by the toolchain stages of one build."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class BuildEvent:
    """One step of a build: a tool invocation, its exit status, or a note."""

    stage: str
    action: str
    message: str
    level: str = "info"
    tool: str | None = None
    command: tuple[str, ...] = ()
    returncode: int | None = None

    @property
    def failed(self) -> bool:
        return self.returncode is not None and self.returncode != 0

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "stage": self.stage,
            "action": self.action,
            "level": self.level,
            "message": self.message,
        }
        if self.tool is not None:
            payload["tool"] = self.tool
        if self.command:
            payload["command"] = list(self.command)
        if self.returncode is not None:
            payload["returncode"] = self.returncode
        return payload


def tool_name(command: Sequence[str]) -> str | None:
    return Path(command[0]).name if command else None


@dataclass(slots=True)
class BuildLog:
    events: list[BuildEvent] = field(default_factory=list)

    def invoked(self, stage: str, command: Sequence[str]) -> BuildEvent:
        argv = tuple(command)
        return self._append(
            BuildEvent(
                stage=stage,
                action="invoke",
                message=" ".join(argv),
                tool=tool_name(argv),
                command=argv,
            )
        )

    def finished(self, stage: str, command: Sequence[str], returncode: int) -> BuildEvent:
        argv = tuple(command)
        return self._append(
            BuildEvent(
                stage=stage,
                action="result",
                message=f"exited with status {returncode}",
                level="info" if returncode == 0 else "error",
                tool=tool_name(argv),
                command=argv,
                returncode=returncode,
            )
        )

    def note(self, stage: str, action: str, message: str, *, level: str = "info") -> BuildEvent:
        return self._append(BuildEvent(stage=stage, action=action, message=message, level=level))

    def for_stage(self, stage: str) -> list[BuildEvent]:
        return [event for event in self.events if event.stage == stage]

    def commands(self, stage: str | None = None) -> list[tuple[str, ...]]:
        """Argv of every spawned tool, in invocation order."""
        return [
            event.command
            for event in self.events
            if event.action == "invoke" and event.command and stage in (None, event.stage)
        ]

    def failures(self) -> list[BuildEvent]:
        """Tool results with a non-zero exit status."""
        return [event for event in self.events if event.failed]

    def to_json_lines(self, path: str | Path) -> Path:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        lines = [json.dumps(event.to_dict(), sort_keys=True) for event in self.events]
        output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return output_path

    def _append(self, event: BuildEvent) -> BuildEvent:
        self.events.append(event)
        return event


__all__ = ["BuildEvent", "BuildLog", "tool_name"]
