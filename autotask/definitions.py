"""Typed task records produced by the loader."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union


@dataclass(frozen=True)
class CreateDirectory:
    path: Path

    def describe(self) -> str:
        return f"mkdir {self.path}"


@dataclass(frozen=True)
class Copy:
    src: Path
    dest: Path

    def describe(self) -> str:
        return f"copy {self.src} -> {self.dest}"


@dataclass(frozen=True)
class Move:
    src: Path
    dest: Path

    def describe(self) -> str:
        return f"move {self.src} -> {self.dest}"


@dataclass(frozen=True)
class Remove:
    path: Path

    def describe(self) -> str:
        return f"remove {self.path}"


@dataclass(frozen=True)
class RunShellCommand:
    command: str

    def describe(self) -> str:
        return f"shell {self.command!r}"


ActionDefinition = Union[CreateDirectory, Copy, Move, Remove, RunShellCommand]

DEFINITION_TYPES: tuple[type, ...] = (CreateDirectory, Copy, Move, Remove, RunShellCommand)

# Names accepted in the ``action`` field of a task entry. ``file`` is the
# older spelling of ``mkdir``.
KIND_ALIASES: dict[str, type] = {
    "mkdir": CreateDirectory,
    "file": CreateDirectory,
    "copy": Copy,
    "move": Move,
    "mv": Move,
    "remove": Remove,
    "rm": Remove,
    "shell": RunShellCommand,
}


@dataclass(frozen=True)
class Task:
    """A named action as declared in the task file."""

    name: str
    action: ActionDefinition
