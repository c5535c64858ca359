"""Idempotent filesystem and shell actions."""
from __future__ import annotations

import errno
import shutil
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from autotask.definitions import (
    DEFINITION_TYPES,
    ActionDefinition,
    Copy,
    CreateDirectory,
    Move,
    Remove,
    RunShellCommand,
)


class ActionError(RuntimeError):
    """Raised when an action fails for a reason other than an OS error."""


class CommandFailedError(ActionError):
    """Raised when a shell command exits non-zero and exit codes are checked."""

    def __init__(self, command: str, returncode: int, stderr: str = "") -> None:
        detail = f": {stderr.strip()}" if stderr.strip() else ""
        super().__init__(f"Command {command!r} exited with status {returncode}{detail}")
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


@dataclass
class ActionResult:
    """Outcome of a performed action; each line of ``message`` is logged."""

    message: str = ""


class Action(ABC):
    """Condition check plus effect for one action kind.

    ``check`` reports whether the effect still needs to happen. ``perform``
    applies it and raises ``OSError`` (or ``ActionError``) on failure; it is
    only called after ``check`` returned true, but nothing holds the state
    steady in between.
    """

    @abstractmethod
    def check(self) -> bool:
        ...

    @abstractmethod
    def perform(self) -> ActionResult:
        ...


class CreateDirectoryAction(Action):
    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def check(self) -> bool:
        return not self.path.exists()

    def perform(self) -> ActionResult:
        self.path.mkdir(parents=True, exist_ok=True)
        return ActionResult(f"Created directory: {self.path}")


class CopyAction(Action):
    def __init__(self, src: Path, dest: Path) -> None:
        self.src = Path(src)
        self.dest = Path(dest)

    def check(self) -> bool:
        return not self.dest.exists()

    def perform(self) -> ActionResult:
        # "xb" so a destination created after check() is reported, not clobbered
        with self.src.open("rb") as source, self.dest.open("xb") as target:
            shutil.copyfileobj(source, target)
        shutil.copymode(self.src, self.dest)
        return ActionResult(f"Copied file from {self.src} to {self.dest}")


class MoveAction(Action):
    def __init__(self, src: Path, dest: Path) -> None:
        self.src = Path(src)
        self.dest = Path(dest)

    def check(self) -> bool:
        return self.src.exists() and not self.dest.exists()

    def perform(self) -> ActionResult:
        if not self.src.exists():
            raise FileNotFoundError(errno.ENOENT, "Source does not exist", str(self.src))
        if self.dest.exists():
            raise FileExistsError(errno.EEXIST, "Destination already exists", str(self.dest))
        shutil.move(str(self.src), str(self.dest))
        return ActionResult(f"Moved file from {self.src} to {self.dest}")


class RemoveAction(Action):
    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def check(self) -> bool:
        return self.path.exists()

    def perform(self) -> ActionResult:
        if self.path.is_dir() and not self.path.is_symlink():
            raise IsADirectoryError(errno.EISDIR, "Refusing to remove a directory", str(self.path))
        self.path.unlink()
        return ActionResult(f"Removed file: {self.path}")


class RunShellCommandAction(Action):
    """Runs a command through the platform shell on every pass.

    With ``check_exit_code`` a non-zero status raises ``CommandFailedError``;
    otherwise the status is only reported in the result message.
    """

    def __init__(self, command: str, *, check_exit_code: bool = False) -> None:
        self.command = command
        self.check_exit_code = check_exit_code

    def check(self) -> bool:
        return True

    def perform(self) -> ActionResult:
        proc = subprocess.run(
            self.command,
            shell=True,
            capture_output=True,
            encoding="utf-8",
            errors="replace",
        )
        if proc.returncode != 0 and self.check_exit_code:
            raise CommandFailedError(self.command, proc.returncode, proc.stderr)

        lines = [f"Executed command: {self.command}"]
        if proc.returncode != 0:
            lines.append(f"exit status: {proc.returncode}")
        lines.extend(f"stdout: {line}" for line in proc.stdout.splitlines())
        lines.extend(f"stderr: {line}" for line in proc.stderr.splitlines())
        return ActionResult("\n".join(lines))


def _build_create_directory(definition: CreateDirectory, **_: object) -> Action:
    return CreateDirectoryAction(definition.path)


def _build_copy(definition: Copy, **_: object) -> Action:
    return CopyAction(definition.src, definition.dest)


def _build_move(definition: Move, **_: object) -> Action:
    return MoveAction(definition.src, definition.dest)


def _build_remove(definition: Remove, **_: object) -> Action:
    return RemoveAction(definition.path)


def _build_shell(definition: RunShellCommand, *, check_exit_code: bool = False, **_: object) -> Action:
    return RunShellCommandAction(definition.command, check_exit_code=check_exit_code)


REGISTRY = {
    CreateDirectory: _build_create_directory,
    Copy: _build_copy,
    Move: _build_move,
    Remove: _build_remove,
    RunShellCommand: _build_shell,
}

_unmapped = [cls.__name__ for cls in DEFINITION_TYPES if cls not in REGISTRY]
if _unmapped:
    raise TypeError(f"No action registered for: {', '.join(_unmapped)}")


def create_action(definition: ActionDefinition, *, check_exit_code: bool = False) -> Action:
    """Build the concrete action for a parsed definition."""
    builder = REGISTRY.get(type(definition))
    if builder is None:
        raise TypeError(f"Unsupported action definition: {definition!r}")
    return builder(definition, check_exit_code=check_exit_code)
