"""Load task lists from YAML."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from autotask.definitions import (
    KIND_ALIASES,
    ActionDefinition,
    Copy,
    CreateDirectory,
    Move,
    Remove,
    RunShellCommand,
    Task,
)


class ParseError(ValueError):
    """Raised when a task file is malformed or names an unsupported action."""


def load_tasks(
    path: Path | str,
    *,
    strict: bool = True,
    logger: logging.Logger | None = None,
) -> list[Task]:
    """Read ``path`` and return its tasks in declaration order.

    ``OSError`` from reading the file propagates; everything else wrong with
    the content is a ``ParseError``.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as stream:
        try:
            data = yaml.safe_load(stream)
        except yaml.YAMLError as exc:
            raise ParseError(f"{path}: invalid YAML: {exc}") from exc
    return parse_tasks(data, strict=strict, logger=logger)


def parse_tasks(
    data: Any,
    *,
    strict: bool = True,
    logger: logging.Logger | None = None,
) -> list[Task]:
    """Validate an already-decoded document.

    Unknown action kinds are a ``ParseError`` when ``strict``; otherwise they
    are logged and dropped.
    """
    logger = logger or logging.getLogger("autotask.loader")
    if not isinstance(data, dict):
        raise ParseError("Task file must be a mapping with a 'tasks' list")
    entries = data.get("tasks")
    if not isinstance(entries, list):
        raise ParseError("Task file must contain a 'tasks' list")

    tasks: list[Task] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ParseError(f"Task #{index}: expected a mapping, got {type(entry).__name__}")
        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ParseError(f"Task #{index}: 'name' must be a non-empty string")
        kind = entry.get("action")
        if not isinstance(kind, str):
            raise ParseError(f"Task #{index} ({name}): 'action' must be a string")

        definition_type = KIND_ALIASES.get(kind)
        if definition_type is None:
            if strict:
                raise ParseError(f"Task #{index} ({name}): unknown action '{kind}'")
            logger.warning("Unknown action '%s' for task '%s', skipping.", kind, name)
            continue

        fields = entry.get("args", entry)
        if not isinstance(fields, dict):
            raise ParseError(f"Task #{index} ({name}): 'args' must be a mapping")
        tasks.append(Task(name=name, action=_build_definition(definition_type, fields, index, name)))
    return tasks


def _build_definition(definition_type: type, fields: dict, index: int, name: str) -> ActionDefinition:
    def required(key: str) -> str:
        value = fields.get(key)
        if not isinstance(value, str) or not value.strip():
            raise ParseError(f"Task #{index} ({name}): '{key}' must be a non-empty string")
        return value

    if definition_type is CreateDirectory:
        return CreateDirectory(path=Path(required("path")))
    if definition_type is Copy:
        return Copy(src=Path(required("src")), dest=Path(required("dest")))
    if definition_type is Move:
        return Move(src=Path(required("src")), dest=Path(required("dest")))
    if definition_type is Remove:
        return Remove(path=Path(required("path")))
    if definition_type is RunShellCommand:
        return RunShellCommand(command=required("command"))
    raise TypeError(f"No field schema for {definition_type.__name__}")
