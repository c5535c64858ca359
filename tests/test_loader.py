"""Tests for loading task files"""

import logging
from pathlib import Path

import pytest

from autotask.definitions import Copy, CreateDirectory, Move, Remove, RunShellCommand, Task
from autotask.loader import ParseError, load_tasks, parse_tasks


TASKS_YAML = """\
tasks:
  - name: make build dir
    action: mkdir
    path: build/out
  - name: copy config
    action: copy
    src: config.example
    dest: config.yaml
  - name: rotate log
    action: move
    src: app.log
    dest: app.log.1
  - name: drop stale lock
    action: remove
    path: app.lock
  - name: say hi
    action: shell
    command: echo hi
"""


class TestLoadTasks:
    """Test reading task files from disk"""

    def test_loads_every_kind_in_order(self, tmp_path):
        path = tmp_path / "tasks.yaml"
        path.write_text(TASKS_YAML, encoding="utf-8")

        tasks = load_tasks(path)

        assert [task.name for task in tasks] == [
            "make build dir",
            "copy config",
            "rotate log",
            "drop stale lock",
            "say hi",
        ]
        assert tasks[0] == Task("make build dir", CreateDirectory(path=Path("build/out")))
        assert tasks[1].action == Copy(src=Path("config.example"), dest=Path("config.yaml"))
        assert tasks[2].action == Move(src=Path("app.log"), dest=Path("app.log.1"))
        assert tasks[3].action == Remove(path=Path("app.lock"))
        assert tasks[4].action == RunShellCommand(command="echo hi")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_tasks(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "tasks.yaml"
        path.write_text("tasks: [unclosed", encoding="utf-8")

        with pytest.raises(ParseError):
            load_tasks(path)


class TestParseTasks:
    """Test schema validation of decoded documents"""

    def test_legacy_file_alias(self):
        tasks = parse_tasks({"tasks": [{"name": "d", "action": "file", "path": "/tmp/d"}]})

        assert tasks[0].action == CreateDirectory(path=Path("/tmp/d"))

    def test_nested_args_mapping(self):
        data = {"tasks": [{"name": "c", "action": "copy", "args": {"src": "a", "dest": "b"}}]}

        assert parse_tasks(data)[0].action == Copy(src=Path("a"), dest=Path("b"))

    def test_empty_task_list(self):
        assert parse_tasks({"tasks": []}) == []

    def test_action_names_are_case_sensitive(self):
        with pytest.raises(ParseError, match="COPY"):
            parse_tasks({"tasks": [{"name": "n", "action": "COPY", "src": "a", "dest": "b"}]})

    @pytest.mark.parametrize(
        "data",
        [
            None,
            [],
            {"tasks": "mkdir"},
            {"tasks": ["not a mapping"]},
            {"tasks": [{"action": "mkdir", "path": "a"}]},
            {"tasks": [{"name": "n", "path": "a"}]},
            {"tasks": [{"name": "n", "action": "copy", "src": "a"}]},
            {"tasks": [{"name": "n", "action": "mkdir", "path": 5}]},
            {"tasks": [{"name": "n", "action": "shell", "command": ""}]},
            {"tasks": [{"name": "n", "action": "move", "args": "a b"}]},
        ],
    )
    def test_malformed(self, data):
        with pytest.raises(ParseError):
            parse_tasks(data)

    def test_error_names_the_task(self):
        with pytest.raises(ParseError, match="copy it"):
            parse_tasks({"tasks": [{"name": "copy it", "action": "copy", "src": "a"}]})

    def test_unknown_action_is_fatal_when_strict(self):
        data = {"tasks": [{"name": "n", "action": "chmod", "path": "a"}]}

        with pytest.raises(ParseError, match="chmod"):
            parse_tasks(data)

    def test_unknown_action_is_skipped_when_lenient(self, caplog):
        data = {
            "tasks": [
                {"name": "perm", "action": "chmod", "path": "a"},
                {"name": "dir", "action": "mkdir", "path": "a"},
            ]
        }

        with caplog.at_level(logging.WARNING):
            tasks = parse_tasks(data, strict=False)

        assert [task.name for task in tasks] == ["dir"]
        assert "Unknown action 'chmod' for task 'perm'" in caplog.text

    def test_lenient_still_rejects_missing_fields(self):
        with pytest.raises(ParseError):
            parse_tasks({"tasks": [{"name": "n", "action": "remove"}]}, strict=False)
