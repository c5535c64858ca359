"""YAML-driven task orchestration."""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable

from autotask.actions import Action, create_action
from autotask.definitions import Task
from autotask.loader import load_tasks


class FlowError(RuntimeError):
    """Raised when a run cannot start with the given configuration."""


@dataclass(frozen=True)
class RunConfig:
    dry_run: bool = False
    strict: bool = True
    check_exit_code: bool = False
    start_from: str | None = None


class TaskState(Enum):
    PENDING = "pending"
    SKIPPED = "skipped"
    DRY_RUN = "dry-run"
    EXECUTED = "executed"
    FAILED = "failed"


@dataclass
class TaskOutcome:
    name: str
    state: TaskState = TaskState.PENDING
    error: str | None = None


@dataclass
class RunReport:
    outcomes: list[TaskOutcome] = field(default_factory=list)

    def counts(self) -> dict[TaskState, int]:
        return dict(Counter(outcome.state for outcome in self.outcomes))

    @property
    def failed(self) -> list[TaskOutcome]:
        return [outcome for outcome in self.outcomes if outcome.state is TaskState.FAILED]

    def summary(self) -> str:
        counts = self.counts()
        parts = [
            f"{state.value}={counts[state]}"
            for state in TaskState
            if counts.get(state)
        ]
        return f"{len(self.outcomes)} task(s): " + (", ".join(parts) or "none")


class FlowExecutor:
    """Executes the tasks described in a YAML file, one at a time, in order."""

    def __init__(
        self,
        config: RunConfig | None = None,
        *,
        logger: logging.Logger | None = None,
        action_factory: Callable[..., Action] = create_action,
    ) -> None:
        self.config = config or RunConfig()
        self.logger = logger or logging.getLogger("autotask.flow")
        self.action_factory = action_factory

    def load(self, path: Path) -> list[Task]:
        return load_tasks(path, strict=self.config.strict, logger=self.logger)

    def run_file(self, path: Path) -> RunReport:
        tasks = self.load(path)
        self.logger.info("Starting task execution (%d task(s) from %s)", len(tasks), path)
        report = self.run(tasks)
        self.logger.info("Finished: %s", report.summary())
        if report.failed:
            self.logger.warning(
                "Failed task(s): %s", ", ".join(outcome.name for outcome in report.failed)
            )
        return report

    def run(self, tasks: Iterable[Task]) -> RunReport:
        """Run every selected task; a failed task never stops the ones after it."""
        selected = self._select(list(tasks))
        report = RunReport()
        for task in selected:
            report.outcomes.append(self.run_task(task))
        return report

    def run_task(self, task: Task) -> TaskOutcome:
        outcome = TaskOutcome(name=task.name)
        self.logger.debug("Checking task '%s': %s", task.name, task.action.describe())
        try:
            action = self.action_factory(task.action, check_exit_code=self.config.check_exit_code)
            if not action.check():
                self.logger.info("Condition not met for task '%s', skipping.", task.name)
                outcome.state = TaskState.SKIPPED
                return outcome

            if self.config.dry_run:
                self.logger.info(
                    "[DRY-RUN] Condition met for task '%s', action would be executed.",
                    task.name,
                )
                outcome.state = TaskState.DRY_RUN
                return outcome

            self.logger.info("Executing task '%s'", task.name)
            result = action.perform()
        except Exception as exc:
            self.logger.error("Task '%s' failed: %s", task.name, exc)
            outcome.state = TaskState.FAILED
            outcome.error = str(exc)
            return outcome

        for line in result.message.splitlines():
            line = line.strip()
            if line:
                self.logger.info("[%s] %s", task.name, line)
        self.logger.debug("Task '%s' completed", task.name)
        outcome.state = TaskState.EXECUTED
        return outcome

    def _select(self, tasks: list[Task]) -> list[Task]:
        start_from = self.config.start_from
        if start_from is None:
            return tasks
        for index, task in enumerate(tasks):
            if task.name == start_from:
                if index:
                    self.logger.info("Resuming from task '%s', %d task(s) not run", start_from, index)
                return tasks[index:]
        raise FlowError(f"No task named '{start_from}' to start from")
