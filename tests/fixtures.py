# tests/fixtures.py
import os
import sys
import unittest
from typing import Any, List, Tuple

# Get the absolute path to the project root (one level up from tests/)
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))

# Insert root into sys.path so we can import 'harvest'
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from harvest.core.tasks.events import TaskEventEmitter
from harvest.core.tasks.manager import TaskManager
from harvest.core.tasks.task import TaskConfig
from harvest.utils.logger import Logger, LogLevel

class LogCapture:
    """Collects formatted Logger lines instead of printing them."""

    def __init__(self):
        self.lines: List[str] = []

    def __call__(self, line: str):
        self.lines.append(line)

    def matching(self, level: str, text: str = "") -> List[str]:
        tag = f"[{level:<5}]"
        return [line for line in self.lines if tag in line and text in line]

class EventRecorder:
    """Subscribes to a set of events and records every emission in order."""

    def __init__(self, emitter: TaskEventEmitter, *events: str):
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []
        for event in events:
            emitter.on(event, self._make_handler(event))

    def _make_handler(self, event: str):
        def handler(*args):
            self.calls.append((event, args))
        return handler

    def names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def of(self, event: str) -> List[Tuple[Any, ...]]:
        return [args for name, args in self.calls if name == event]

def animal_config(task_id: str, **fields) -> TaskConfig:
    fields.setdefault("required_actions", ["feed", "talk"])
    return TaskConfig(kind="animal", task_id=task_id, fields=fields)

def basic_config(task_id: str, title: str = "Chore", **fields) -> TaskConfig:
    return TaskConfig(kind="basic", task_id=task_id, fields={"title": title, **fields})

class TaskTestBase(unittest.TestCase):
    """Base class for task system tests: captured logging and a fresh manager."""

    def setUp(self):
        """Runs before EVERY test function."""
        # 1. Route log lines into a buffer so assertions can inspect them
        self.logs = LogCapture()
        self._previous_level = Logger.get_level()
        Logger.set_level(LogLevel.DEBUG)
        Logger.set_sink(self.logs)

        # 2. Fresh manager per test
        self.manager = TaskManager()

    def tearDown(self):
        self.manager.destroy()
        Logger.set_sink(None)
        Logger.set_level(self._previous_level)
