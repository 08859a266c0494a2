# harvest/core/tasks/task.py
import math
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from harvest.config import TASK_KIND_BASIC
from .errors import TaskValidationError
from .events import TaskEventEmitter

# Operations every task kind must provide; checked by TaskFactory on registration.
TASK_CAPABILITIES = (
    "update_progress",
    "check_completion",
    "get_progress_percentage",
    "get_progress_string",
    "complete",
    "fail",
    "reset",
    "is_active",
    "is_completed",
    "is_failed",
    "bind_events",
)

class TaskStatus:
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"

def round_percentage(value: float) -> int:
    """Rounds half up, so 12.5 shows as 13 rather than 12."""
    return int(math.floor(value + 0.5))

def task_event_name(task_id: str, event: str) -> str:
    """Routing key a task publishes under, e.g. 'cow1:completed'."""
    return f"{task_id}:{event}"


@dataclass
class TaskConfig:
    """
    Declarative description of a task that has not been built yet.

    TaskManager.add_task accepts either one of these or a live Task; the
    two are never confused because they are different types.
    """
    kind: str
    task_id: str
    fields: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'TaskConfig':
        fields = dict(data)
        kind = fields.pop("kind", None) or fields.pop("type", None) or TASK_KIND_BASIC
        task_id = fields.pop("id", None) or fields.pop("task_id", None) or ""
        return cls(kind=kind, task_id=task_id, fields=fields)


class Task:
    """
    A single unit of trackable work.

    The generic ("basic") kind never completes on its own; it is finished
    with complete(). Other kinds override check_completion() and the
    progress reporting methods.
    """

    def __init__(self,
                 task_id: str,
                 title: Optional[str] = None,
                 description: str = "",
                 priority: int = 0,
                 kind: str = TASK_KIND_BASIC,
                 category: Optional[str] = None,
                 requirements: Optional[Dict[str, Any]] = None,
                 rewards: Optional[Dict[str, Any]] = None,
                 metadata: Optional[Dict[str, Any]] = None):
        if not task_id:
            raise TaskValidationError("Task must have an ID")
        if not title:
            raise TaskValidationError(f"Task '{task_id}' must have a title")

        self.id = task_id
        self.kind = kind
        self.title = title
        self.description = description or ""
        try:
            self.priority = int(priority or 0)
        except (TypeError, ValueError):
            # Named priorities ("high") are resolved by the catalog before construction
            raise TaskValidationError(f"Task '{task_id}' has a non-numeric priority: {priority!r}") from None
        self.category = category
        self.requirements: Dict[str, Any] = dict(requirements or {})
        self.rewards: Dict[str, Any] = dict(rewards or {})
        self.metadata: Dict[str, Any] = dict(metadata or {})

        self.status = TaskStatus.ACTIVE
        self.progress: Dict[str, Any] = {}

        self.created_at = time.time()
        self.completed_at: Optional[float] = None

        # Private hub until a manager binds its own
        self._events = TaskEventEmitter()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r} kind={self.kind!r} status={self.status!r}>"

    # --- Notifications ---

    def bind_events(self, emitter: TaskEventEmitter):
        """Publishes this task's notifications on `emitter` from now on."""
        self._events = emitter

    @property
    def events(self) -> TaskEventEmitter:
        return self._events

    def _publish(self, event: str, *args):
        self._events.emit(task_event_name(self.id, event), *args)

    # --- State transitions ---

    def update_progress(self, data: Mapping[str, Any]) -> bool:
        """
        Merges `data` into the progress map and re-evaluates completion.
        Returns whether the task is completed after the update.
        """
        self.progress.update(data)

        if self.check_completion() and self.status != TaskStatus.COMPLETED:
            self.complete()

        self._publish("progress", self.progress, self)
        return self.is_completed()

    def check_completion(self) -> bool:
        return False

    def complete(self) -> bool:
        """Marks the task completed. Returns False when nothing changed."""
        if self.status != TaskStatus.ACTIVE:
            return False

        self.status = TaskStatus.COMPLETED
        self.completed_at = time.time()
        self._publish("completed", self)
        return True

    def fail(self) -> bool:
        if self.status != TaskStatus.ACTIVE:
            return False
        self.status = TaskStatus.FAILED
        self._publish("failed", self)
        return True

    def reset(self):
        self.status = TaskStatus.ACTIVE
        self.progress = {}
        self.completed_at = None

    # --- Reporting ---

    def get_progress_percentage(self) -> int:
        return 0

    def get_progress_string(self) -> str:
        return f"{self.get_progress_percentage()}%"

    def is_active(self) -> bool:
        return self.status == TaskStatus.ACTIVE

    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def is_failed(self) -> bool:
        return self.status == TaskStatus.FAILED
