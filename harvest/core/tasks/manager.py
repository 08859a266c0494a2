# harvest/core/tasks/manager.py
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from harvest.config import (
    DEBUG_TASK_LOGGING, MAX_COMPLETED_TASKS, TASK_DISPLAY_MAX_TASKS, TASK_KIND_ANIMAL, TASK_KIND_COLLECTION, TASK_LOG_SOURCE
)
from harvest.utils.logger import Logger
from .errors import TaskError, TaskValidationError
from .events import TaskEventEmitter
from .factory import TaskFactory, missing_capabilities
from .task import Task, TaskConfig, round_percentage, task_event_name

if TYPE_CHECKING:
    from harvest.core.game_context import GameContext

# Sort keys for get_tasks_for_display; every ordering is descending.
_DISPLAY_SORT_KEYS: Dict[str, Callable[[Any], Any]] = {
    "priority": lambda t: t.priority,
    "created_at": lambda t: t.created_at,
    "progress": lambda t: t.get_progress_percentage(),
}

class TaskManager(TaskEventEmitter):
    """
    Owns every live task for one game session.

    Game-world code reports interactions here by task id; the manager applies
    them to the right task and broadcasts the outcome as events
    (task:added, task:progress, task:completed, ...). Gameplay calls never
    raise: a missing task or a mismatched kind is logged and reported as False.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, context: Optional['GameContext'] = None):
        super().__init__()

        self.context = context
        self.config: Dict[str, Any] = {
            "max_completed_tasks": MAX_COMPLETED_TASKS,
            "enable_logging": DEBUG_TASK_LOGGING,
        }
        if config:
            self.config.update(config)

        # Task collections (dicts keep insertion order, which drives eviction)
        self.active_tasks: Dict[str, Task] = {}
        self.completed_tasks: Dict[str, Task] = {}

        # Tasks publish here under their own id; see _attach
        self._task_bus = TaskEventEmitter()

        self.is_initialized = False
        self.is_destroyed = False
        self.current_scene: Optional[str] = context.scene_name if context else None
        self.statistics = {
            "total_tasks_created": 0,
            "total_tasks_completed": 0,
            "total_tasks_failed": 0,
        }

        self.initialize()

    def initialize(self):
        if self.is_initialized:
            return
        self.is_initialized = True
        self.emit("manager:initialized", self)
        self._log("Task Manager initialized")

    # --- Collection management ---

    def add_task(self, task: Union[Task, TaskConfig]) -> Task:
        """
        Adds a live task, or builds one from a TaskConfig first.
        Construction problems raise; they mean the content is broken.
        """
        if isinstance(task, TaskConfig):
            task = TaskFactory.create_from_config(task)
        else:
            missing = missing_capabilities(task)
            if missing:
                raise TypeError(f"add_task expects a Task or TaskConfig, got {task!r}")

        if not task.is_active():
            raise TaskValidationError(f"Task '{task.id}' is {task.status}; only active tasks can be added")

        # An id lives in at most one collection; re-adding a finished id starts it over
        finished = self.completed_tasks.pop(task.id, None)
        if finished is not None and finished is not task:
            self._detach(finished)

        existing = self.active_tasks.get(task.id)
        if existing is not None and existing is not task:
            self._log(f"Replacing active task with duplicate id: {task.id}", "warning")
            self._detach(existing)

        self._attach(task)
        self.active_tasks[task.id] = task
        self.statistics["total_tasks_created"] += 1

        self.emit("task:added", task)
        self._log(f"Task added: {task.id} ({task.kind})")
        return task

    def add_tasks(self, configs: Iterable[Union[Task, TaskConfig, Mapping[str, Any]]]) -> List[Task]:
        """Adds each entry in order, skipping (with a warning) any that cannot be built."""
        added = []
        for entry in configs:
            try:
                if isinstance(entry, Mapping):
                    entry = TaskConfig.from_dict(entry)
                added.append(self.add_task(entry))
            except (TaskError, TypeError) as e:
                self._log(f"Skipping task that could not be created: {e}", "warning")
        return added

    def remove_task(self, task_id: str) -> bool:
        task = self.active_tasks.pop(task_id, None)
        if task is None:
            self._log(f"Task not found for removal: {task_id}", "warning")
            return False

        self._detach(task)
        self.emit("task:removed", task)
        self._log(f"Task removed: {task_id}")
        return True

    def get_task(self, task_id: str) -> Optional[Task]:
        task = self.active_tasks.get(task_id)
        if task is None:
            task = self.completed_tasks.get(task_id)
        return task

    def get_active_tasks(self) -> List[Task]:
        return [task for task in self.active_tasks.values() if task.is_active()]

    def get_all_tasks(self) -> List[Task]:
        return list(self.active_tasks.values())

    def get_completed_tasks(self) -> List[Task]:
        return list(self.completed_tasks.values())

    def has_active_tasks_for_target(self, target_name: str) -> bool:
        task = self.active_tasks.get(target_name)
        return task is not None and task.is_active()

    def get_tasks_by_type(self, kind: str) -> List[Task]:
        return [task for task in self.active_tasks.values() if task.kind == kind]

    # --- Gameplay entry points ---

    def update_task_progress(self, task_id: str, progress_data: Mapping[str, Any]) -> bool:
        """Applies raw progress data; the task's own progress notification becomes task:progress."""
        task = self.active_tasks.get(task_id)
        if task is None:
            self._log(f"Task not found for progress update: {task_id}", "warning")
            return False

        return task.update_progress(progress_data)

    def handle_animal_interaction(self, animal_name: str, action: str) -> bool:
        task = self.active_tasks.get(animal_name)
        if task is None or task.kind != TASK_KIND_ANIMAL or not callable(getattr(task, "perform_action", None)):
            self._log(f"Animal task not found: {animal_name}", "warning")
            return False

        completed = task.perform_action(action)
        self.emit("animal:interaction", animal_name, action, task)
        return completed

    def handle_item_collection(self, task_id: str, item: Any, amount: int = 1, location: Optional[str] = None) -> bool:
        task = self.active_tasks.get(task_id)
        if task is None or task.kind != TASK_KIND_COLLECTION or not callable(getattr(task, "collect_item", None)):
            self._log(f"Collection task not found: {task_id}", "warning")
            return False

        completed = task.collect_item(item, amount, location)
        self.emit("item:collected", task_id, item, amount, location, task)
        return completed

    def complete_task(self, task_id: str) -> bool:
        task = self.get_task(task_id)
        if task is None:
            self._log(f"Task not found for completion: {task_id}", "warning")
            return False

        task.complete()
        return True

    def fail_task(self, task_id: str) -> bool:
        task = self.active_tasks.get(task_id)
        if task is None:
            self._log(f"Task not found for failure: {task_id}", "warning")
            return False

        return task.fail()

    def reset_task(self, task_id: str) -> bool:
        """
        Restarts a task from scratch. A completed task is taken out of the
        completed history and becomes active again; statistics are untouched.
        """
        task = self.completed_tasks.pop(task_id, None)
        if task is not None:
            task.reset()
            self.active_tasks[task_id] = task
        else:
            task = self.active_tasks.get(task_id)
            if task is None:
                self._log(f"Task not found for reset: {task_id}", "warning")
                return False
            task.reset()

        self.emit("task:reset", task)
        self._log(f"Task reset: {task_id}")
        return True

    # --- Reporting ---

    def get_overall_progress(self) -> Dict[str, int]:
        active_tasks = self.get_active_tasks()
        total_active = len(active_tasks)
        completed = self.statistics["total_tasks_completed"]
        total = total_active + completed

        if total == 0:
            return {"completed": 0, "total": 1, "active": 0, "percentage": 0}

        # Completed tasks are worth 100 points each, active ones their own percentage
        points = completed * 100 + sum(task.get_progress_percentage() for task in active_tasks)
        percentage = round_percentage(points / (total * 100) * 100)

        return {
            "completed": completed,
            "total": total,
            "active": total_active,
            "percentage": percentage,
        }

    def get_tasks_for_display(self,
                              include_completed: bool = False,
                              max_tasks: int = TASK_DISPLAY_MAX_TASKS,
                              sort_by: str = "priority",
                              filter_type: Optional[str] = None) -> List[Dict[str, Any]]:
        tasks = self.get_active_tasks()
        if include_completed:
            tasks += self.get_completed_tasks()

        if filter_type:
            tasks = [task for task in tasks if task.kind == filter_type]

        sort_key = _DISPLAY_SORT_KEYS.get(sort_by)
        if sort_key is not None:
            tasks = sorted(tasks, key=sort_key, reverse=True)

        return [
            {
                "id": task.id,
                "kind": task.kind,
                "title": task.title,
                "description": task.description,
                "status": task.status,
                "progress": task.get_progress_percentage(),
                "progress_string": task.get_progress_string(),
                "priority": task.priority,
            }
            for task in tasks[:max(0, max_tasks)]
        ]

    def update_scene(self, scene_name: str):
        self.current_scene = scene_name
        if self.context is not None:
            self.context.change_scene(scene_name)
        self.emit("scene:changed", scene_name)
        self._log(f"Scene changed to: {scene_name}")

    # --- Task notification routing ---

    def _attach(self, task: Task):
        # One routing subscription per id, however often the id is re-added
        self._unsubscribe(task.id)
        task.bind_events(self._task_bus)
        self._task_bus.on(task_event_name(task.id, "progress"), self._on_task_progress)
        self._task_bus.on(task_event_name(task.id, "completed"), self._on_task_completed)
        self._task_bus.on(task_event_name(task.id, "failed"), self._on_task_failed)

    def _unsubscribe(self, task_id: str):
        self._task_bus.remove_all_listeners(task_event_name(task_id, "progress"))
        self._task_bus.remove_all_listeners(task_event_name(task_id, "completed"))
        self._task_bus.remove_all_listeners(task_event_name(task_id, "failed"))

    def _detach(self, task: Task):
        self._unsubscribe(task.id)
        task.bind_events(TaskEventEmitter())

    def _on_task_progress(self, progress: Dict[str, Any], task: Task):
        self.emit("task:progress", task, progress)

    def _on_task_completed(self, task: Task):
        if self.active_tasks.get(task.id) is not task:
            return

        # Move to completed history; re-inserting puts it at the young end
        del self.active_tasks[task.id]
        stale = self.completed_tasks.pop(task.id, None)
        if stale is not None and stale is not task:
            # The id's routing still belongs to `task`; only cut the stale one loose
            stale.bind_events(TaskEventEmitter())
        self.completed_tasks[task.id] = task
        self.statistics["total_tasks_completed"] += 1

        cap = self.config["max_completed_tasks"]
        while len(self.completed_tasks) > cap:
            oldest_id = next(iter(self.completed_tasks))
            self._detach(self.completed_tasks.pop(oldest_id))

        self.emit("task:completed", task)
        self._log(f"Task completed: {task.id} ({task.kind})")

    def _on_task_failed(self, task: Task):
        if self.active_tasks.get(task.id) is not task:
            return

        del self.active_tasks[task.id]
        self._detach(task)
        self.statistics["total_tasks_failed"] += 1

        self.emit("task:failed", task)
        self._log(f"Task failed: {task.id} ({task.kind})")

    # --- Misc ---

    def _log(self, message: str, level: str = "info"):
        if not self.config.get("enable_logging", True):
            return
        if self.current_scene:
            message = f"[{self.current_scene}] {message}"
        getattr(Logger, level, Logger.info)(TASK_LOG_SOURCE, message)

    def destroy(self):
        """Clears every listener and task. The manager is unusable afterwards."""
        self.remove_all_listeners()

        for task in list(self.active_tasks.values()) + list(self.completed_tasks.values()):
            self._detach(task)
        self._task_bus.remove_all_listeners()

        self.active_tasks.clear()
        self.completed_tasks.clear()
        self.is_destroyed = True

        self._log("Task Manager destroyed")
