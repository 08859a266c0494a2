# harvest/core/tasks/animal_task.py
from typing import Any, Dict, Iterable, List, Optional

from harvest.config import DEFAULT_ANIMAL_ACTIONS, TASK_KIND_ANIMAL
from harvest.utils.logger import Logger
from .errors import TaskValidationError
from .task import Task, round_percentage

class AnimalTask(Task):
    """Care for one farm animal: every required action (feed, talk, pet...) must be done."""

    def __init__(self,
                 task_id: str,
                 animal_name: Optional[str] = None,
                 location: Optional[str] = None,
                 required_actions: Optional[Iterable[str]] = None,
                 title: Optional[str] = None,
                 description: Optional[str] = None,
                 kind: str = TASK_KIND_ANIMAL,
                 **kwargs: Any):
        self.animal_name = animal_name or task_id

        if title is None:
            title = f"{self.animal_name} Care"
        if description is None:
            description = f"Take care of {self.animal_name}"

        super().__init__(task_id, title=title, description=description, kind=kind, **kwargs)

        self.location = location
        # Ordered and distinct; first occurrence wins
        actions = DEFAULT_ANIMAL_ACTIONS if required_actions is None else required_actions
        self.required_actions: List[str] = list(dict.fromkeys(actions))
        if not self.required_actions:
            raise TaskValidationError(f"Animal task '{task_id}' needs at least one required action")

        self.progress = self._fresh_progress()

    def _fresh_progress(self) -> Dict[str, Any]:
        return {action: False for action in self.required_actions}

    def perform_action(self, action: str) -> bool:
        """
        Marks `action` as done for this animal.
        Returns whether the task is completed after the action.
        """
        if action not in self.required_actions:
            Logger.warning("AnimalTask", f"Action '{action}' is not required for {self.animal_name}")
            return False

        if self.progress.get(action):
            Logger.warning("AnimalTask", f"Action '{action}' has already been performed on {self.animal_name}")
            return False

        return self.update_progress({action: True})

    def check_completion(self) -> bool:
        return all(self.progress.get(action) for action in self.required_actions)

    def reset(self):
        super().reset()
        self.progress = self._fresh_progress()

    def get_progress_percentage(self) -> int:
        done = len(self.get_completed_actions())
        return round_percentage(done / len(self.required_actions) * 100)

    def get_progress_string(self) -> str:
        remaining = self.get_remaining_actions()
        if not remaining:
            return "Completed"
        return f"{self.animal_name}: {' and '.join(remaining)}"

    def get_remaining_actions(self) -> List[str]:
        return [a for a in self.required_actions if not self.progress.get(a)]

    def get_completed_actions(self) -> List[str]:
        return [a for a in self.required_actions if self.progress.get(a)]

    def is_action_completed(self, action: str) -> bool:
        return bool(self.progress.get(action))
