# harvest/core/tasks/catalog.py
"""
Declarative task content: which tasks exist and how they are configured.
The records are loaded from JSON once and never mutated; callers receive copies.
"""
import copy
import json
import os
from typing import Any, Dict, Iterable, List, Optional

from harvest.config import (
    STARTER_TASK_IDS, TASK_CATALOG_FILES, TASK_CATEGORIES, TASK_CONFIG_REQUIRED_FIELDS,
    TASK_DATA_DIR, TASK_PRIORITIES, TASK_SETTINGS
)
from harvest.utils.logger import Logger
from .factory import TaskFactory
from .task import Task, TaskConfig

def load_task_templates(data_dir: str, files: Iterable[str] = TASK_CATALOG_FILES) -> Dict[str, Dict[str, Any]]:
    templates: Dict[str, Dict[str, Any]] = {}

    for filename in files:
        path = os.path.join(data_dir, filename)
        if not os.path.exists(path):
            Logger.warning("TaskCatalog", f"Catalog file not found: {path}")
            continue

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            Logger.error("TaskCatalog", f"Error loading {path}: {e}")
            continue

        for task_id, task_data in data.items():
            if task_id in templates:
                Logger.warning("TaskCatalog", f"Overwriting task template '{task_id}' from {filename}")
            templates[task_id] = task_data
        Logger.debug("TaskCatalog", f"Loaded {len(data)} task templates from {filename}")

    return templates

def resolve_priority(priority: Any) -> int:
    """Catalog records name priorities ('normal', 'high'); tasks store the integer."""
    if isinstance(priority, str):
        info = TASK_PRIORITIES.get(priority)
        if info is None:
            Logger.warning("TaskCatalog", f"Unknown priority '{priority}', using 0")
            return 0
        return info["value"]
    return int(priority or 0)

class TaskCatalog:
    def __init__(self, data_dir: str = TASK_DATA_DIR, templates: Optional[Dict[str, Dict[str, Any]]] = None):
        if templates is None:
            templates = load_task_templates(data_dir)
        self._templates = templates
        self.categories = TASK_CATEGORIES
        self.priorities = TASK_PRIORITIES

    def get_animal_task_configs(self) -> Dict[str, Dict[str, Any]]:
        return {tid: copy.deepcopy(rec) for tid, rec in self._templates.items() if rec.get("kind") == "animal"}

    def get_task_config(self, task_id: str) -> Optional[Dict[str, Any]]:
        record = self._templates.get(task_id)
        return copy.deepcopy(record) if record is not None else None

    def get_tasks_by_category(self, category_name: str) -> List[Dict[str, Any]]:
        return [
            {"id": tid, **copy.deepcopy(rec)}
            for tid, rec in self._templates.items()
            if rec.get("category") == category_name
        ]

    def get_tasks_by_priority(self, priority: str) -> List[Dict[str, Any]]:
        return [
            {"id": tid, **copy.deepcopy(rec)}
            for tid, rec in self._templates.items()
            if rec.get("priority") == priority
        ]

    def to_task_config(self, task_id: str) -> Optional[TaskConfig]:
        """The catalog record for `task_id` as a TaskConfig ready for the factory."""
        record = self.get_task_config(task_id)
        if record is None:
            return None
        kind = record.pop("kind", None) or record.pop("type", "basic")
        record["priority"] = resolve_priority(record.get("priority", 0))
        return TaskConfig(kind=kind, task_id=task_id, fields=record)

    def create_tasks_from_config(self, task_ids: Iterable[str]) -> List[Task]:
        """Builds the listed tasks, skipping (and logging) any that cannot be built."""
        tasks = []
        for task_id in task_ids:
            config = self.to_task_config(task_id)
            if config is None:
                Logger.warning("TaskCatalog", f"Task configuration not found: {task_id}")
                continue
            try:
                tasks.append(TaskFactory.create_from_config(config))
            except Exception as e:
                Logger.error("TaskCatalog", f"Failed to create task {task_id}: {e}")
        return tasks

    def get_starter_tasks(self) -> List[str]:
        return list(STARTER_TASK_IDS)

    def validate_task_config(self, task_config: Dict[str, Any]) -> bool:
        return all(f in task_config for f in TASK_CONFIG_REQUIRED_FIELDS)

    def get_category_info(self, category_name: str) -> Optional[Dict[str, Any]]:
        return self.categories.get(category_name)

    def get_priority_info(self, priority_name: str) -> Optional[Dict[str, Any]]:
        return self.priorities.get(priority_name)

    def get_settings(self) -> Dict[str, Any]:
        return dict(TASK_SETTINGS)

    def task_ids(self) -> List[str]:
        return list(self._templates.keys())
