# harvest/core/tasks/integration.py
"""
Glue between the TaskManager and the rest of the game.

Older scene code talks to `context.tasks["manager"]` / `context.tasks["ui"]`
with direct method calls; this module provides those handles on top of the
TaskManager, and turns manager events into indicator and message updates.
"""
from typing import Any, Dict, List, Optional, Union

import pygame

from harvest.config import (
    INDICATOR_OFFSET_Y, INTEGRATION_MAX_COMPLETED_TASKS, TASK_DISPLAY_LEGACY_MAX_TASKS, TASK_KIND_ANIMAL
)
from harvest.core.game_context import GameContext
from harvest.ui.floating_text import MessageDisplay
from harvest.ui.task_indicator import IndicatorManager, color_for_progress
from harvest.ui.task_panel import TaskPanel
from harvest.utils.logger import Logger
from .catalog import TaskCatalog
from .manager import TaskManager
from .task import Task, TaskConfig

class LegacyTaskManagerProxy:
    """The call shape scene code used before TaskManager existed."""

    def __init__(self, integration: 'TaskSystemIntegration'):
        self._integration = integration

    @property
    def _manager(self) -> TaskManager:
        return self._integration.task_manager

    def handle_animal_task(self, animal_name: str) -> bool:
        """Performs the next outstanding action for `animal_name`."""
        task = self._manager.active_tasks.get(animal_name)
        if task is None or task.kind != TASK_KIND_ANIMAL:
            return False
        remaining = task.get_remaining_actions()
        if not remaining:
            return False
        return self._manager.handle_animal_interaction(animal_name, remaining[0])

    def handle_animal_interaction(self, animal_name: str, action: Optional[str] = None) -> bool:
        return self._integration.handle_animal_interaction(animal_name, action)

    def get_progress(self) -> Dict[str, int]:
        return self._manager.get_overall_progress()

    def get_active_tasks(self) -> List[Dict[str, Any]]:
        return self._manager.get_tasks_for_display(max_tasks=TASK_DISPLAY_LEGACY_MAX_TASKS, include_completed=False)

    def has_active_tasks_for_target(self, target_name: str) -> bool:
        return self._manager.has_active_tasks_for_target(target_name)

    @property
    def animal_tasks(self) -> Dict[str, Dict[str, bool]]:
        return {
            task.id: {
                "feed": task.is_action_completed("feed"),
                "talk": task.is_action_completed("talk"),
            }
            for task in self._manager.get_tasks_by_type(TASK_KIND_ANIMAL)
        }

    def are_all_animals_complete(self) -> bool:
        return all(task.is_completed() for task in self._manager.get_tasks_by_type(TASK_KIND_ANIMAL))

    def show_message(self, message: str):
        self._integration.show_task_message(message)

    def remove_indicator(self, task_id: str):
        self._integration.remove_task_indicator(task_id)

    def update_scene(self, scene_name: str):
        self._manager.update_scene(scene_name)

    def destroy(self):
        self._integration.destroy()

class LegacyTaskUIProxy:
    def __init__(self, panel: TaskPanel):
        self._panel = panel

    def toggle(self) -> bool:
        return self._panel.toggle()

    def show(self):
        self._panel.show()

    def hide(self):
        self._panel.hide()

    def get_visibility(self) -> bool:
        return self._panel.get_visibility()

    def destroy(self):
        self._panel.destroy()

class TaskSystemIntegration:
    def __init__(self, context: GameContext,
                 catalog: Optional[TaskCatalog] = None,
                 manager_config: Optional[Dict[str, Any]] = None,
                 load_defaults: bool = True):
        self.context = context
        self.catalog = catalog if catalog is not None else TaskCatalog()

        self.indicator_manager = IndicatorManager()
        self.message_display = MessageDisplay()

        config: Dict[str, Any] = {"max_completed_tasks": INTEGRATION_MAX_COMPLETED_TASKS}
        if manager_config:
            config.update(manager_config)
        self.task_manager = TaskManager(config, context=context)

        self._setup_event_forwarding()
        self.task_ui = TaskPanel(self.task_manager, context)

        if load_defaults:
            self.load_default_tasks()

        self.manager_proxy = LegacyTaskManagerProxy(self)
        self.ui_proxy = LegacyTaskUIProxy(self.task_ui)
        context.tasks = {"manager": self.manager_proxy, "ui": self.ui_proxy}

    def load_default_tasks(self) -> List[Task]:
        if self.task_manager.active_tasks:
            return []  # Already has tasks

        starter_ids = self.catalog.get_starter_tasks()
        starter_tasks = self.catalog.create_tasks_from_config(starter_ids)
        for task in starter_tasks:
            self.task_manager.add_task(task)
            self.create_task_indicator(task)

        Logger.info("TaskSystem", f"Loaded {len(starter_tasks)} starter tasks")
        return starter_tasks

    # --- Event forwarding ---

    def _setup_event_forwarding(self):
        self.task_manager.on("task:completed", self._on_task_completed)
        self.task_manager.on("task:progress", self._on_task_progress)
        self.task_manager.on("animal:interaction", self._on_animal_interaction)

    def _on_task_completed(self, task: Task):
        self.context.events.emit("task_completed", task)
        self.remove_task_indicator(task.id)

    def _on_task_progress(self, task: Task, progress: Dict[str, Any]):
        self.context.events.emit("task_progress", task, progress)
        self.update_task_indicator(task.id)

    def _on_animal_interaction(self, animal_name: str, action: str, task: Task):
        self.context.events.emit("animal_interaction", animal_name, action, task)

    # --- Indicators ---

    def create_task_indicator(self, task: Task, should_glow: Optional[bool] = None) -> bool:
        position = self.context.get_sprite_position(task.id)
        if position is None:
            return False

        if should_glow is None:
            should_glow = task.is_active()

        x, y = position
        self.indicator_manager.create_indicator(task.id, x, y + INDICATOR_OFFSET_Y,
                                                glowing=should_glow, task_type=task.kind)
        return True

    def update_task_indicator(self, task_id: str):
        task = self.task_manager.get_task(task_id)
        if task is None:
            return

        if task.is_completed():
            self.indicator_manager.set_indicator_glowing(task_id, False)
        else:
            color = color_for_progress(task.get_progress_percentage())
            self.indicator_manager.update_indicator(task_id, color=color, glowing=True)

    def remove_task_indicator(self, task_id: str):
        self.indicator_manager.remove_indicator(task_id)

    def sync_indicators_with_tasks(self):
        """Makes the indicator set match the active tasks whose sprites are on screen."""
        active_ids = set()
        for task in self.task_manager.get_active_tasks():
            active_ids.add(task.id)
            if self.indicator_manager.get_indicator(task.id) is None:
                self.create_task_indicator(task)
            else:
                self.update_task_indicator(task.id)

        for task_id in list(self.indicator_manager.indicators.keys()):
            if task_id not in active_ids:
                self.remove_task_indicator(task_id)

    # --- Messages ---

    def show_task_message(self, message: str, message_type: str = "info"):
        self.message_display.show(message, message_type)

    # --- Legacy entry points ---

    def handle_animal_interaction(self, animal_name: str, action: Optional[str] = None) -> bool:
        """
        Handles the player interacting with an animal. Without an explicit
        action the next outstanding one is used.
        """
        task = self.task_manager.active_tasks.get(animal_name)
        if task is None or task.kind != TASK_KIND_ANIMAL:
            Logger.warning("TaskSystem", f"Animal task not found: {animal_name}")
            return False

        if not action:
            remaining = task.get_remaining_actions()
            action = remaining[0] if remaining else "talk"

        if task.is_action_completed(action) or action not in task.required_actions:
            self.show_task_message(f"{animal_name} doesn't need that right now.", "warning")
            return self.task_manager.handle_animal_interaction(animal_name, action)

        was_completed = self.task_manager.handle_animal_interaction(animal_name, action)
        self.show_task_message(f"You {action} {animal_name}!", "success")

        if was_completed:
            self.remove_task_indicator(animal_name)
            self.show_task_message(f"{animal_name} is happy for today!", "success")

        return was_completed

    def get_compatible_progress(self) -> Dict[str, int]:
        progress = self.task_manager.get_overall_progress()
        return {
            "completed": progress["completed"],
            "total": progress["total"],
            "percentage": progress["percentage"],
        }

    def get_compatible_active_tasks(self) -> List[Dict[str, Any]]:
        return [
            {
                "id": row["id"],
                "instruction": row["progress_string"] or row["title"],
                "type": row["kind"],
            }
            for row in self.task_manager.get_tasks_for_display(
                max_tasks=TASK_DISPLAY_LEGACY_MAX_TASKS, include_completed=False)
        ]

    def add_task(self, task_config: Union[Task, TaskConfig]) -> Task:
        task = self.task_manager.add_task(task_config)
        self.create_task_indicator(task)
        return task

    def toggle_ui(self) -> bool:
        return self.task_ui.toggle()

    def is_system_active(self) -> bool:
        return not self.task_manager.is_destroyed

    # --- Frame hooks ---

    def update(self, dt: float):
        self.message_display.update(dt)
        self.indicator_manager.update(dt)

    def draw(self, screen: pygame.Surface, camera_offset=(0, 0)):
        self.indicator_manager.draw(screen, camera_offset)
        self.task_ui.draw(screen)
        self.message_display.draw(screen)

    def destroy(self):
        self.indicator_manager.clear()
        self.message_display.clear()
        self.task_ui.destroy()
        self.task_manager.destroy()
        self.context.tasks = None
