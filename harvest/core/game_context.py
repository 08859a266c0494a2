# harvest/core/game_context.py
"""
Per-session game state shared by the scene and the task system.

Created once when a game session starts and handed, by reference, to the
components that need it. Nothing reads it through a module global.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from harvest.config import DEBUG_SHOW_EXIT_ZONES, DEFAULT_SCENE
from harvest.core.tasks.events import TaskEventEmitter

Position = Tuple[float, float]

@dataclass
class OverlapData:
    """What the player is currently standing next to, if anything."""
    is_active: bool = False
    sprite_id: Optional[str] = None

@dataclass
class GameContext:
    scene_name: str = DEFAULT_SCENE
    previous_scene: Optional[str] = None
    previous_direction: Optional[str] = None
    task_menu_open: bool = False
    show_exit_zones: bool = DEBUG_SHOW_EXIT_ZONES
    overlap: OverlapData = field(default_factory=OverlapData)

    # Sprite id -> world position, kept current by the scene
    sprite_positions: Dict[str, Position] = field(default_factory=dict)

    # Scene-level events for code that predates TaskManager events
    events: TaskEventEmitter = field(default_factory=TaskEventEmitter)

    # Legacy task handles ({"manager": ..., "ui": ...}), installed by TaskSystemIntegration
    tasks: Optional[Dict[str, Any]] = None

    def change_scene(self, scene_name: str, direction: Optional[str] = None):
        if scene_name == self.scene_name:
            return
        self.previous_scene = self.scene_name
        self.previous_direction = direction
        self.scene_name = scene_name

    def set_sprite_position(self, sprite_id: str, x: float, y: float):
        self.sprite_positions[sprite_id] = (x, y)

    def get_sprite_position(self, sprite_id: str) -> Optional[Position]:
        return self.sprite_positions.get(sprite_id)

    def remove_sprite(self, sprite_id: str):
        self.sprite_positions.pop(sprite_id, None)
        if self.overlap.sprite_id == sprite_id:
            self.clear_overlap()

    def set_overlap(self, sprite_id: str):
        self.overlap.is_active = True
        self.overlap.sprite_id = sprite_id

    def clear_overlap(self):
        self.overlap.is_active = False
        self.overlap.sprite_id = None

    def open_task_menu(self):
        self.task_menu_open = True

    def close_task_menu(self):
        self.task_menu_open = False

    def toggle_exit_zones(self) -> bool:
        self.show_exit_zones = not self.show_exit_zones
        return self.show_exit_zones
