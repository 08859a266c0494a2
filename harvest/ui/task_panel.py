# harvest/ui/task_panel.py
import pygame
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from harvest.config import (
    SCREEN_WIDTH, TASK_PANEL_BG_COLOR, TASK_PANEL_BORDER_COLOR, TASK_PANEL_MARGIN,
    TASK_PANEL_MAX_HEIGHT, TASK_PANEL_MAX_VISIBLE_TASKS, TASK_PANEL_MUTED_COLOR,
    TASK_PANEL_ROW_HEIGHT, TASK_PANEL_TEXT_COLOR, TASK_PANEL_TITLE_COLOR, TASK_PANEL_WIDTH
)

if TYPE_CHECKING:
    from harvest.core.game_context import GameContext
    from harvest.core.tasks.manager import TaskManager

HEADER_HEIGHT = 28

# Manager events that make the cached rows stale
_REFRESH_EVENTS = ("task:added", "task:removed", "task:progress", "task:completed", "task:failed", "task:reset")

class TaskPanel:
    """
    The task overlay in the top-right corner.

    Rows are rebuilt from TaskManager.get_tasks_for_display whenever the
    manager reports a change, so drawing never touches live task objects.
    """

    def __init__(self, manager: 'TaskManager',
                 context: Optional['GameContext'] = None,
                 width: int = TASK_PANEL_WIDTH,
                 max_visible_tasks: int = TASK_PANEL_MAX_VISIBLE_TASKS,
                 show_progress: bool = True):
        self.manager = manager
        self.context = context
        self.width = width
        self.max_visible_tasks = max_visible_tasks
        self.show_progress = show_progress

        self.is_visible = False
        self.rows: List[Dict[str, Any]] = []
        self.summary: Dict[str, int] = manager.get_overall_progress()

        self._fonts: Optional[Dict[str, pygame.font.Font]] = None

        for event in _REFRESH_EVENTS:
            manager.on(event, self._on_manager_change)
        self.refresh()

    def _on_manager_change(self, *args):
        self.refresh()

    def refresh(self):
        self.rows = self.manager.get_tasks_for_display(max_tasks=self.max_visible_tasks)
        self.summary = self.manager.get_overall_progress()

    # --- Visibility ---

    def show(self):
        self.is_visible = True
        if self.context is not None:
            self.context.open_task_menu()
        self.refresh()

    def hide(self):
        self.is_visible = False
        if self.context is not None:
            self.context.close_task_menu()

    def toggle(self) -> bool:
        if self.is_visible:
            self.hide()
        else:
            self.show()
        return self.is_visible

    def get_visibility(self) -> bool:
        return self.is_visible

    # --- Drawing ---

    def header_text(self) -> str:
        if not self.show_progress:
            return "Tasks"
        return f"Tasks {self.summary['completed']}/{self.summary['total']} ({self.summary['percentage']}%)"

    def row_lines(self) -> List[str]:
        if not self.rows:
            return ["All tasks completed!"]
        return [f"- {row['progress_string']}" for row in self.rows]

    def _get_fonts(self) -> Dict[str, pygame.font.Font]:
        if self._fonts is None:
            if not pygame.font.get_init():
                pygame.font.init()
            self._fonts = {
                "title": pygame.font.Font(None, 24),
                "row": pygame.font.Font(None, 18),
            }
        return self._fonts

    def draw(self, screen: pygame.Surface):
        if not self.is_visible:
            return
        fonts = self._get_fonts()
        lines = self.row_lines()

        height = min(TASK_PANEL_MAX_HEIGHT, HEADER_HEIGHT + len(lines) * TASK_PANEL_ROW_HEIGHT + 10)
        x = (screen.get_width() or SCREEN_WIDTH) - self.width - TASK_PANEL_MARGIN
        rect = pygame.Rect(x, TASK_PANEL_MARGIN, self.width, height)

        pygame.draw.rect(screen, TASK_PANEL_BG_COLOR, rect)
        pygame.draw.rect(screen, TASK_PANEL_BORDER_COLOR, rect, 2)

        title_surf = fonts["title"].render(self.header_text(), True, TASK_PANEL_TITLE_COLOR)
        screen.blit(title_surf, (rect.x + 8, rect.y + (HEADER_HEIGHT - title_surf.get_height()) // 2))

        color = TASK_PANEL_TEXT_COLOR if self.rows else TASK_PANEL_MUTED_COLOR
        y = rect.y + HEADER_HEIGHT
        for line in lines:
            if y + TASK_PANEL_ROW_HEIGHT > rect.bottom:
                break
            screen.blit(fonts["row"].render(line, True, color), (rect.x + 10, y))
            y += TASK_PANEL_ROW_HEIGHT

    def destroy(self):
        for event in _REFRESH_EVENTS:
            self.manager.off(event, self._on_manager_change)
        self.is_visible = False
        self.rows = []
